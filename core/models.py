"""Typed dataclasses for Pausa data model.

Records use from_dict/to_dict for JSON/YAML serialization.
camelCase in JSON is mapped to snake_case in Python.
Unknown keys are ignored; optional keys use defaults.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any


# ── Breathing ─────────────────────────────────────────────────


class Phase(Enum):
    """One timed segment of a breathing cycle, in session order."""

    INHALE = "inhale"
    HOLD = "hold"
    EXHALE = "exhale"

    def next(self) -> Phase | None:
        """Following phase, or None once the cycle is over."""
        order = list(Phase)
        idx = order.index(self)
        return order[idx + 1] if idx + 1 < len(order) else None

    @property
    def label(self) -> str:
        return self.value.upper()


class VisualPosition(Enum):
    """Where the breathing marker sits on the triangle."""

    START = "start"
    RIGHT = "right"
    BOTTOM = "bottom"
    LEFT = "left"


_PHASE_POSITIONS = {
    Phase.INHALE: VisualPosition.RIGHT,
    Phase.HOLD: VisualPosition.BOTTOM,
    Phase.EXHALE: VisualPosition.LEFT,
}

# (min, max) seconds accepted for a custom triple
INHALE_RANGE = (1, 10)
HOLD_RANGE = (1, 15)
EXHALE_RANGE = (1, 15)


def _clamp(value: int, bounds: tuple[int, int]) -> int:
    lo, hi = bounds
    return max(lo, min(int(value), hi))


@dataclass(frozen=True)
class PhaseDurations:
    """Seconds spent in each phase."""

    inhale: int
    hold: int
    exhale: int

    def __post_init__(self) -> None:
        for name in ("inhale", "hold", "exhale"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")

    @classmethod
    def custom(cls, inhale: int, hold: int, exhale: int) -> PhaseDurations:
        """Build a user-defined triple, clamping each value into its range."""
        return cls(
            inhale=_clamp(inhale, INHALE_RANGE),
            hold=_clamp(hold, HOLD_RANGE),
            exhale=_clamp(exhale, EXHALE_RANGE),
        )

    def clamped(self) -> PhaseDurations:
        return PhaseDurations.custom(self.inhale, self.hold, self.exhale)

    def duration(self, phase: Phase) -> int:
        return {
            Phase.INHALE: self.inhale,
            Phase.HOLD: self.hold,
            Phase.EXHALE: self.exhale,
        }[phase]

    @property
    def total_seconds(self) -> int:
        return self.inhale + self.hold + self.exhale

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.inhale, self.hold, self.exhale)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> PhaseDurations:
        return cls.custom(
            inhale=int(d.get("inhale", 4)),
            hold=int(d.get("hold", 7)),
            exhale=int(d.get("exhale", 8)),
        )

    def to_dict(self) -> dict[str, int]:
        return {"inhale": self.inhale, "hold": self.hold, "exhale": self.exhale}


class BreathingPreset(Enum):
    CLASSIC = "classic"
    FAST = "fast"
    DEEP = "deep"
    CUSTOM = "custom"

    @property
    def label(self) -> str:
        return _PRESET_LABELS[self]

    @property
    def durations(self) -> PhaseDurations | None:
        """Fixed triple for the built-in presets; None for CUSTOM."""
        return _PRESET_DURATIONS.get(self)


_PRESET_DURATIONS = {
    BreathingPreset.CLASSIC: PhaseDurations(4, 7, 8),
    BreathingPreset.FAST: PhaseDurations(3, 4, 5),
    BreathingPreset.DEEP: PhaseDurations(5, 10, 10),
}

_PRESET_LABELS = {
    BreathingPreset.CLASSIC: "Classic (4-7-8)",
    BreathingPreset.FAST: "Fast (3-4-5)",
    BreathingPreset.DEEP: "Deep (5-10-10)",
    BreathingPreset.CUSTOM: "Custom",
}


@dataclass(frozen=True)
class SessionState:
    """Snapshot of a breathing session, safe to hand to a renderer."""

    is_running: bool = False
    current_phase: Phase = Phase.INHALE
    seconds_remaining: int = 0

    @property
    def visual_position(self) -> VisualPosition:
        if not self.is_running:
            return VisualPosition.START
        return _PHASE_POSITIONS[self.current_phase]

    def to_dict(self) -> dict[str, Any]:
        return {
            "isRunning": self.is_running,
            "currentPhase": self.current_phase.value,
            "secondsRemaining": self.seconds_remaining,
            "visualPosition": self.visual_position.value,
        }


# ── Tasks ─────────────────────────────────────────────────────


def new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Task:
    id: str = field(default_factory=new_id)
    title: str = ""
    subject: str = ""
    due_date: date | None = None
    is_completed: bool = False

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Task:
        due = d.get("dueDate")
        completed = d.get("isCompleted", False)
        if not isinstance(completed, bool):
            raise TypeError(f"isCompleted must be boolean, got {completed!r}")
        return cls(
            id=str(d["id"]),
            title=str(d.get("title", "")),
            subject=str(d.get("subject", "")),
            due_date=date.fromisoformat(due) if due else None,
            is_completed=completed,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "subject": self.subject,
            "dueDate": self.due_date.isoformat() if self.due_date else None,
            "isCompleted": self.is_completed,
        }


# ── Diary ─────────────────────────────────────────────────────


class Feeling(Enum):
    """Predominant mood tagged on a diary entry."""

    HAPPY = "happy"
    WORRIED = "worried"
    SAD = "sad"
    ANGRY = "angry"
    ANXIOUS = "anxious"
    RELAXED = "relaxed"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def color(self) -> str:
        return _FEELING_COLORS[self]


_FEELING_COLORS = {
    Feeling.HAPPY: "yellow",
    Feeling.WORRIED: "purple",
    Feeling.SAD: "blue",
    Feeling.ANGRY: "red",
    Feeling.ANXIOUS: "green",
    Feeling.RELAXED: "cyan",
}


@dataclass
class DiaryEntry:
    date: datetime
    text: str = ""
    feeling: Feeling = Feeling.RELAXED
    id: str = field(default_factory=new_id)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> DiaryEntry:
        return cls(
            id=str(d["id"]),
            date=datetime.fromisoformat(d["date"]),
            text=str(d.get("text", "")),
            feeling=Feeling(d["feeling"]),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "text": self.text,
            "feeling": self.feeling.value,
        }


# ── Settings ──────────────────────────────────────────────────


@dataclass
class Settings:
    timezone: str = "UTC"
    breathing_preset: BreathingPreset = BreathingPreset.CLASSIC
    custom_durations: PhaseDurations = field(default_factory=lambda: PhaseDurations(4, 7, 8))
    log_level: str = "INFO"
    log_json: bool = False

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Settings:
        if not d or not isinstance(d, dict):
            return cls()
        defaults = cls()

        breathing = d.get("breathing") or {}
        if not isinstance(breathing, dict):
            breathing = {}
        try:
            preset = BreathingPreset(str(breathing.get("preset", "classic")).lower())
        except ValueError:
            preset = defaults.breathing_preset
        custom = breathing.get("custom")
        try:
            durations = PhaseDurations.from_dict(custom) if isinstance(custom, dict) else defaults.custom_durations
        except (TypeError, ValueError):
            durations = defaults.custom_durations

        logging_cfg = d.get("logging") or {}
        if not isinstance(logging_cfg, dict):
            logging_cfg = {}

        return cls(
            timezone=str(d.get("timezone", defaults.timezone)),
            breathing_preset=preset,
            custom_durations=durations,
            log_level=str(logging_cfg.get("level", defaults.log_level)).upper(),
            log_json=bool(logging_cfg.get("json", defaults.log_json)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "timezone": self.timezone,
            "breathing": {
                "preset": self.breathing_preset.value,
                "custom": self.custom_durations.to_dict(),
            },
            "logging": {"level": self.log_level, "json": self.log_json},
        }

    def breathing_selection(self) -> BreathingPreset | PhaseDurations:
        """What to hand to BreathingSessionController.configure()."""
        if self.breathing_preset is BreathingPreset.CUSTOM:
            return self.custom_durations
        return self.breathing_preset
