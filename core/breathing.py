"""Guided breathing session state machine for Pausa.

The controller walks Inhale -> Hold -> Exhale once per session, one second
per ``tick()``. It never sleeps or schedules anything itself: the host
(a Textual interval, a browser timer) calls ``tick()`` once a second and
re-renders from the returned SessionState.
"""

from __future__ import annotations

from core.logging_config import get_logger
from core.models import (
    BreathingPreset,
    Phase,
    PhaseDurations,
    SessionState,
    VisualPosition,
)

logger = get_logger(__name__)

DEFAULT_CUSTOM = PhaseDurations(4, 7, 8)


# ── Display hints ─────────────────────────────────────────────

_PHASE_COLORS = {
    Phase.INHALE: "blue",
    Phase.HOLD: "purple",
    Phase.EXHALE: "pink",
}

_POSITION_GLYPHS = {
    VisualPosition.START: "🧘",
    VisualPosition.RIGHT: "😤",
    VisualPosition.BOTTOM: "😬",
    VisualPosition.LEFT: "😮‍💨",
}


def background_color(state: SessionState) -> str:
    if not state.is_running:
        return "blue"
    return _PHASE_COLORS[state.current_phase]


def marker_glyph(state: SessionState) -> str:
    return _POSITION_GLYPHS[state.visual_position]


def render_hints(state: SessionState) -> dict[str, str]:
    """Derived presentation values for a state; never stored separately."""
    return {
        "phaseLabel": state.current_phase.label,
        "backgroundColor": background_color(state),
        "marker": marker_glyph(state),
    }


# ── Controller ────────────────────────────────────────────────


def resolve_durations(
    selection: BreathingPreset | PhaseDurations,
    custom: PhaseDurations | None = None,
) -> tuple[BreathingPreset, PhaseDurations]:
    """Turn a preset or custom triple into (preset, concrete durations).

    Custom values are clamped into their allowed ranges.
    """
    if isinstance(selection, PhaseDurations):
        return BreathingPreset.CUSTOM, selection.clamped()
    if selection is BreathingPreset.CUSTOM:
        return BreathingPreset.CUSTOM, (custom or DEFAULT_CUSTOM).clamped()
    fixed = selection.durations
    if fixed is None:
        raise ValueError(f"Preset has no fixed durations: {selection}")
    return selection, fixed


class BreathingSessionController:
    """Idle -> Inhaling -> Holding -> Exhaling -> Idle."""

    def __init__(self, selection: BreathingPreset | PhaseDurations = BreathingPreset.CLASSIC) -> None:
        self._custom = DEFAULT_CUSTOM
        self._preset, self._durations = resolve_durations(selection, self._custom)
        if self._preset is BreathingPreset.CUSTOM:
            self._custom = self._durations
        self._state = self._idle_state()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def durations(self) -> PhaseDurations:
        return self._durations

    @property
    def preset(self) -> BreathingPreset:
        return self._preset

    @property
    def is_running(self) -> bool:
        return self._state.is_running

    def _idle_state(self) -> SessionState:
        return SessionState(
            is_running=False,
            current_phase=Phase.INHALE,
            seconds_remaining=self._durations.inhale,
        )

    def configure(self, selection: BreathingPreset | PhaseDurations) -> bool:
        """Select new durations. Refused (returns False) mid-session."""
        if self._state.is_running:
            logger.debug("breathing_configure_refused", preset=self._preset.value)
            return False
        self._preset, self._durations = resolve_durations(selection, self._custom)
        if self._preset is BreathingPreset.CUSTOM:
            self._custom = self._durations
        self._state = self._idle_state()
        logger.debug(
            "breathing_configured",
            preset=self._preset.value,
            durations=self._durations.as_tuple(),
        )
        return True

    def start(self) -> SessionState:
        if self._state.is_running:
            return self._state
        self._state = SessionState(
            is_running=True,
            current_phase=Phase.INHALE,
            seconds_remaining=self._durations.inhale,
        )
        logger.debug("breathing_started", durations=self._durations.as_tuple())
        return self._state

    def stop(self) -> SessionState:
        was_running = self._state.is_running
        self._state = self._idle_state()
        if was_running:
            logger.debug("breathing_stopped")
        return self._state

    def tick(self) -> SessionState:
        """Advance one second."""
        state = self._state
        if not state.is_running:
            return state

        remaining = state.seconds_remaining - 1
        if remaining > 0:
            self._state = SessionState(True, state.current_phase, remaining)
            return self._state

        next_phase = state.current_phase.next()
        if next_phase is None:
            logger.debug("breathing_completed", total_seconds=self._durations.total_seconds)
            return self.stop()

        self._state = SessionState(True, next_phase, self._durations.duration(next_phase))
        logger.debug("breathing_phase", phase=next_phase.value, seconds=self._state.seconds_remaining)
        return self._state

    def snapshot(self) -> dict:
        """State plus configuration and display hints, for hosts."""
        d = self._state.to_dict()
        d.update(render_hints(self._state))
        d["preset"] = self._preset.value
        d["presetLabel"] = self._preset.label
        d["durations"] = self._durations.to_dict()
        return d
