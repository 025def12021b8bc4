"""Diary entries, writing prompts and the month calendar for Pausa.

One entry per calendar day: saving again on the same day replaces the
earlier entry in place.
"""

from __future__ import annotations

import calendar
import random
from datetime import date, datetime
from typing import Any

from core.logging_config import get_logger
from core.models import DiaryEntry, Feeling
from core.records import RecordStore

logger = get_logger(__name__)

DiaryStore = RecordStore[DiaryEntry, date]

PROMPTS = [
    "What's on your mind today?",
    "Was today a good day?",
    "What did you learn today?",
    "Write it here before you tell the group chat.",
    "Don't worry, this diary has read worse.",
    "Tell your diary. It doesn't interrupt, judge, or send ten-minute voice notes.",
    "Your diary actually listens, unlike your friends in the group chat.",
    "If today was a disaster, at least you'll have something fun to read later.",
]


def random_prompt(rng: random.Random | None = None) -> str:
    return (rng or random).choice(PROMPTS)


def _coerce_feeling(feeling: Feeling | str | None) -> Feeling | None:
    if isinstance(feeling, Feeling):
        return feeling
    if isinstance(feeling, str):
        try:
            return Feeling(feeling.strip().lower())
        except ValueError:
            return None
    return None


def validate_entry(text: str, feeling: Feeling | str | None) -> list[str]:
    errors = []
    if not isinstance(text, str) or not text.strip():
        errors.append("Entry text is empty")
    if _coerce_feeling(feeling) is None:
        valid = ", ".join(f.value for f in Feeling)
        errors.append(f"Invalid feeling: {feeling!r} (expected one of {valid})")
    return errors


def save_entry(
    store: DiaryStore,
    text: str,
    feeling: Feeling | str | None,
    when: datetime | None = None,
) -> tuple[DiaryEntry | None, list[str]]:
    """Save today's entry (or the one for ``when``). Returns (entry, errors)."""
    errors = validate_entry(text, feeling)
    if errors:
        return None, errors

    entry = DiaryEntry(
        date=when or datetime.now().astimezone(),
        text=text,
        feeling=_coerce_feeling(feeling),
    )
    replaced = store.find_by_key(store.key_of(entry)) is not None
    store.upsert(entry)
    logger.info("diary_saved", day=store.key_of(entry).isoformat(), replaced=replaced)
    return entry, []


def entry_for(store: DiaryStore, day: date | datetime) -> DiaryEntry | None:
    if isinstance(day, datetime):
        day = day.date()
    return store.find_by_key(day)


# ── Calendar ──────────────────────────────────────────────────


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move (year, month) by ``delta`` months."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_grid(year: int, month: int) -> list[date | None]:
    """Days of the month, Sunday-first, with leading blanks."""
    first = date(year, month, 1)
    leading = (first.weekday() + 1) % 7  # Monday=0 -> Sunday=0
    _, ndays = calendar.monthrange(year, month)
    cells: list[date | None] = [None] * leading
    cells.extend(date(year, month, d) for d in range(1, ndays + 1))
    return cells


def month_moods(store: DiaryStore, year: int, month: int) -> dict[date, Feeling]:
    """Feeling recorded on each day of the month that has an entry."""
    moods = {}
    for entry in store:
        day = store.key_of(entry)
        if day.year == year and day.month == month:
            moods[day] = entry.feeling
    return moods


def month_summary(store: DiaryStore, year: int, month: int) -> dict[str, Any]:
    """Serializable month view: grid cells plus per-day mood."""
    moods = month_moods(store, year, month)
    cells = []
    for day in month_grid(year, month):
        if day is None:
            cells.append(None)
            continue
        feeling = moods.get(day)
        cells.append({
            "day": day.isoformat(),
            "feeling": feeling.value if feeling else None,
            "color": feeling.color if feeling else None,
        })
    return {"year": year, "month": month, "cells": cells}
