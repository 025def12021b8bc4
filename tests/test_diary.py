"""Tests for core/diary.py — entries, prompts, calendar."""

import random
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from core.diary import (
    PROMPTS,
    entry_for,
    month_grid,
    month_moods,
    month_summary,
    random_prompt,
    save_entry,
    shift_month,
    validate_entry,
)
from core.models import Feeling
from core.records import make_diary_store
from core.storage import FileKeyValueStore


def test_validate_entry():
    assert validate_entry("Today was fine.", Feeling.HAPPY) == []
    assert validate_entry("Today was fine.", "Worried") == []
    assert any("empty" in e for e in validate_entry("  ", Feeling.HAPPY))
    assert any("feeling" in e for e in validate_entry("text", None))
    assert any("feeling" in e for e in validate_entry("text", "ecstatic"))


def test_save_entry_then_overwrite_same_day(memory_storage):
    store = make_diary_store(memory_storage, ZoneInfo("UTC"))
    first, errors = save_entry(store, "Morning", "sad", when=datetime(2026, 6, 1, 7, 0, tzinfo=timezone.utc))
    assert errors == []
    assert first.feeling == Feeling.SAD

    second, _ = save_entry(store, "Evening", Feeling.RELAXED, when=datetime(2026, 6, 1, 21, 0, tzinfo=timezone.utc))
    assert len(store) == 1
    assert entry_for(store, date(2026, 6, 1)).text == "Evening"
    assert entry_for(store, datetime(2026, 6, 1, 12, 0)).id == second.id


def test_save_entry_invalid(memory_storage):
    store = make_diary_store(memory_storage)
    entry, errors = save_entry(store, "", None)
    assert entry is None
    assert len(errors) == 2
    assert len(store) == 0


def test_entry_for_missing_day(workspace):
    store = make_diary_store(FileKeyValueStore(workspace / "storage"), ZoneInfo("UTC"))
    assert entry_for(store, date(2026, 2, 12)) is None
    assert entry_for(store, date(2026, 2, 11)).feeling == Feeling.ANXIOUS


def test_random_prompt_is_from_list():
    assert random_prompt(random.Random(7)) in PROMPTS
    assert random_prompt() in PROMPTS


def test_shift_month():
    assert shift_month(2026, 1, -1) == (2025, 12)
    assert shift_month(2026, 12, 1) == (2027, 1)
    assert shift_month(2026, 5, 0) == (2026, 5)
    assert shift_month(2026, 5, 14) == (2027, 7)


def test_month_grid_sunday_first():
    # 1 Feb 2026 is a Sunday, 1 Mar 2026 is a Sunday, 1 Oct 2026 is a Thursday
    grid = month_grid(2026, 2)
    assert grid[0] == date(2026, 2, 1)
    assert len(grid) == 28

    grid = month_grid(2026, 10)
    assert grid[:4] == [None, None, None, None]
    assert grid[4] == date(2026, 10, 1)
    assert grid[-1] == date(2026, 10, 31)


def test_month_moods_and_summary(workspace):
    store = make_diary_store(FileKeyValueStore(workspace / "storage"), ZoneInfo("UTC"))
    moods = month_moods(store, 2026, 2)
    assert moods == {date(2026, 2, 10): Feeling.RELAXED, date(2026, 2, 11): Feeling.ANXIOUS}
    assert month_moods(store, 2026, 3) == {}

    summary = month_summary(store, 2026, 2)
    cells = {c["day"]: c for c in summary["cells"] if c}
    assert cells["2026-02-10"]["feeling"] == "relaxed"
    assert cells["2026-02-10"]["color"] == "cyan"
    assert cells["2026-02-12"]["feeling"] is None
