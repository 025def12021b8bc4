"""Shared test fixtures for Pausa tests."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest
import yaml

from core.storage import MemoryKeyValueStore


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a temporary workspace with settings and stored records."""
    root = tmp_path / "workspace"
    (root / "storage").mkdir(parents=True)

    # Settings
    settings = {
        "timezone": "UTC",
        "breathing": {"preset": "fast", "custom": {"inhale": 5, "hold": 5, "exhale": 5}},
        "logging": {"level": "DEBUG", "json": False},
    }
    (root / "settings.yaml").write_text(
        yaml.dump(settings, default_flow_style=False), encoding="utf-8"
    )

    # Tasks
    tasks = [
        {
            "id": "t-algebra",
            "title": "Algebra exercises",
            "subject": "Math",
            "dueDate": "2026-02-15",
            "isCompleted": False,
        },
        {
            "id": "t-essay",
            "title": "Essay draft",
            "subject": "History",
            "dueDate": None,
            "isCompleted": True,
        },
    ]
    (root / "storage" / "savedTasks.json").write_text(
        json.dumps(tasks, indent=2), encoding="utf-8"
    )

    # Diary
    entries = [
        {
            "id": "d-1",
            "date": "2026-02-10T21:30:00+00:00",
            "text": "Long day, but the walk helped.",
            "feeling": "relaxed",
        },
        {
            "id": "d-2",
            "date": "2026-02-11T08:15:00+00:00",
            "text": "Exam tomorrow.",
            "feeling": "anxious",
        },
    ]
    (root / "storage" / "diaryEntries.json").write_text(
        json.dumps(entries, indent=2), encoding="utf-8"
    )

    os.environ["PAUSA_ROOT"] = str(root)
    yield root
    if "PAUSA_ROOT" in os.environ:
        del os.environ["PAUSA_ROOT"]


@pytest.fixture
def memory_storage() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()
