"""Tests for core/storage.py, core/fileio.py and core/config.py."""

from zoneinfo import ZoneInfo

import pytest

from core.config import load_settings, save_settings
from core.fileio import read_bytes, read_yaml, write_bytes_atomic
from core.models import BreathingPreset
from core.storage import FileKeyValueStore, MemoryKeyValueStore
from core.workspace import get_user_timezone, storage_dir


def test_write_bytes_atomic_creates_parents(tmp_path):
    path = tmp_path / "a" / "b" / "blob.json"
    write_bytes_atomic(path, b"[1, 2]")
    assert read_bytes(path) == b"[1, 2]"
    assert [p.name for p in path.parent.iterdir()] == ["blob.json"]


def test_read_missing(tmp_path):
    assert read_bytes(tmp_path / "nope") is None
    assert read_yaml(tmp_path / "nope.yaml") == {}


def test_file_store_round_trip(tmp_path):
    store = FileKeyValueStore(tmp_path)
    assert store.get("savedTasks") is None
    store.set("savedTasks", b"[]")
    assert store.get("savedTasks") == b"[]"
    assert (tmp_path / "savedTasks.json").exists()
    store.delete("savedTasks")
    assert store.get("savedTasks") is None
    store.delete("savedTasks")


def test_file_store_defaults_to_workspace(workspace):
    store = FileKeyValueStore()
    assert store.directory.resolve() == storage_dir(workspace).resolve()
    assert store.get("diaryEntries") is not None


@pytest.mark.parametrize("key", ["../escape", "a/b", "", ".hidden"])
def test_file_store_rejects_bad_keys(tmp_path, key):
    with pytest.raises(ValueError):
        FileKeyValueStore(tmp_path).get(key)


def test_memory_store():
    store = MemoryKeyValueStore({"k": b"v"})
    assert store.get("k") == b"v"
    store.delete("k")
    store.delete("k")
    assert store.get("k") is None


def test_load_settings_from_workspace(workspace):
    s = load_settings(workspace)
    assert s.breathing_preset == BreathingPreset.FAST
    assert s.log_level == "DEBUG"


def test_load_settings_malformed_yaml(tmp_path):
    (tmp_path / "settings.yaml").write_text("breathing: [unclosed", encoding="utf-8")
    s = load_settings(tmp_path)
    assert s.breathing_preset == BreathingPreset.CLASSIC


def test_load_settings_non_utf8_bytes(tmp_path):
    (tmp_path / "settings.yaml").write_bytes(b"timezone: \xff\xfe\n")
    s = load_settings(tmp_path)
    assert s.timezone == "UTC"
    assert s.breathing_preset == BreathingPreset.CLASSIC
    assert get_user_timezone(tmp_path) == ZoneInfo("UTC")


def test_save_settings_round_trip(tmp_path):
    s = load_settings(tmp_path)
    s.timezone = "America/Mexico_City"
    save_settings(s, tmp_path)
    assert load_settings(tmp_path).timezone == "America/Mexico_City"
    assert get_user_timezone(tmp_path) == ZoneInfo("America/Mexico_City")


def test_unknown_timezone_falls_back_to_utc(tmp_path):
    (tmp_path / "settings.yaml").write_text("timezone: Mars/Olympus\n", encoding="utf-8")
    assert get_user_timezone(tmp_path) == ZoneInfo("UTC")
