"""Key-value byte storage backing the record stores.

Each key maps to one opaque blob. The file-backed store keeps one file per
key and replaces it atomically on every write.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Protocol

from core.fileio import read_bytes, write_bytes_atomic
from core.logging_config import get_logger
from core.workspace import storage_dir

logger = get_logger(__name__)

TASKS_KEY = "savedTasks"
DIARY_KEY = "diaryEntries"

_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStore(Protocol):
    def get(self, key: str) -> bytes | None: ...

    def set(self, key: str, value: bytes) -> None: ...

    def delete(self, key: str) -> None: ...


def _check_key(key: str) -> str:
    if not _KEY_RE.match(key) or key.startswith("."):
        raise ValueError(f"Invalid storage key: {key!r}")
    return key


class FileKeyValueStore:
    """One ``<key>.json`` file per key under a directory."""

    def __init__(self, directory: Path | None = None) -> None:
        self.directory = Path(directory) if directory is not None else storage_dir()

    def path_for(self, key: str) -> Path:
        return self.directory / f"{_check_key(key)}.json"

    def get(self, key: str) -> bytes | None:
        return read_bytes(self.path_for(key))

    def set(self, key: str, value: bytes) -> None:
        path = self.path_for(key)
        write_bytes_atomic(path, value)
        logger.debug("storage_write", key=key, bytes=len(value), path=str(path))

    def delete(self, key: str) -> None:
        path = self.path_for(key)
        if path.exists():
            path.unlink()


class MemoryKeyValueStore:
    """Dict-backed store for tests and embedding."""

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self.data: dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> bytes | None:
        return self.data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self.data[key] = bytes(value)

    def delete(self, key: str) -> None:
        self.data.pop(key, None)
