"""Keyed record persistence for Pausa.

A RecordStore holds an ordered list of records, at most one per key, and
writes the whole list back to its key-value storage after every mutation.
Tasks are keyed by id, diary entries by calendar day.
"""

from __future__ import annotations

import dataclasses
import json
from datetime import date, datetime, tzinfo
from typing import Any, Callable, Generic, Iterator, TypeVar

from core.logging_config import get_logger
from core.models import DiaryEntry, Task
from core.storage import DIARY_KEY, TASKS_KEY, KeyValueStore

logger = get_logger(__name__)

T = TypeVar("T")
K = TypeVar("K")


def day_key(timestamp: date | datetime, tz: tzinfo | None = None) -> date:
    """Truncate a timestamp to its calendar day.

    Aware datetimes are converted to ``tz`` first when one is given, so the
    same instant always lands on the same day regardless of where it was
    recorded. Naive datetimes are taken as already local.
    """
    if isinstance(timestamp, datetime):
        if tz is not None and timestamp.tzinfo is not None:
            timestamp = timestamp.astimezone(tz)
        return timestamp.date()
    return timestamp


class RecordStore(Generic[T, K]):
    """Durable, key-unique collection with load-on-start / save-on-mutate."""

    def __init__(
        self,
        storage: KeyValueStore,
        storage_key: str,
        key_of: Callable[[T], K],
        decode: Callable[[dict[str, Any]], T],
        encode: Callable[[T], dict[str, Any]],
    ) -> None:
        self.storage = storage
        self.storage_key = storage_key
        self.key_of = key_of
        self._decode = decode
        self._encode = encode
        self._records: list[T] = []
        self.load()

    # ── Persistence ───────────────────────────────────────────

    def load(self) -> None:
        """Replace the in-memory collection with what storage holds.

        Missing, unreadable or malformed data leaves the store empty.
        """
        self._records = []
        try:
            raw = self.storage.get(self.storage_key)
        except OSError as e:
            logger.warning("record_load_failed", key=self.storage_key, error=str(e))
            return
        if raw is None:
            return

        try:
            payload = json.loads(raw)
            if not isinstance(payload, list):
                raise ValueError(f"expected a list, got {type(payload).__name__}")
            decoded = [self._decode(item) for item in payload]
        except (ValueError, TypeError, KeyError, AttributeError, RecursionError) as e:
            logger.warning("record_load_failed", key=self.storage_key, error=str(e))
            return

        # Collapse duplicate keys written by older data, keeping the last one
        records: list[T] = []
        for record in decoded:
            _put(records, record, self.key_of)
        self._records = records
        logger.debug("record_load", key=self.storage_key, count=len(self._records))

    def save(self) -> None:
        """Serialize the full collection and overwrite it in storage."""
        self._write(self._records)

    def _write(self, records: list[T]) -> None:
        payload = [self._encode(r) for r in records]
        data = json.dumps(payload, indent=2, ensure_ascii=False).encode("utf-8")
        self.storage.set(self.storage_key, data)

    # ── Queries ───────────────────────────────────────────────

    @property
    def records(self) -> list[T]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._records))

    def find(self, predicate: Callable[[T], bool]) -> T | None:
        for record in self._records:
            if predicate(record):
                return record
        return None

    def find_by_key(self, key: K) -> T | None:
        return self.find(lambda r: self.key_of(r) == key)

    # ── Mutations ─────────────────────────────────────────────
    # Mutations swap in a new list only after storage has accepted it.

    def _commit(self, records: list[T]) -> None:
        self._write(records)
        self._records = records

    def upsert(self, record: T) -> T:
        """Replace the record sharing this key in place, else append."""
        records = list(self._records)
        _put(records, record, self.key_of)
        self._commit(records)
        return record

    def remove(self, predicate: Callable[[T], bool]) -> T | None:
        """Remove the first matching record. Returns it, or None."""
        for i, record in enumerate(self._records):
            if predicate(record):
                records = list(self._records)
                removed = records.pop(i)
                self._commit(records)
                return removed
        return None

    def toggle_field(self, predicate: Callable[[T], bool], field_name: str) -> T | None:
        """Flip a boolean attribute on the first matching record.

        The stored record is replaced by a flipped copy; the original
        object is left untouched.
        """
        for i, record in enumerate(self._records):
            if not predicate(record):
                continue
            current = getattr(record, field_name)
            if not isinstance(current, bool):
                raise ValueError(f"Field {field_name!r} is not boolean")
            flipped = dataclasses.replace(record, **{field_name: not current})
            records = list(self._records)
            records[i] = flipped
            self._commit(records)
            return flipped
        return None


def _put(records: list[T], record: T, key_of: Callable[[T], K]) -> None:
    key = key_of(record)
    for i, existing in enumerate(records):
        if key_of(existing) == key:
            records[i] = record
            return
    records.append(record)


# ── Factories ─────────────────────────────────────────────────


def make_task_store(storage: KeyValueStore) -> RecordStore[Task, str]:
    return RecordStore(
        storage,
        TASKS_KEY,
        key_of=lambda t: t.id,
        decode=Task.from_dict,
        encode=Task.to_dict,
    )


def make_diary_store(storage: KeyValueStore, tz: tzinfo | None = None) -> RecordStore[DiaryEntry, date]:
    return RecordStore(
        storage,
        DIARY_KEY,
        key_of=lambda e: day_key(e.date, tz),
        decode=DiaryEntry.from_dict,
        encode=DiaryEntry.to_dict,
    )
