"""Task CRUD and validation for Pausa."""

from __future__ import annotations

from datetime import date
from typing import Any

from core.logging_config import get_logger
from core.models import Task, new_id
from core.records import RecordStore

logger = get_logger(__name__)

TaskStore = RecordStore[Task, str]


# ── Validation ────────────────────────────────────────────────


def validate_task(task: dict[str, Any]) -> list[str]:
    """Validate task fields and return list of errors (empty if valid)."""
    errors = []
    for name in ("title", "subject"):
        value = task.get(name)
        if not isinstance(value, str) or not value.strip():
            errors.append(f"Missing required field: {name}")

    due = task.get("dueDate")
    if due is not None and not isinstance(due, date):
        try:
            date.fromisoformat(str(due))
        except ValueError:
            errors.append(f"Invalid dueDate: {due}")

    if "isCompleted" in task and not isinstance(task["isCompleted"], bool):
        errors.append("isCompleted must be boolean")

    return errors


def _normalized(task_data: dict[str, Any]) -> dict[str, Any]:
    d = dict(task_data)
    due = d.get("dueDate")
    if isinstance(due, date):
        d["dueDate"] = due.isoformat()
    for name in ("title", "subject"):
        if isinstance(d.get(name), str):
            d[name] = d[name].strip()
    return d


# ── CRUD ──────────────────────────────────────────────────────


def find_task(store: TaskStore, task_id: str) -> Task | None:
    """Find a task by ID."""
    return store.find_by_key(task_id)


def create_task(store: TaskStore, task_data: dict[str, Any]) -> tuple[Task | None, list[str]]:
    """Create and append a new task. Returns (task, errors)."""
    errors = validate_task(task_data)
    if errors:
        return None, errors

    d = _normalized(task_data)
    d["id"] = new_id()
    d["isCompleted"] = False
    task = Task.from_dict(d)
    store.upsert(task)
    logger.info("task_created", task_id=task.id)
    return task, []


def update_task(store: TaskStore, task_id: str, updates: dict[str, Any]) -> tuple[Task | None, list[str]]:
    """Update a task by ID. Returns (updated_task, errors)."""
    task = find_task(store, task_id)
    if not task:
        return None, [f"Task not found: {task_id}"]

    task_dict = task.to_dict()
    task_dict.update({k: v for k, v in updates.items() if k != "id"})

    errors = validate_task(task_dict)
    if errors:
        return None, errors

    updated = Task.from_dict(_normalized(task_dict))
    store.upsert(updated)
    return updated, []


def toggle_completion(store: TaskStore, task_id: str) -> Task | None:
    """Flip a task between pending and completed."""
    task = store.toggle_field(lambda t: t.id == task_id, "is_completed")
    if task is not None:
        logger.info("task_toggled", task_id=task_id, is_completed=task.is_completed)
    return task


def delete_task(store: TaskStore, task_id: str) -> bool:
    """Remove a task. Returns False if there was nothing to remove."""
    removed = store.remove(lambda t: t.id == task_id)
    if removed is not None:
        logger.info("task_deleted", task_id=task_id)
    return removed is not None


# ── Views ─────────────────────────────────────────────────────


def get_tasks_with_computed_fields(store: TaskStore, today: str | date) -> list[dict[str, Any]]:
    """Return tasks with daysUntilDue / isOverdue added, pending ones first."""
    if isinstance(today, str):
        try:
            today_date = date.fromisoformat(today)
        except ValueError:
            today_date = date.today()
    else:
        today_date = today

    result = []
    for task in store:
        d = task.to_dict()
        if task.due_date is not None:
            days_left = (task.due_date - today_date).days
            d["daysUntilDue"] = days_left
            d["isOverdue"] = days_left < 0 and not task.is_completed
        else:
            d["daysUntilDue"] = None
            d["isOverdue"] = False
        result.append(d)

    # Stable sort keeps insertion order within each group
    result.sort(key=lambda x: x["isCompleted"])
    return result
