from __future__ import annotations

import os
import secrets
from datetime import date
from typing import Any

from fastapi import Body, Depends, FastAPI, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from core import (
    BreathingPreset,
    BreathingSessionController,
    FileKeyValueStore,
    PhaseDurations,
    configure_logging,
    create_task,
    delete_task,
    entry_for,
    find_task,
    get_tasks_with_computed_fields,
    get_user_timezone,
    load_settings,
    make_diary_store,
    make_task_store,
    month_summary,
    now_local,
    random_prompt,
    save_entry,
    storage_dir,
    today_str,
    toggle_completion,
    update_task,
    workspace_root,
)
from core.records import RecordStore


# ── Auth ──────────────────────────────────────────────────────

app = FastAPI(title="Pausa UI", version="0.1.0")

security = HTTPBasic(auto_error=False)


def get_current_user(credentials: HTTPBasicCredentials | None = Depends(security)) -> str:
    expected_username = os.environ.get("PAUSA_USERNAME", "")
    expected_password = os.environ.get("PAUSA_PASSWORD", "")

    if not expected_username or not expected_password:
        return "guest"

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Basic"},
        )

    correct_username = secrets.compare_digest(credentials.username.encode("utf-8"), expected_username.encode("utf-8"))
    correct_password = secrets.compare_digest(credentials.password.encode("utf-8"), expected_password.encode("utf-8"))

    if not (correct_username and correct_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username


# ── Dependencies ──────────────────────────────────────────────
# Stores are rebuilt per request so edits made by the TUI are picked up.

_breathing: BreathingSessionController | None = None


def get_task_store() -> RecordStore:
    return make_task_store(FileKeyValueStore(storage_dir()))


def get_diary_store() -> RecordStore:
    root = workspace_root()
    return make_diary_store(FileKeyValueStore(storage_dir(root)), get_user_timezone(root))


def get_breathing() -> BreathingSessionController:
    global _breathing
    if _breathing is None:
        settings = load_settings()
        configure_logging(settings.log_level, settings.log_json)
        _breathing = BreathingSessionController(settings.breathing_selection())
    return _breathing


def _bad_request(errors: list[str]) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=errors)


@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"status": "ok"}


# ── Tasks ─────────────────────────────────────────────────────

@app.get("/api/tasks")
def api_list_tasks(
    store: RecordStore = Depends(get_task_store),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    return {"tasks": get_tasks_with_computed_fields(store, today_str())}


@app.post("/api/tasks")
def api_create_task(
    payload: dict[str, Any] = Body(...),
    store: RecordStore = Depends(get_task_store),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    task, errors = create_task(store, payload)
    if errors:
        raise _bad_request(errors)
    return {"ok": True, "task": task.to_dict()}


@app.put("/api/tasks/{task_id}")
def api_update_task(
    task_id: str,
    payload: dict[str, Any] = Body(...),
    store: RecordStore = Depends(get_task_store),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    if find_task(store, task_id) is None:
        raise HTTPException(status_code=404, detail=f"Task not found: {task_id}")
    task, errors = update_task(store, task_id, payload)
    if errors:
        raise _bad_request(errors)
    return {"ok": True, "task": task.to_dict()}


@app.post("/api/tasks/{task_id}/toggle")
def api_toggle_task(
    task_id: str,
    store: RecordStore = Depends(get_task_store),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    task = toggle_completion(store, task_id)
    if task is None:
        raise HTTPException(status_code=404, detail=f"Task not found: {task_id}")
    return {"ok": True, "task": task.to_dict()}


@app.delete("/api/tasks/{task_id}")
def api_delete_task(
    task_id: str,
    store: RecordStore = Depends(get_task_store),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    if not delete_task(store, task_id):
        raise HTTPException(status_code=404, detail=f"Task not found: {task_id}")
    return {"ok": True}


# ── Diary ─────────────────────────────────────────────────────

@app.get("/api/diary")
def api_diary_month(
    year: int | None = None,
    month: int | None = None,
    store: RecordStore = Depends(get_diary_store),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    today = date.fromisoformat(today_str())
    if year is None:
        year = today.year
    if month is None:
        month = today.month
    errors = []
    if not date.min.year <= year <= date.max.year:
        errors.append(f"Invalid year: {year}")
    if not 1 <= month <= 12:
        errors.append(f"Invalid month: {month}")
    if errors:
        raise _bad_request(errors)
    return month_summary(store, year, month)


@app.get("/api/diary/prompt")
def api_diary_prompt(username: str = Depends(get_current_user)) -> dict[str, str]:
    return {"prompt": random_prompt()}


@app.get("/api/diary/{day}")
def api_diary_entry(
    day: str,
    store: RecordStore = Depends(get_diary_store),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    try:
        d = date.fromisoformat(day)
    except ValueError:
        raise _bad_request([f"Invalid date: {day}"])
    entry = entry_for(store, d)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"No entry for {day}")
    return {"entry": entry.to_dict()}


@app.post("/api/diary")
def api_save_entry(
    payload: dict[str, Any] = Body(...),
    store: RecordStore = Depends(get_diary_store),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    entry, errors = save_entry(
        store,
        payload.get("text", ""),
        payload.get("feeling"),
        when=now_local(),
    )
    if errors:
        raise _bad_request(errors)
    return {"ok": True, "entry": entry.to_dict()}


# ── Breathing ─────────────────────────────────────────────────
# The client owns the one-second timer and posts /tick.

@app.get("/api/breathing")
def api_breathing_state(
    controller: BreathingSessionController = Depends(get_breathing),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    return controller.snapshot()


@app.post("/api/breathing/configure")
def api_breathing_configure(
    payload: dict[str, Any] = Body(...),
    controller: BreathingSessionController = Depends(get_breathing),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    try:
        preset = BreathingPreset(str(payload.get("preset", "")).lower())
    except ValueError:
        raise _bad_request([f"Invalid preset: {payload.get('preset')!r}"])

    selection: BreathingPreset | PhaseDurations = preset
    custom = payload.get("durations")
    if preset is BreathingPreset.CUSTOM and isinstance(custom, dict):
        try:
            selection = PhaseDurations.from_dict(custom)
        except (TypeError, ValueError):
            raise _bad_request([f"Invalid durations: {custom!r}"])

    applied = controller.configure(selection)
    return {"ok": applied, "state": controller.snapshot()}


@app.post("/api/breathing/start")
def api_breathing_start(
    controller: BreathingSessionController = Depends(get_breathing),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    controller.start()
    return controller.snapshot()


@app.post("/api/breathing/stop")
def api_breathing_stop(
    controller: BreathingSessionController = Depends(get_breathing),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    controller.stop()
    return controller.snapshot()


@app.post("/api/breathing/tick")
def api_breathing_tick(
    controller: BreathingSessionController = Depends(get_breathing),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    controller.tick()
    return controller.snapshot()


def main() -> None:
    import uvicorn

    settings = load_settings()
    configure_logging(settings.log_level, settings.log_json)
    uvicorn.run(
        app,
        host=os.environ.get("PAUSA_HOST", "127.0.0.1"),
        port=int(os.environ.get("PAUSA_PORT", "8000")),
    )


if __name__ == "__main__":
    main()
