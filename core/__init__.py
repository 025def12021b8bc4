"""Pausa core library — breathing timer, record stores and data layer.

Public API re-exports for convenient imports:
    from core import BreathingSessionController, make_task_store, ...
"""

# Workspace & paths
from core.workspace import (
    workspace_root,
    get_user_timezone,
    today_str,
    now_local,
    settings_path,
    storage_dir,
)

# File I/O
from core.fileio import (
    read_bytes,
    read_yaml,
    write_bytes_atomic,
    write_yaml_atomic,
)

# Configuration & logging
from core.config import load_settings, save_settings
from core.logging_config import configure_logging, get_logger

# Storage
from core.storage import (
    TASKS_KEY,
    DIARY_KEY,
    KeyValueStore,
    FileKeyValueStore,
    MemoryKeyValueStore,
)

# Records
from core.records import (
    RecordStore,
    day_key,
    make_task_store,
    make_diary_store,
)

# Breathing
from core.breathing import (
    BreathingSessionController,
    resolve_durations,
    render_hints,
)

# Tasks
from core.tasks import (
    validate_task,
    find_task,
    create_task,
    update_task,
    toggle_completion,
    delete_task,
    get_tasks_with_computed_fields,
)

# Diary
from core.diary import (
    PROMPTS,
    random_prompt,
    validate_entry,
    save_entry,
    entry_for,
    shift_month,
    month_grid,
    month_moods,
    month_summary,
)

# Models
from core.models import (
    Phase,
    VisualPosition,
    PhaseDurations,
    BreathingPreset,
    SessionState,
    Task,
    Feeling,
    DiaryEntry,
    Settings,
)
