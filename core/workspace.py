"""Workspace root, timezone, path helpers for Pausa."""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from core.fileio import read_yaml


def workspace_root() -> Path:
    """Get the workspace root directory (contains settings.yaml and storage/)."""
    return Path(
        os.environ.get("PAUSA_ROOT", str(Path.home() / "pausa"))
    ).expanduser().resolve()


def get_user_timezone(root: Path | None = None) -> ZoneInfo:
    """Get user's timezone from settings.yaml, defaulting to UTC."""
    if root is None:
        root = workspace_root()
    try:
        settings = read_yaml(settings_path(root))
        if settings and "timezone" in settings:
            return ZoneInfo(str(settings["timezone"]))
    except (OSError, ValueError, yaml.YAMLError, ZoneInfoNotFoundError):
        pass
    return ZoneInfo("UTC")


def today_str(root: Path | None = None) -> str:
    """Get today's date string (YYYY-MM-DD) in user's timezone."""
    tz = get_user_timezone(root)
    return datetime.now(tz).date().isoformat()


def now_local(root: Path | None = None) -> datetime:
    """Get current datetime in user's timezone."""
    tz = get_user_timezone(root)
    return datetime.now(tz)


# ── Path helpers ──────────────────────────────────────────────

def settings_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "settings.yaml"


def storage_dir(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "storage"
