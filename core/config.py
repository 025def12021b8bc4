"""settings.yaml loading for Pausa."""

from __future__ import annotations

from pathlib import Path

import yaml

from core.fileio import read_yaml, write_yaml_atomic
from core.logging_config import get_logger
from core.models import Settings
from core.workspace import settings_path

logger = get_logger(__name__)


def load_settings(root: Path | None = None) -> Settings:
    """Load settings.yaml; missing or malformed files give defaults."""
    path = settings_path(root)
    try:
        data = read_yaml(path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.warning("settings_load_failed", path=str(path), error=str(e))
        return Settings()
    return Settings.from_dict(data)


def save_settings(settings: Settings, root: Path | None = None) -> None:
    write_yaml_atomic(settings_path(root), settings.to_dict())
