"""Logging configuration for Pausa.

Library modules only ask for a logger with ``get_logger(__name__)``; the
hosts (TUI, web UI) call ``configure_logging`` once at startup with the
values from settings.yaml.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    log_file: Path | None = None,
) -> None:
    """Configure structlog on top of the stdlib logging module.

    Logs go to stderr, or to ``log_file`` when given (the TUI owns the
    terminal, so it logs to a file in the workspace).
    """
    log_level = getattr(logging, str(level).upper(), logging.INFO)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logging.basicConfig(
            level=log_level,
            filename=str(log_file),
            format="%(message)s",
            force=True,
        )
    else:
        logging.basicConfig(
            level=log_level,
            stream=sys.stderr,
            format="%(message)s",
            force=True,
        )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """Get a structlog logger, typically with ``__name__``."""
    return structlog.get_logger(name)
