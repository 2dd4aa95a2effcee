"""Logging for the minuteflow package and the `minuteflow` CLI."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from minuteflow.config import Settings

PACKAGE_LOGGER = "minuteflow"
# httpx logs one INFO line per request; a long meeting means thousands of
# chunk uploads and status polls.
CHATTY_LIBRARIES = ("httpx", "httpcore")


def _level(name: str | None, default: int = logging.INFO) -> int:
    value = logging.getLevelName(str(name or "").upper())
    return value if isinstance(value, int) else default


def log_file_path(settings: Settings, file: str | None = None) -> Path | None:
    """Where the rotating log goes; relative names land in `settings.log_dir`."""
    name = file if file is not None else settings.logging.file
    if not name:
        return None
    path = Path(str(name))
    if not path.is_absolute():
        path = Path(settings.log_dir) / path
    return path


def setup_logging(
    settings: Settings,
    *,
    verbose: bool = False,
    file: str | None = None,
    force: bool = False,
) -> logging.Logger:
    """Configure the `minuteflow` logger once and tame request logging.

    `verbose` forces DEBUG for the package and lets httpx through at INFO.
    `file` overrides `LOG_FILE` for this process.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    if getattr(logger, "_minuteflow_configured", False) and not force:
        return logger

    level = logging.DEBUG if verbose else _level(settings.logging.level)
    library_level = logging.INFO if verbose else _level(settings.logging.library_level, logging.WARNING)
    formatter = logging.Formatter(fmt=str(settings.logging.format), datefmt=str(settings.logging.datefmt))

    handlers: list[logging.Handler] = []
    if settings.logging.console:
        stream = logging.StreamHandler()
        stream.setFormatter(formatter)
        handlers.append(stream)

    file_path = log_file_path(settings, file)
    if file_path is not None:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            _rotating_handler(file_path, formatter, settings.logging.max_bytes, settings.logging.backup_count)
        )

    for old in list(logger.handlers):
        old.close()
    logger.setLevel(level)
    logger.handlers = handlers
    logger.propagate = False
    for name in CHATTY_LIBRARIES:
        logging.getLogger(name).setLevel(library_level)
    setattr(logger, "_minuteflow_configured", True)
    return logger


def _rotating_handler(path: Path, formatter: logging.Formatter, max_bytes: int, backups: int) -> logging.Handler:
    handler = RotatingFileHandler(path, maxBytes=int(max_bytes), backupCount=int(backups), encoding="utf-8")
    handler.setFormatter(formatter)
    return handler
