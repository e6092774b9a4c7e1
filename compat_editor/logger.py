"""Loguru sinks for the editor: console plus a rotating ``editor.log``."""

from __future__ import annotations

import os
import sys
from pathlib import Path

from loguru import logger

LOG_LEVEL_ENV = "COMPAT_EDITOR_LOG_LEVEL"
LOG_FILENAME = "editor.log"

_CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}"


def setup_logger(log_dir: Path | None = None, console_level: str | None = None) -> Path | None:
    """Replace loguru's default sink with the editor's sinks.

    The console level comes from *console_level*, then
    ``COMPAT_EDITOR_LOG_LEVEL``, then ``INFO``.  The file sink always
    records ``DEBUG``.  Returns the log file path, or ``None`` when
    *log_dir* is missing or cannot be created.
    """
    level = (console_level or os.environ.get(LOG_LEVEL_ENV) or "INFO").upper()

    logger.remove()
    logger.add(sys.stderr, level=level, format=_CONSOLE_FORMAT, colorize=True)

    if log_dir is None:
        return None
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.warning("Log directory {} unavailable, console only: {}", log_dir, e)
        return None

    log_file = log_dir / LOG_FILENAME
    logger.add(
        str(log_file),
        level="DEBUG",
        format=_FILE_FORMAT,
        rotation="10 MB",
        retention="7 days",
        encoding="utf-8",
        enqueue=True,
    )
    logger.debug("Logging to {} (console level {})", log_file, level)
    return log_file
