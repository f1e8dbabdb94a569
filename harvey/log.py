"""Logging setup.

Standard output belongs to the UI, so records go to a file under the user
log directory instead of the console.
"""

from __future__ import annotations

import logging
from pathlib import Path

from platformdirs import user_log_dir

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LOG_FILE = Path(user_log_dir("harvey", appauthor=False)) / "harvey.log"

PACKAGE_LOGGER = "harvey"


def setup_logging(level: str = "WARNING", log_file: Path | None = None) -> logging.Handler:
    """Route ``harvey.*`` loggers to ``log_file`` at ``level``.

    Replaces handlers installed by an earlier call. If the log file cannot be
    opened, records are dropped through a ``NullHandler``.
    """
    numeric_level = getattr(logging, str(level).upper(), logging.WARNING)
    target = log_file if log_file is not None else DEFAULT_LOG_FILE

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for existing in list(package_logger.handlers):
        package_logger.removeHandler(existing)
        existing.close()

    handler: logging.Handler
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(target, encoding="utf-8")
    except OSError:
        handler = logging.NullHandler()

    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    package_logger.setLevel(numeric_level)
    package_logger.addHandler(handler)
    package_logger.propagate = False

    package_logger.info("Logging initialized: level=%s, file=%s", logging.getLevelName(numeric_level), target)
    return handler


__all__ = ["LOG_FORMAT", "DEFAULT_LOG_FILE", "setup_logging"]
