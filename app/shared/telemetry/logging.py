"""Logging configuration for the application."""

import logging
import sys

from app.core.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Loggers whose output is noise at INFO once the audit writer is busy.
_QUIET_LOGGERS = ("sqlalchemy.engine", "asyncpg", "opentelemetry.sdk")


def setup_logging(level: int | None = None) -> None:
    """Configure root logging to stdout.

    Level defaults to DEBUG when settings.debug is True, otherwise INFO.
    SQL echo is governed by database_echo, not by the application level,
    so audit inserts do not flood the log.
    """
    settings = get_settings()
    if level is None:
        level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    for name in _QUIET_LOGGERS:
        if name == "sqlalchemy.engine" and settings.database_echo:
            continue
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module (pass __name__)."""
    return logging.getLogger(name)
