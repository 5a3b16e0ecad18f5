"""Shared utilities: datetime, generators, sanitization."""

from app.shared.utils.datetime import (
    LOCAL_DATETIME_FORMAT,
    ensure_utc,
    to_utc_iso_seconds,
)
from app.shared.utils.generators import generate_cuid
from app.shared.utils.sanitization import InputSanitizer

__all__ = [
    "generate_cuid",
    "ensure_utc",
    "to_utc_iso_seconds",
    "LOCAL_DATETIME_FORMAT",
    "InputSanitizer",
]
