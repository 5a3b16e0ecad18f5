"""Application services: audit diffing and timezone localization."""

from app.application.services.audit_diff import (
    canonicalize,
    diff,
    pick_old_values,
    sanitize,
    to_jsonable,
)
from app.application.services.timezone_localizer import (
    DEFAULT_TIMEZONE,
    TimezoneResolver,
    localize,
    render_local,
)

__all__ = [
    "DEFAULT_TIMEZONE",
    "TimezoneResolver",
    "canonicalize",
    "diff",
    "localize",
    "pick_old_values",
    "render_local",
    "sanitize",
    "to_jsonable",
]
