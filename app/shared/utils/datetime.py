"""
UTC datetime utilities for consistent timezone handling.

All datetime values in the system should be timezone-aware UTC.
Rendering into a tenant's wall clock happens only at the audit boundary
(see app.application.services.timezone_localizer).
"""

from datetime import UTC, datetime

# Wall-clock format used for localized audit values.
LOCAL_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone
    - If aware, converts to UTC

    Use at repository/persistence boundaries to normalize datetimes.

    Args:
        dt: A datetime that may be naive or aware

    Returns:
        UTC-aware datetime or None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        # Naive datetime - assume it's UTC and attach timezone
        return dt.replace(tzinfo=UTC)

    # Aware datetime - convert to UTC
    return dt.astimezone(UTC)


def to_utc_iso_seconds(dt: datetime) -> str:
    """
    Render a datetime as UTC ISO 8601 truncated to whole seconds.

    Example: 2025-03-01T17:04:05+00:00

    Args:
        dt: Naive (taken as UTC) or aware datetime

    Returns:
        ISO 8601 string in UTC without fractional seconds
    """
    utc = dt.replace(tzinfo=UTC) if dt.tzinfo is None else dt.astimezone(UTC)
    return utc.replace(microsecond=0).isoformat()
