"""Timezone localization of audit snapshots.

Datetimes are kept in UTC everywhere else; they are rendered into the
tenant's wall clock only when an audit record is written.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

from app.application.interfaces.repositories import ITenantTimezoneLookup
from app.shared.telemetry.logging import get_logger
from app.shared.utils.datetime import (
    LOCAL_DATETIME_FORMAT,
    ensure_utc,
    to_utc_iso_seconds,
)
from app.shared.utils.sanitization import InputSanitizer

logger = get_logger(__name__)

DEFAULT_TIMEZONE = "America/Guayaquil"


def render_local(value: datetime, timezone: str) -> str:
    """Render one datetime as wall-clock time in timezone (naive = UTC).

    Falls back to UTC ISO 8601 (whole seconds) if the zone cannot be used.
    """
    try:
        return ensure_utc(value).astimezone(ZoneInfo(timezone)).strftime(
            LOCAL_DATETIME_FORMAT
        )
    except Exception:
        logger.debug("Could not localize datetime to %r; using UTC", timezone)
        return to_utc_iso_seconds(value)


def _localize_value(value: Any, timezone: str) -> Any:
    if isinstance(value, datetime):
        return render_local(value, timezone)
    if isinstance(value, Mapping):
        return {k: _localize_value(v, timezone) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [_localize_value(v, timezone) for v in value]
    return value


def localize(
    snapshot: Mapping[str, Any] | None, timezone: str
) -> dict[str, Any] | None:
    """Return a copy of snapshot with every datetime rendered in timezone.

    Nested mappings and lists are walked. Never raises.
    """
    if snapshot is None:
        return None
    return {k: _localize_value(v, timezone) for k, v in snapshot.items()}


class TimezoneResolver:
    """Resolves the timezone to render a tenant's audit values in.

    The lookup is bounded by a timeout; a miss, error, timeout or unsafe
    value all resolve to the default timezone.
    """

    def __init__(
        self,
        lookup: ITenantTimezoneLookup | None,
        default_timezone: str = DEFAULT_TIMEZONE,
        timeout_seconds: float = 0.5,
    ) -> None:
        self._lookup = lookup
        self.default_timezone = InputSanitizer.sanitize_timezone(
            default_timezone, DEFAULT_TIMEZONE
        )
        self.timeout_seconds = timeout_seconds

    async def get_timezone(self, tenant_id: str | None) -> str:
        """Return a validated IANA timezone name for tenant_id. Never raises."""
        if not tenant_id or self._lookup is None:
            return self.default_timezone
        try:
            raw = await asyncio.wait_for(
                self._lookup.get_timezone_value(tenant_id),
                timeout=self.timeout_seconds,
            )
            timezone = InputSanitizer.sanitize_timezone(raw, self.default_timezone)
            if raw and timezone != str(raw).strip():
                logger.warning(
                    "Ignoring invalid timezone %r for company %s", raw, tenant_id
                )
            return timezone
        except TimeoutError:
            logger.warning(
                "Timezone lookup timed out for company %s after %.2fs; using %s",
                tenant_id,
                self.timeout_seconds,
                self.default_timezone,
            )
            return self.default_timezone
        except Exception as e:
            logger.warning(
                "Timezone lookup failed for company %s: %s; using %s",
                tenant_id,
                e,
                self.default_timezone,
            )
            return self.default_timezone
