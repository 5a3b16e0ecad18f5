"""Input sanitization utilities for injection prevention."""

import re
from typing import ClassVar
from zoneinfo import ZoneInfo


class InputSanitizer:
    """
    Validate values that end up interpolated into raw SQL.

    Use parameterized queries as the primary defense; these helpers
    cover the statements PostgreSQL does not parameterize (SET LOCAL).
    """

    TIMEZONE_PATTERN: ClassVar[re.Pattern[str]] = re.compile(r"^[a-zA-Z0-9/_+-]+$")
    TIMEZONE_MAX_LENGTH: ClassVar[int] = 64

    @classmethod
    def is_safe_timezone(cls, value: str | None) -> bool:
        """Return True if value is an allow-listed, loadable IANA timezone name."""
        if not value or len(value) > cls.TIMEZONE_MAX_LENGTH:
            return False
        if not cls.TIMEZONE_PATTERN.fullmatch(value):
            return False
        try:
            ZoneInfo(value)
        except (ValueError, KeyError, OSError):
            # ZoneInfoNotFoundError subclasses KeyError; a zone directory
            # such as "America" raises IsADirectoryError
            return False
        return True

    @classmethod
    def sanitize_timezone(cls, value: str | None, default: str) -> str:
        """Return the trimmed timezone if safe, otherwise the default.

        Never raises: an unsafe or unknown zone silently becomes the default,
        so callers can interpolate the result into SET LOCAL timezone.

        Args:
            value: Raw timezone name (e.g. from tenant settings).
            default: Fallback IANA timezone name.

        Returns:
            A validated IANA timezone name.
        """
        candidate = value.strip() if isinstance(value, str) else None
        if candidate and cls.is_safe_timezone(candidate):
            return candidate
        return default
