"""Tests for InputSanitizer timezone names."""

import pytest

from app.shared.utils.sanitization import InputSanitizer


@pytest.mark.parametrize(
    "value",
    ["America/Guayaquil", "UTC", "Etc/GMT+5", "America/Argentina/Buenos_Aires"],
)
def test_safe_timezones(value: str) -> None:
    assert InputSanitizer.is_safe_timezone(value)
    assert InputSanitizer.sanitize_timezone(value, "UTC") == value


@pytest.mark.parametrize(
    "value",
    [
        None,
        "",
        "UTC'; DROP TABLE audit_logs; --",
        "Mars/Olympus",
        "a b",
        "x" * 100,
        "America",
        "Etc",
    ],
)
def test_unsafe_timezones_fall_back(value: str | None) -> None:
    assert not InputSanitizer.is_safe_timezone(value)
    assert InputSanitizer.sanitize_timezone(value, "America/Guayaquil") == "America/Guayaquil"


def test_timezone_is_trimmed() -> None:
    assert InputSanitizer.sanitize_timezone("  Europe/Madrid ", "UTC") == "Europe/Madrid"
