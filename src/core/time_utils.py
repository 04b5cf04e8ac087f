"""UTC time arithmetic for forecast readings.

All conversions here are plain UTC arithmetic: no local time zone,
no daylight-saving adjustment.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
import re

from core.constants import PERIOD_DATE_SUFFIX

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_PERIOD_DATE_PATTERN = re.compile(
    r"(?P<year>[0-9]{4})-(?P<month>[0-9]{2})-(?P<day>[0-9]{2})" + re.escape(PERIOD_DATE_SUFFIX)
)


def parse_period_midnight(value: str) -> datetime:
    """Parse a Period date string into midnight UTC of that date.

    Args:
        value: Date string such as ``2016-01-01Z``.

    Returns:
        Aware UTC datetime at 00:00:00.

    Raises:
        ValueError: If the string does not match the format or names
            an impossible calendar date.
    """
    match = _PERIOD_DATE_PATTERN.fullmatch(value)
    if match is None:
        raise ValueError(f"expected YYYY-MM-DD{PERIOD_DATE_SUFFIX}, got '{value}'")
    return datetime(
        int(match.group("year")),
        int(match.group("month")),
        int(match.group("day")),
        tzinfo=timezone.utc,
    )


def add_minutes(midnight: datetime, minutes_after_midnight: int) -> datetime:
    """Return ``midnight`` shifted forward by whole minutes."""
    return midnight + timedelta(minutes=minutes_after_midnight)


def ensure_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime, treating naive values as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_epoch_seconds(value: datetime) -> int:
    """Convert a datetime to integer epoch seconds, flooring sub-second parts."""
    return (ensure_utc(value) - _EPOCH) // timedelta(seconds=1)


def from_epoch_seconds(value: int) -> datetime:
    """Convert integer epoch seconds to an aware UTC datetime."""
    return _EPOCH + timedelta(seconds=value)
