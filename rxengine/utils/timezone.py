"""
Timezone utilities for prescription date handling.

Datetimes are stored naive in UTC. Calendar-day arithmetic (remaining
validity) is done in the store's local timezone so a classification does
not change with the time of day a customer looks at it.
"""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from rxengine.config import settings

# Store timezone (Asia/Dhaka by default, no DST)
STORE_TZ = ZoneInfo(settings.STORE_TIMEZONE)


def utcnow() -> datetime:
    """Get the current instant as a naive UTC datetime (storage format)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(dt: datetime) -> datetime:
    """
    Normalize a datetime to naive UTC.

    Args:
        dt: A datetime object (naive assumed UTC, or timezone-aware)

    Returns:
        naive datetime in UTC
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt

    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def utc_to_local(dt: datetime, tz: ZoneInfo = STORE_TZ) -> datetime:
    """
    Convert a UTC datetime to the store timezone.

    Args:
        dt: A datetime object (naive assumed UTC, or timezone-aware)
        tz: Target timezone (defaults to the store timezone)

    Returns:
        datetime in the target timezone
    """
    if dt is None:
        return None

    # If naive, assume UTC
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(tz)


def calendar_days_between(start: datetime, end: datetime, tz: ZoneInfo = STORE_TZ) -> int:
    """Whole calendar days from ``start`` to ``end`` in ``tz`` (negative if end is earlier)."""
    return (utc_to_local(end, tz).date() - utc_to_local(start, tz).date()).days
