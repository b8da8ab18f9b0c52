"""Utility modules for the application."""

from rxengine.utils.timezone import (
    STORE_TZ,
    utcnow,
    to_naive_utc,
    utc_to_local,
    calendar_days_between,
)

__all__ = [
    "STORE_TZ",
    "utcnow",
    "to_naive_utc",
    "utc_to_local",
    "calendar_days_between",
]
