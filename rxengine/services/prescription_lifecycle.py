"""
Prescription lifecycle rules.

Turns a stored prescription (issue date, review outcome, optional expiry
override) into the status shown to customers, and decides whether it may
be used to refill a cart. Every function takes the current instant as an
argument and never reads the clock.

Lifecycle of an approved prescription, by whole calendar days left until
expiry in the store timezone:

    days_left > 14        ACTIVE     reorderable
    0 <= days_left <= 14  EXPIRING   reorderable
    days_left < 0         EXPIRED    not reorderable

Pending and rejected prescriptions pass their stored status through and
are never reorderable.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional
from zoneinfo import ZoneInfo

from rxengine.utils.timezone import STORE_TZ, calendar_days_between, to_naive_utc

VALIDITY_PERIOD = timedelta(days=180)
EXPIRING_WINDOW_DAYS = 14


class StoredStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ReviewDecision(str, Enum):
    APPROVE = "APPROVE"
    REJECT = "REJECT"


class DerivedStatus(str, Enum):
    ACTIVE = "ACTIVE"
    EXPIRING = "EXPIRING"
    EXPIRED = "EXPIRED"
    PENDING = "PENDING"
    REJECTED = "REJECTED"


REMINDABLE_STATUSES = (DerivedStatus.ACTIVE, DerivedStatus.EXPIRING)


@dataclass(frozen=True)
class DerivedState:
    """Status of a prescription as of a given instant."""

    derived_status: DerivedStatus
    expires_at: Optional[datetime]
    is_reorderable: bool
    days_left: Optional[int] = None


def resolve_expires_at(record) -> Optional[datetime]:
    """Effective expiry: the stored override, else issue date plus the validity period."""
    if record.expires_at is not None:
        return to_naive_utc(record.expires_at)
    if record.prescription_date is None:
        return None
    return to_naive_utc(record.prescription_date) + VALIDITY_PERIOD


def derive_status(record, now: datetime, tz: ZoneInfo = STORE_TZ) -> DerivedState:
    """Derive the customer-facing status of ``record`` at ``now``.

    ``record`` is anything with ``status``, ``prescription_date`` and
    ``expires_at`` attributes. Never raises.
    """
    expires_at = resolve_expires_at(record)
    stored = (record.status or StoredStatus.PENDING.value).upper()

    if stored == StoredStatus.PENDING.value:
        return DerivedState(DerivedStatus.PENDING, expires_at, False)

    if stored != StoredStatus.APPROVED.value:
        return DerivedState(DerivedStatus.REJECTED, expires_at, False)

    if expires_at is None:
        # Approved without an issue date cannot happen through review; treat as unusable
        return DerivedState(DerivedStatus.EXPIRED, None, False)

    days_left = calendar_days_between(to_naive_utc(now), expires_at, tz)

    if days_left < 0:
        return DerivedState(DerivedStatus.EXPIRED, expires_at, False, days_left)
    if days_left <= EXPIRING_WINDOW_DAYS:
        return DerivedState(DerivedStatus.EXPIRING, expires_at, True, days_left)
    return DerivedState(DerivedStatus.ACTIVE, expires_at, True, days_left)


def can_reorder(record, now: datetime, tz: ZoneInfo = STORE_TZ) -> bool:
    """Whether ``record`` may be used to refill a cart at ``now``."""
    return derive_status(record, now, tz).is_reorderable
