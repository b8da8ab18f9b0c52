"""Expiry reminder scheduling for approved prescriptions."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from sqlalchemy.orm import Session
from typing import Optional
import logging

from rxengine.models.prescription import Prescription
from rxengine.services.config_service import ConfigService
from rxengine.services.errors import ReminderInvalidWindowError, ReminderNotEligibleError
from rxengine.services.notification_service import NotificationService
from rxengine.services.prescription_lifecycle import REMINDABLE_STATUSES, derive_status
from rxengine.utils.timezone import to_naive_utc

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReminderHandle:
    id: str
    prescription_id: str
    fire_at: datetime
    channel: str


class ReminderService:
    """Validates "remind me N days before expiry" requests and hands them to notifications."""

    def __init__(self, db: Session, notifier=None):
        self.db = db
        self.notifier = notifier or NotificationService(db)
        self.config = ConfigService(db)

    def schedule_reminder(
        self,
        prescription: Prescription,
        notify_before_days: int,
        now: datetime,
        channel: Optional[str] = None
    ) -> ReminderHandle:
        """Schedule a reminder ``notify_before_days`` before expiry.

        Raises ReminderNotEligibleError unless the prescription is ACTIVE or
        EXPIRING, and ReminderInvalidWindowError unless the lead time is a
        whole number of days within the remaining validity.
        """
        state = derive_status(prescription, now)
        if state.derived_status not in REMINDABLE_STATUSES:
            logger.warning(
                f"Reminder refused for prescription {prescription.id}: {state.derived_status.value}"
            )
            raise ReminderNotEligibleError(prescription_id=prescription.id)

        # Whole days actually remaining; late in a local day this is one less than days_left
        max_days = min(state.days_left, (state.expires_at - to_naive_utc(now)) // timedelta(days=1))

        if (
            isinstance(notify_before_days, bool)
            or not isinstance(notify_before_days, int)
            or notify_before_days < 1
            or notify_before_days > max_days
        ):
            raise ReminderInvalidWindowError(
                f"Reminder must be between 1 and {max(max_days, 0)} day(s) before expiry",
                prescription_id=prescription.id
            )

        channel = channel or self.config.get("REMINDER_DEFAULT_CHANNEL", "email")
        fire_at = state.expires_at - timedelta(days=notify_before_days)

        handle_id = self.notifier.schedule(prescription, fire_at, channel, notify_before_days)
        return ReminderHandle(
            id=handle_id,
            prescription_id=prescription.id,
            fire_at=fire_at,
            channel=channel
        )
