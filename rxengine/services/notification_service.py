"""Notification scheduling for prescription expiry reminders."""

from datetime import datetime
from sqlalchemy.orm import Session
import logging

from rxengine.models.prescription import Prescription
from rxengine.models.reminder import PrescriptionReminder

logger = logging.getLogger(__name__)


class NotificationService:
    """Queues reminders for the notification system to deliver.

    Delivery itself (email/SMS/push) happens elsewhere; this service only
    records what to send and when.
    """

    def __init__(self, db: Session):
        self.db = db

    def schedule(
        self,
        prescription: Prescription,
        fire_at: datetime,
        channel: str,
        notify_before_days: int
    ) -> str:
        """Queue a reminder and return its id as an opaque handle."""
        reminder = PrescriptionReminder(
            prescription_id=prescription.id,
            user_id=prescription.user_id,
            fire_at=fire_at,
            channel=channel,
            notify_before_days=notify_before_days,
            status=PrescriptionReminder.STATUS_SCHEDULED,
            message=(
                f"Your prescription {prescription.reference_number} expires in "
                f"{notify_before_days} day(s). Reorder now?"
            )
        )
        self.db.add(reminder)
        self.db.commit()
        self.db.refresh(reminder)

        logger.info(
            f"Reminder {reminder.id} scheduled for prescription {prescription.id} "
            f"at {fire_at.isoformat()} via {channel}"
        )
        return reminder.id
