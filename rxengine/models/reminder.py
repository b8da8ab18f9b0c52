"""Scheduled prescription expiry reminders."""

from sqlalchemy import Column, Integer, String, DateTime, Text, Index, ForeignKey
from sqlalchemy.sql import func
import uuid

from rxengine.database import Base


class PrescriptionReminder(Base):
    """A reminder queued for delivery by the notification system."""

    __tablename__ = "prescription_reminders"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    prescription_id = Column(String(36), ForeignKey("prescriptions.id"), nullable=False)
    user_id = Column(String(100), nullable=False)

    fire_at = Column(DateTime, nullable=False)
    channel = Column(String(20), nullable=False, default="email")  # email, sms, push
    notify_before_days = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default="SCHEDULED")
    message = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now())

    __table_args__ = (
        Index("idx_reminders_fire_at", "fire_at"),
        Index("idx_reminders_prescription", "prescription_id"),
    )

    STATUS_SCHEDULED = "SCHEDULED"
