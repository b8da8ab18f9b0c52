"""Prescription models for uploaded customer prescriptions."""

from sqlalchemy import Column, Integer, String, DateTime, Text, Index, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import uuid

from rxengine.database import Base


def _new_id():
    return str(uuid.uuid4())


class Prescription(Base):
    """A customer prescription and its stored review state."""

    __tablename__ = "prescriptions"

    id = Column(String(36), primary_key=True, default=_new_id)
    reference_number = Column(String(32), nullable=False, unique=True)
    user_id = Column(String(100), nullable=False, index=True)

    # Captured at upload, immutable afterwards
    patient_name = Column(String(100), nullable=False)
    patient_age = Column(Integer, nullable=True)
    patient_phone = Column(String(30), nullable=True)
    doctor_name = Column(String(100), nullable=False)
    hospital_clinic = Column(String(200), nullable=True)
    prescription_date = Column(DateTime, nullable=True)  # Issue date; required before review
    prescription_image = Column(String(500), nullable=False)  # URL owned by the file intake service

    # Review state (PENDING, APPROVED, REJECTED)
    status = Column(String(20), nullable=False, default="PENDING")
    admin_notes = Column(Text, nullable=True)
    reviewed_by = Column(String(255), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)

    # Explicit expiry override; NULL means prescription_date + validity period
    expires_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    items = relationship(
        "PrescriptionItem",
        back_populates="prescription",
        cascade="all, delete-orphan",
        order_by="PrescriptionItem.id",
    )

    __table_args__ = (
        Index("idx_prescriptions_status", "status"),
        Index("idx_prescriptions_user_created", "user_id", "created_at"),
    )


class PrescriptionItem(Base):
    """A medicine line captured with a prescription, used to prefill the cart on reorder."""

    __tablename__ = "prescription_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    prescription_id = Column(String(36), ForeignKey("prescriptions.id"), nullable=False, index=True)
    product_id = Column(String(100), nullable=False)
    name = Column(String(200), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)

    prescription = relationship("Prescription", back_populates="items")
