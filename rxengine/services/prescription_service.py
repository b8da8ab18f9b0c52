"""Prescription intake and listing service."""

from datetime import datetime, timezone
from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import List, Optional, Tuple
import logging
import secrets
import string

from rxengine.models.audit_log import AuditLog
from rxengine.models.prescription import Prescription, PrescriptionItem
from rxengine.services.audit_service import AuditService
from rxengine.services.prescription_lifecycle import DerivedState, StoredStatus, derive_status
from rxengine.services.review_service import RESOURCE_TYPE
from rxengine.utils.timezone import to_naive_utc

logger = logging.getLogger(__name__)

_REFERENCE_ALPHABET = string.ascii_uppercase + string.digits


def generate_reference_number(now: datetime) -> str:
    """Generate a reference number in format RX<epoch millis><6 random chars>."""
    millis = int(to_naive_utc(now).replace(tzinfo=timezone.utc).timestamp() * 1000)
    suffix = "".join(secrets.choice(_REFERENCE_ALPHABET) for _ in range(6))
    return f"RX{millis}{suffix}"


class PrescriptionService:
    """Service for creating and reading prescriptions."""

    def __init__(self, db: Session, audit_sink=None):
        self.db = db
        self.audit_sink = audit_sink or AuditService(db)

    def create_prescription(self, user: dict, data, now: datetime) -> Prescription:
        """Store a newly uploaded prescription as PENDING with its medicine lines."""
        prescription = Prescription(
            reference_number=generate_reference_number(now),
            user_id=user["user_id"],
            patient_name=data.patient_name,
            patient_age=data.patient_age,
            patient_phone=data.patient_phone,
            doctor_name=data.doctor_name,
            hospital_clinic=data.hospital_clinic,
            prescription_date=to_naive_utc(data.prescription_date),
            prescription_image=data.prescription_image,
            expires_at=to_naive_utc(data.expires_at),
            status=StoredStatus.PENDING.value,
            created_at=to_naive_utc(now),
            items=[
                PrescriptionItem(product_id=item.product_id, name=item.name, quantity=item.quantity)
                for item in data.items
            ]
        )

        self.db.add(prescription)
        self.db.commit()
        self.db.refresh(prescription)

        self.audit_sink.log_action(
            user_id=user["user_id"],
            user_email=user["user_email"],
            action="CREATE",
            resource_type=RESOURCE_TYPE,
            resource_id=prescription.id,
            details={"reference_number": prescription.reference_number},
            timestamp=now,
            success=True
        )

        logger.info(f"Prescription {prescription.id} ({prescription.reference_number}) uploaded by {user['user_id']}")
        return prescription

    def get_prescription(self, prescription_id: str) -> Optional[Prescription]:
        """Get prescription by ID."""
        return self.db.query(Prescription).filter(Prescription.id == prescription_id).first()

    def get_user_prescription(self, user_id: str, prescription_id: str) -> Optional[Prescription]:
        """Get a prescription only if it belongs to ``user_id``."""
        return (
            self.db.query(Prescription)
            .filter(Prescription.id == prescription_id, Prescription.user_id == user_id)
            .first()
        )

    def list_for_user(self, user_id: str, now: datetime) -> List[Tuple[Prescription, DerivedState]]:
        """Get a user's prescriptions, newest first, each with its status at ``now``."""
        prescriptions = (
            self.db.query(Prescription)
            .filter(Prescription.user_id == user_id)
            .order_by(Prescription.created_at.desc(), Prescription.prescription_date.desc())
            .all()
        )
        return [(p, derive_status(p, now)) for p in prescriptions]

    def list_for_admin(
        self,
        now: datetime,
        status: Optional[str] = StoredStatus.PENDING.value,
        page: int = 1,
        limit: int = 10
    ) -> Tuple[int, List[Tuple[Prescription, DerivedState]]]:
        """Get the review queue, oldest first, filtered by stored status.

        Returns (total matching, page of prescriptions with derived status).
        """
        query = self.db.query(Prescription)
        if status:
            query = query.filter(func.upper(Prescription.status) == status.upper())

        total = query.count()
        prescriptions = (
            query.order_by(Prescription.created_at.asc(), Prescription.reference_number.asc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return total, [(p, derive_status(p, now)) for p in prescriptions]

    def get_audit_history(self, prescription_id: str) -> List[AuditLog]:
        """Get the audit trail of a prescription."""
        return AuditService(self.db).get_resource_history(RESOURCE_TYPE, prescription_id)
