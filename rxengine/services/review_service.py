"""Admin review of uploaded prescriptions."""

from dataclasses import dataclass
from datetime import datetime
from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import Optional
import logging

from rxengine.models.prescription import Prescription
from rxengine.services.audit_service import AuditService
from rxengine.services.errors import (
    ReviewAlreadyFinalError,
    ReviewMissingPrescriptionDateError,
)
from rxengine.services.prescription_lifecycle import ReviewDecision, StoredStatus

logger = logging.getLogger(__name__)

REVIEW_ACTION = "REVIEW_PRESCRIPTION"
RESOURCE_TYPE = "PRESCRIPTION"
AUDIT_WARNING = "Review saved but the audit event could not be recorded; retry audit logging"


_DECISION_STATUS = {
    ReviewDecision.APPROVE: StoredStatus.APPROVED,
    ReviewDecision.REJECT: StoredStatus.REJECTED,
}


@dataclass
class ReviewOutcome:
    prescription: Prescription
    audit_logged: bool
    warning: Optional[str] = None


class ReviewService:
    """Applies an admin decision to a pending prescription, exactly once."""

    def __init__(self, db: Session, audit_sink=None):
        self.db = db
        self.audit_sink = audit_sink or AuditService(db)

    def review(
        self,
        prescription: Prescription,
        decision: ReviewDecision,
        notes: Optional[str],
        actor: dict,
        now: datetime
    ) -> ReviewOutcome:
        """Approve or reject a pending prescription.

        The PENDING check is repeated inside the UPDATE so two concurrent
        reviews cannot both succeed; the loser gets ReviewAlreadyFinalError.
        The transition is committed before the audit event is written.
        """
        decision = ReviewDecision(decision)
        previous_status = prescription.status

        if (previous_status or "").upper() != StoredStatus.PENDING.value:
            raise ReviewAlreadyFinalError(prescription_id=prescription.id)

        if prescription.prescription_date is None:
            raise ReviewMissingPrescriptionDateError(prescription_id=prescription.id)

        new_status = _DECISION_STATUS[decision].value

        updated = (
            self.db.query(Prescription)
            .filter(
                Prescription.id == prescription.id,
                func.upper(Prescription.status) == StoredStatus.PENDING.value
            )
            .update(
                {
                    Prescription.status: new_status,
                    Prescription.admin_notes: notes,
                    Prescription.reviewed_by: actor["user_email"],
                    Prescription.reviewed_at: now,
                },
                synchronize_session=False
            )
        )
        if updated != 1:
            self.db.rollback()
            logger.warning(f"Concurrent review lost for prescription {prescription.id}")
            raise ReviewAlreadyFinalError(prescription_id=prescription.id)

        self.db.commit()
        self.db.refresh(prescription)

        logger.info(
            f"Prescription {prescription.id} reviewed by {actor['user_email']}: "
            f"{previous_status} -> {new_status}"
        )

        audit_logged = self.audit_sink.log_action(
            user_id=actor["user_id"],
            user_email=actor["user_email"],
            action=REVIEW_ACTION,
            resource_type=RESOURCE_TYPE,
            resource_id=prescription.id,
            details={
                "decision": decision.value,
                "previous_status": previous_status,
                "new_status": new_status,
                "notes": notes,
            },
            timestamp=now,
            success=True
        )

        if not audit_logged:
            logger.warning(f"Audit event missing for review of prescription {prescription.id}")
            return ReviewOutcome(prescription, audit_logged=False, warning=AUDIT_WARNING)

        return ReviewOutcome(prescription, audit_logged=True)
