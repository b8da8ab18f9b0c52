"""Reorder eligibility gate for refilling a cart from a prescription."""

from datetime import datetime
from sqlalchemy.orm import Session
from typing import List
import logging

from rxengine.models.prescription import Prescription
from rxengine.services.errors import ReorderExpiredError, ReorderNotApprovedError
from rxengine.services.medicine_service import MedicineLine, MedicineService
from rxengine.services.prescription_lifecycle import (
    DerivedStatus,
    StoredStatus,
    can_reorder,
    derive_status,
)

logger = logging.getLogger(__name__)


class ReorderService:
    """Service deciding whether a prescription may prefill the cart."""

    def __init__(self, db: Session, medicine_source=None):
        self.db = db
        self.medicine_source = medicine_source or MedicineService(db)

    def can_reorder(self, prescription: Prescription, now: datetime) -> bool:
        """Check reorder eligibility at ``now``."""
        return can_reorder(prescription, now)

    def request_reorder(self, prescription: Prescription, now: datetime) -> List[MedicineLine]:
        """Get the medicines to add to the cart.

        Status is derived again here rather than trusted from an earlier
        listing. Raises ReorderNotApprovedError or ReorderExpiredError.
        """
        if (prescription.status or "").upper() != StoredStatus.APPROVED.value:
            logger.warning(
                f"Reorder refused for prescription {prescription.id}: status {prescription.status}"
            )
            raise ReorderNotApprovedError(prescription_id=prescription.id)

        state = derive_status(prescription, now)
        if state.derived_status == DerivedStatus.EXPIRED:
            logger.warning(
                f"Reorder refused for prescription {prescription.id}: expired {state.expires_at}"
            )
            raise ReorderExpiredError(prescription_id=prescription.id)

        items = self.medicine_source.items_for(prescription)
        logger.info(f"Reorder for prescription {prescription.id}: {len(items)} medicine(s)")
        return items
