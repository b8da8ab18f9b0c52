"""Medicine lines of a prescription, as supplied to cart prefill."""

from dataclasses import dataclass
from sqlalchemy.orm import Session
from typing import List
import logging

from rxengine.models.prescription import Prescription, PrescriptionItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MedicineLine:
    product_id: str
    name: str
    quantity: int


class MedicineService:
    """Reads the medicines captured with a prescription. Never mutates the cart."""

    def __init__(self, db: Session):
        self.db = db

    def items_for(self, prescription: Prescription) -> List[MedicineLine]:
        """Get the medicine lines for a prescription in capture order."""
        items = (
            self.db.query(PrescriptionItem)
            .filter(PrescriptionItem.prescription_id == prescription.id)
            .order_by(PrescriptionItem.id.asc())
            .all()
        )
        return [
            MedicineLine(product_id=item.product_id, name=item.name, quantity=item.quantity)
            for item in items
        ]
