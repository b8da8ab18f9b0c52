"""Customer prescription API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
import logging

from rxengine.database import get_db
from rxengine.models.prescription import Prescription
from rxengine.schemas.prescription import (
    MedicineLineResponse,
    PrescriptionCreate,
    PrescriptionResponse,
    PrescriptionListResponse,
    ReorderResponse,
    ReminderRequest,
    ReminderResponse,
)
from rxengine.services.auth_service import get_current_user
from rxengine.services.config_service import ConfigService
from rxengine.services.prescription_lifecycle import DerivedState, derive_status
from rxengine.services.prescription_service import PrescriptionService
from rxengine.services.reminder_service import ReminderService
from rxengine.services.reorder_service import ReorderService
from rxengine.utils.timezone import utcnow

router = APIRouter()
logger = logging.getLogger(__name__)


def build_prescription_response(prescription: Prescription, state: DerivedState) -> PrescriptionResponse:
    """Combine a stored prescription with its derived status."""
    return PrescriptionResponse(
        id=prescription.id,
        reference_number=prescription.reference_number,
        user_id=prescription.user_id,
        patient_name=prescription.patient_name,
        doctor_name=prescription.doctor_name,
        hospital_clinic=prescription.hospital_clinic,
        prescription_date=prescription.prescription_date,
        prescription_image=prescription.prescription_image,
        status=prescription.status,
        admin_notes=prescription.admin_notes,
        reviewed_by=prescription.reviewed_by,
        reviewed_at=prescription.reviewed_at,
        created_at=prescription.created_at,
        expires_at=state.expires_at,
        derived_status=state.derived_status,
        is_reorderable=state.is_reorderable,
        days_left=state.days_left,
        items=[
            MedicineLineResponse(product_id=item.product_id, name=item.name, quantity=item.quantity)
            for item in prescription.items
        ]
    )


def _get_owned_prescription(db: Session, user: dict, prescription_id: str) -> Prescription:
    prescription = PrescriptionService(db).get_user_prescription(user["user_id"], prescription_id)
    if not prescription:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Prescription not found"
        )
    return prescription


@router.post("", response_model=PrescriptionResponse, status_code=status.HTTP_201_CREATED)
async def create_prescription(
    request: PrescriptionCreate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    """Record an uploaded prescription for pharmacist review."""
    now = utcnow()
    prescription = PrescriptionService(db).create_prescription(current_user, request, now)
    return build_prescription_response(prescription, derive_status(prescription, now))


@router.get("", response_model=PrescriptionListResponse)
async def list_my_prescriptions(
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    """List the caller's prescriptions with their current status."""
    annotated = PrescriptionService(db).list_for_user(current_user["user_id"], utcnow())
    return PrescriptionListResponse(
        total=len(annotated),
        prescriptions=[build_prescription_response(p, state) for p, state in annotated]
    )


@router.get("/{prescription_id}", response_model=PrescriptionResponse)
async def get_my_prescription(
    prescription_id: str,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    """Get one of the caller's prescriptions."""
    prescription = _get_owned_prescription(db, current_user, prescription_id)
    return build_prescription_response(prescription, derive_status(prescription, utcnow()))


@router.post("/{prescription_id}/reorder", response_model=ReorderResponse)
async def reorder_prescription(
    prescription_id: str,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    """Get the medicines of an approved, unexpired prescription for cart prefill."""
    prescription = _get_owned_prescription(db, current_user, prescription_id)
    items = ReorderService(db).request_reorder(prescription, utcnow())

    if items:
        message = f"{len(items)} medicine(s) ready to add to your cart"
    else:
        message = "No medicines are listed on this prescription"

    return ReorderResponse(
        prescription_id=prescription.id,
        items=[
            MedicineLineResponse(product_id=item.product_id, name=item.name, quantity=item.quantity)
            for item in items
        ],
        message=message
    )


@router.post("/{prescription_id}/reminder", response_model=ReminderResponse)
async def set_prescription_reminder(
    prescription_id: str,
    request: ReminderRequest,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    """Ask to be reminded a number of days before the prescription expires."""
    prescription = _get_owned_prescription(db, current_user, prescription_id)

    notify_before_days = request.notify_before_days
    if notify_before_days is None:
        notify_before_days = ConfigService(db).get_int("DEFAULT_NOTIFY_BEFORE_DAYS", 3)

    handle = ReminderService(db).schedule_reminder(
        prescription,
        notify_before_days,
        utcnow(),
        channel=request.channel
    )

    return ReminderResponse(
        reminder_id=handle.id,
        prescription_id=handle.prescription_id,
        fire_at=handle.fire_at,
        channel=handle.channel
    )
