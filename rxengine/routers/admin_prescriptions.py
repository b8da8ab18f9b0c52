"""Admin prescription review API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import Optional
import json
import logging
import math

from rxengine.config import settings
from rxengine.database import get_db
from rxengine.routers.prescriptions import build_prescription_response
from rxengine.schemas.prescription import (
    AdminPrescriptionListResponse,
    AuditEventResponse,
    AuditHistoryResponse,
    ReviewRequest,
    ReviewResponse,
)
from rxengine.services.auth_service import require_admin
from rxengine.services.config_service import ConfigService
from rxengine.services.prescription_lifecycle import derive_status
from rxengine.services.prescription_service import PrescriptionService
from rxengine.services.review_service import ReviewService
from rxengine.utils.timezone import utcnow

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=AdminPrescriptionListResponse)
async def list_prescriptions(
    status_filter: Optional[str] = Query(
        default="PENDING", alias="status", pattern="^(PENDING|APPROVED|REJECTED|ALL)$"
    ),
    page: int = Query(default=1, ge=1),
    limit: Optional[int] = Query(default=None, ge=1),
    db: Session = Depends(get_db),
    admin_user: dict = Depends(require_admin)
):
    """List prescriptions by stored status, oldest first. Requires admin role."""
    if limit is None:
        limit = ConfigService(db).get_int("ADMIN_PAGE_SIZE", 10)
    limit = min(limit, settings.ADMIN_PAGE_SIZE_MAX)

    total, annotated = PrescriptionService(db).list_for_admin(
        utcnow(),
        status=None if status_filter == "ALL" else status_filter,
        page=page,
        limit=limit
    )

    return AdminPrescriptionListResponse(
        total=total,
        page=page,
        total_pages=math.ceil(total / limit) if total else 0,
        prescriptions=[build_prescription_response(p, state) for p, state in annotated]
    )


@router.post("/{prescription_id}/review", response_model=ReviewResponse)
async def review_prescription(
    prescription_id: str,
    request: ReviewRequest,
    db: Session = Depends(get_db),
    admin_user: dict = Depends(require_admin)
):
    """Approve or reject a pending prescription. Requires admin role."""
    prescription = PrescriptionService(db).get_prescription(prescription_id)
    if not prescription:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Prescription not found"
        )

    now = utcnow()
    outcome = ReviewService(db).review(
        prescription,
        request.decision,
        request.notes,
        admin_user,
        now
    )

    return ReviewResponse(
        prescription=build_prescription_response(outcome.prescription, derive_status(outcome.prescription, now)),
        audit_logged=outcome.audit_logged,
        warning=outcome.warning
    )


@router.get("/{prescription_id}/audit", response_model=AuditHistoryResponse)
async def get_prescription_audit(
    prescription_id: str,
    db: Session = Depends(get_db),
    admin_user: dict = Depends(require_admin)
):
    """Get the audit trail of a prescription. Requires admin role."""
    prescription_service = PrescriptionService(db)
    if not prescription_service.get_prescription(prescription_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Prescription not found"
        )

    logs = prescription_service.get_audit_history(prescription_id)
    return AuditHistoryResponse(
        total=len(logs),
        events=[
            AuditEventResponse(
                id=log.id,
                timestamp=log.timestamp,
                user_id=log.user_id,
                user_email=log.user_email,
                action=log.action,
                resource_type=log.resource_type,
                resource_id=log.resource_id,
                details=json.loads(log.details) if log.details else None,
                success=log.success
            )
            for log in logs
        ]
    )
