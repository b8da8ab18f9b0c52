"""Prescription schemas for request/response validation."""

from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List, Dict, Any
from datetime import datetime
import re

from rxengine.services.prescription_lifecycle import DerivedStatus, ReviewDecision
from rxengine.utils.timezone import to_naive_utc


class PrescriptionItemIn(BaseModel):
    """A medicine line captured with an upload."""
    product_id: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=200)
    quantity: int = Field(default=1, ge=1, le=1000)


class PrescriptionCreate(BaseModel):
    """Metadata submitted after the prescription artifact has been uploaded."""
    patient_name: str = Field(..., min_length=2, max_length=100)
    doctor_name: str = Field(..., min_length=2, max_length=100)
    prescription_date: datetime
    prescription_image: str = Field(..., min_length=1, max_length=500)
    hospital_clinic: Optional[str] = Field(default=None, max_length=200)
    patient_age: Optional[int] = Field(default=None, ge=0, le=150)
    patient_phone: Optional[str] = None
    expires_at: Optional[datetime] = None
    items: List[PrescriptionItemIn] = []

    @field_validator("patient_phone")
    @classmethod
    def validate_phone(cls, v):
        if v and not re.match(r"^\+?[0-9\s\-()]{7,20}$", v):
            raise ValueError("Invalid phone number format")
        return v

    @model_validator(mode="after")
    def validate_expiry_after_issue(self):
        if self.expires_at is not None and to_naive_utc(self.expires_at) <= to_naive_utc(self.prescription_date):
            raise ValueError("expires_at must be after prescription_date")
        return self


class MedicineLineResponse(BaseModel):
    product_id: str
    name: str
    quantity: int


class PrescriptionResponse(BaseModel):
    """Prescription with its status derived at response time."""
    id: str
    reference_number: str
    user_id: str
    patient_name: str
    doctor_name: str
    hospital_clinic: Optional[str] = None
    prescription_date: Optional[datetime] = None
    prescription_image: str
    status: str
    admin_notes: Optional[str] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    derived_status: DerivedStatus
    is_reorderable: bool
    days_left: Optional[int] = None
    items: List[MedicineLineResponse] = []


class PrescriptionListResponse(BaseModel):
    total: int
    prescriptions: List[PrescriptionResponse]


class AdminPrescriptionListResponse(BaseModel):
    total: int
    page: int
    total_pages: int
    prescriptions: List[PrescriptionResponse]


class ReviewRequest(BaseModel):
    """Admin decision on a pending prescription."""
    decision: ReviewDecision
    notes: Optional[str] = Field(default=None, max_length=1000)

    @model_validator(mode="after")
    def require_notes_on_reject(self):
        if self.decision == ReviewDecision.REJECT and not (self.notes and self.notes.strip()):
            raise ValueError("Rejection notes are required")
        return self


class ReviewResponse(BaseModel):
    prescription: PrescriptionResponse
    audit_logged: bool
    warning: Optional[str] = None


class ReorderResponse(BaseModel):
    prescription_id: str
    items: List[MedicineLineResponse]
    message: str


class ReminderRequest(BaseModel):
    notify_before_days: Optional[int] = None
    channel: Optional[str] = Field(default=None, pattern="^(email|sms|push)$")


class ReminderResponse(BaseModel):
    reminder_id: str
    prescription_id: str
    fire_at: datetime
    channel: str


class AuditEventResponse(BaseModel):
    id: int
    timestamp: Optional[datetime] = None
    user_id: str
    user_email: str
    action: str
    resource_type: str
    resource_id: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    success: bool


class AuditHistoryResponse(BaseModel):
    total: int
    events: List[AuditEventResponse]
