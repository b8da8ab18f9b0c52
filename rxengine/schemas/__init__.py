"""Pydantic schemas for request/response validation."""

from rxengine.schemas.prescription import (
    PrescriptionItemIn,
    PrescriptionCreate,
    PrescriptionResponse,
    PrescriptionListResponse,
    AdminPrescriptionListResponse,
    ReviewRequest,
    ReviewResponse,
    ReorderResponse,
    ReminderRequest,
    ReminderResponse,
    AuditHistoryResponse,
)

__all__ = [
    "PrescriptionItemIn",
    "PrescriptionCreate",
    "PrescriptionResponse",
    "PrescriptionListResponse",
    "AdminPrescriptionListResponse",
    "ReviewRequest",
    "ReviewResponse",
    "ReorderResponse",
    "ReminderRequest",
    "ReminderResponse",
    "AuditHistoryResponse",
]
