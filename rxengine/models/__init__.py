"""Database models for the Prescription Lifecycle Service."""

from rxengine.models.prescription import Prescription, PrescriptionItem
from rxengine.models.reminder import PrescriptionReminder
from rxengine.models.audit_log import AuditLog
from rxengine.models.system_config import SystemConfig

__all__ = [
    "Prescription",
    "PrescriptionItem",
    "PrescriptionReminder",
    "AuditLog",
    "SystemConfig",
]
