"""Business logic services for the Prescription Lifecycle Service."""

from rxengine.services.audit_service import AuditService
from rxengine.services.config_service import ConfigService
from rxengine.services.medicine_service import MedicineService
from rxengine.services.notification_service import NotificationService
from rxengine.services.prescription_service import PrescriptionService
from rxengine.services.reorder_service import ReorderService
from rxengine.services.review_service import ReviewService
from rxengine.services.reminder_service import ReminderService

__all__ = [
    "AuditService",
    "ConfigService",
    "MedicineService",
    "NotificationService",
    "PrescriptionService",
    "ReorderService",
    "ReviewService",
    "ReminderService",
]
