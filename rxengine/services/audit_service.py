"""Audit logging service for prescription compliance."""

from datetime import datetime
from sqlalchemy.orm import Session
import json
import logging

from rxengine.models.audit_log import AuditLog
from rxengine.services.config_service import ConfigService

logger = logging.getLogger(__name__)


class AuditService:
    """Service for the audit trail of admin and customer actions."""

    def __init__(self, db: Session):
        self.db = db
        self.config = ConfigService(db)

    def log_action(
        self,
        user_id: str,
        user_email: str,
        action: str,
        resource_type: str,
        resource_id: str = None,
        details: dict = None,
        timestamp: datetime = None,
        success: bool = True,
        failure_reason: str = None,
        user_ip: str = None
    ) -> bool:
        """Log an action for audit trail.

        Returns False when the event could not be written so the caller can
        retry. Never raises: a broken audit store must not undo the action
        being audited.
        """
        try:
            if not self.config.get_bool("AUDIT_LOG_ENABLED", True):
                return True

            audit_log = AuditLog(
                user_id=user_id,
                user_email=user_email,
                action=action,
                resource_type=resource_type,
                resource_id=resource_id,
                details=json.dumps(self._sanitize_details(details), default=str) if details else None,
                success=success,
                failure_reason=failure_reason,
                user_ip=user_ip
            )
            if timestamp is not None:
                audit_log.timestamp = timestamp

            self.db.add(audit_log)
            self.db.commit()

            logger.info(
                f"Audit log: {user_email} {action} {resource_type}/{resource_id} - "
                f"{'SUCCESS' if success else 'FAILURE'}"
            )
            return True

        except Exception as e:
            logger.error(f"Failed to create audit log: {e}")
            self.db.rollback()
            return False

    def _sanitize_details(self, details: dict) -> dict:
        """Remove sensitive data from audit metadata."""
        sensitive_fields = [
            "password",
            "token",
            "secret",
            "patient_phone",
        ]

        sanitized = details.copy()

        for field in sensitive_fields:
            if field in sanitized:
                sanitized[field] = "[REDACTED]"

        return sanitized

    def get_resource_history(self, resource_type: str, resource_id: str, limit: int = 100) -> list:
        """Get audit events for one resource, oldest first."""
        return (
            self.db.query(AuditLog)
            .filter(
                AuditLog.resource_type == resource_type,
                AuditLog.resource_id == resource_id
            )
            .order_by(AuditLog.timestamp.asc(), AuditLog.id.asc())
            .limit(limit)
            .all()
        )
