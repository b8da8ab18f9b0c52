"""System configuration model."""

from sqlalchemy import Column, String, DateTime, Text
from sqlalchemy.sql import func
from rxengine.database import Base


class SystemConfig(Base):
    """System configuration key-value store."""

    __tablename__ = "system_config"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=True)
    value_type = Column(String(20), default="string")  # int, bool, string
    description = Column(String(500), nullable=True)
    category = Column(String(50), nullable=True)  # compliance, reminders, admin
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
    updated_by = Column(String(100), nullable=True)

    # Default configuration values
    DEFAULTS = {
        # Compliance Settings
        "AUDIT_LOG_ENABLED": {
            "value": "true",
            "value_type": "bool",
            "description": "Record audit events for prescription uploads and reviews",
            "category": "compliance"
        },
        # Reminder Settings
        "REMINDER_DEFAULT_CHANNEL": {
            "value": "email",
            "value_type": "string",
            "description": "Channel used for expiry reminders when the customer does not pick one",
            "category": "reminders"
        },
        "DEFAULT_NOTIFY_BEFORE_DAYS": {
            "value": "3",
            "value_type": "int",
            "description": "Days before expiry to remind when the customer does not specify",
            "category": "reminders"
        },
        # Admin Settings
        "ADMIN_PAGE_SIZE": {
            "value": "10",
            "value_type": "int",
            "description": "Default page size of the admin prescription review queue",
            "category": "admin"
        },
    }
