"""Audit log model for prescription compliance tracking."""

from sqlalchemy import Column, String, DateTime, Boolean, Integer, Text, Index
from sqlalchemy.sql import func
from rxengine.database import Base


class AuditLog(Base):
    """Audit log for admin decisions and prescription lifecycle actions."""

    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    timestamp = Column(DateTime, server_default=func.now())

    # Actor information
    user_id = Column(String(100), nullable=False)
    user_email = Column(String(255), nullable=False)
    user_ip = Column(String(50), nullable=True)

    # Action details
    action = Column(String(50), nullable=False)
    resource_type = Column(String(50), nullable=False)
    resource_id = Column(String(100), nullable=True)
    details = Column(Text, nullable=True)  # JSON metadata

    # Results
    success = Column(Boolean, nullable=False)
    failure_reason = Column(Text, nullable=True)

    __table_args__ = (
        Index("idx_timestamp", "timestamp"),
        Index("idx_user_id", "user_id"),
        Index("idx_resource", "resource_type", "resource_id"),
        Index("idx_action", "action"),
    )
