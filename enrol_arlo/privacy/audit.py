"""Audit trail for privacy requests.

Every export and erasure request is recorded in a separate table that
has no foreign keys to ``user``, so entries survive the erasure they
describe. Each entry captures:
- What operation was performed
- The target user or context
- When the operation started and completed
- The final status and per-table row counts
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, Column, DateTime, Integer, String
from sqlalchemy.orm import Session

from enrol_arlo.database import Base


class PrivacyOperation(Enum):
    """Types of privacy operations that are logged."""
    EXPORT = "export"
    DELETE_CONTEXT = "delete_context"   # All users in one context
    DELETE_USER = "delete_user"         # One user across approved contexts
    DELETE_USERS = "delete_users"       # Several users in one context


class PrivacyAuditLogModel(Base):
    """SQLAlchemy model for privacy audit logs."""

    __tablename__ = "enrol_arlo_privacy_audit"

    id = Column(Integer, primary_key=True)
    audit_id = Column(String(36), nullable=False, unique=True, index=True)
    operation = Column(String(20), nullable=False, index=True)
    target_userid = Column(Integer, nullable=True, index=True)
    target_contextid = Column(Integer, nullable=True, index=True)
    status = Column(String(20), nullable=False, default="started")
    started_at = Column(DateTime(timezone=True), nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    details = Column(JSON, nullable=True)


@dataclass
class PrivacyAuditEntry:
    audit_id: str
    operation: PrivacyOperation
    target_userid: Optional[int]
    target_contextid: Optional[int]
    status: str
    started_at: datetime
    completed_at: Optional[datetime]
    details: Optional[Dict[str, Any]]


def _to_entry(record: PrivacyAuditLogModel) -> PrivacyAuditEntry:
    return PrivacyAuditEntry(
        audit_id=record.audit_id,
        operation=PrivacyOperation(record.operation),
        target_userid=record.target_userid,
        target_contextid=record.target_contextid,
        status=record.status,
        started_at=record.started_at,
        completed_at=record.completed_at,
        details=record.details,
    )


class PrivacyAuditLogger:
    """Records the start and completion of privacy operations."""

    def __init__(self, db: Session):
        self._db = db

    def log_operation_start(
        self,
        operation: PrivacyOperation,
        target_userid: Optional[int] = None,
        target_contextid: Optional[int] = None,
    ) -> PrivacyAuditEntry:
        """Log the start of a privacy operation.

        Committed before the operation runs so a failed operation still
        leaves a record.
        """
        started_at = datetime.now(timezone.utc)
        record = PrivacyAuditLogModel(
            audit_id=str(uuid.uuid4()),
            operation=operation.value,
            target_userid=target_userid,
            target_contextid=target_contextid,
            status="started",
            started_at=started_at,
        )
        self._db.add(record)
        self._db.commit()
        return _to_entry(record)

    def log_operation_complete(
        self,
        audit_id: str,
        status: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Log the completion of a privacy operation.

        Args:
            audit_id: The audit ID from log_operation_start
            status: Final status (completed, failed)
            details: Additional details about the result
        """
        record = self._db.query(PrivacyAuditLogModel).filter(
            PrivacyAuditLogModel.audit_id == audit_id
        ).first()

        if record:
            record.status = status
            record.completed_at = datetime.now(timezone.utc)
            record.details = details
            self._db.commit()

    def get_audit_log(self, audit_id: str) -> Optional[PrivacyAuditEntry]:
        record = self._db.query(PrivacyAuditLogModel).filter(
            PrivacyAuditLogModel.audit_id == audit_id
        ).first()
        return _to_entry(record) if record else None

    def list_audit_logs_for_user(self, target_userid: int) -> List[PrivacyAuditEntry]:
        """List all audit logs for a target user, newest first."""
        records = self._db.query(PrivacyAuditLogModel).filter(
            PrivacyAuditLogModel.target_userid == target_userid
        ).order_by(PrivacyAuditLogModel.started_at.desc()).all()
        return [_to_entry(r) for r in records]
