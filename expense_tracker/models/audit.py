"""
Audit Models for the Expense Tracker

Every mutation of the expense collection and every degraded failure
path (unreadable storage, a write that did not persist) is recorded as
an audit event. Storage failures are never raised to the caller, so
the audit trail is the only place they become visible.

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from expense_tracker.models.expense import generate_id, utc_now


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Mutations
    EXPENSE_ADDED = "expense_added"
    EXPENSE_UPDATED = "expense_updated"
    EXPENSE_DELETED = "expense_deleted"
    EXPENSES_CLEARED = "expenses_cleared"

    # Persistence failures (degraded, not raised)
    STORAGE_READ_FAILED = "storage_read_failed"
    STORAGE_WRITE_FAILED = "storage_write_failed"

    # Form input
    VALIDATION_FAILED = "validation_failed"

    # Export
    EXPORT_GENERATED = "export_generated"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """A single audit event."""

    event_id: str = Field(
        default_factory=generate_id,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # What entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'expense', 'storage', 'export')"
    )
    entity_id: Optional[str] = None

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    error_message: Optional[str] = None
    is_user_action: bool = False

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": self.event_id,
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_added(expense_id, "Food", "$20.00")
        event = AuditEventBuilder.storage_write_failed(key, error)
    """

    @staticmethod
    def expense_added(
        expense_id: str,
        category: str,
        amount: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            entity_type="expense",
            entity_id=expense_id,
            description=f"Expense added: {category} - {amount}",
            details={
                "category": category,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_updated(
        expense_id: str,
        fields: list[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_UPDATED,
            entity_type="expense",
            entity_id=expense_id,
            description=f"Expense updated: {', '.join(fields) or 'no fields'}",
            details={
                "fields": fields,
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_deleted(expense_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            entity_type="expense",
            entity_id=expense_id,
            description="Expense deleted",
            is_user_action=True,
        )

    @staticmethod
    def expenses_cleared(count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSES_CLEARED,
            entity_type="expense",
            description=f"All expenses cleared ({count} removed)",
            details={
                "removed_count": count,
            },
            is_user_action=True,
        )

    @staticmethod
    def storage_read_failed(
        storage_key: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_READ_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="storage",
            entity_id=storage_key,
            description="Stored expenses could not be read; treating as empty",
            error_message=error_message,
        )

    @staticmethod
    def storage_write_failed(
        storage_key: str,
        error_message: str,
        record_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_WRITE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="storage",
            entity_id=storage_key,
            description="Expenses could not be written to storage",
            error_message=error_message,
            details={
                "record_count": record_count,
            },
        )

    @staticmethod
    def validation_failed(issues: list[dict]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="form",
            description=f"Expense form rejected with {len(issues)} issues",
            details={
                "issues": issues,
            },
            is_user_action=True,
        )

    @staticmethod
    def export_generated(
        filename: str,
        row_count: int,
        filter_description: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_GENERATED,
            entity_type="export",
            entity_id=filename,
            description=f"CSV export generated: {filename}",
            details={
                "row_count": row_count,
                "filters": filter_description,
            },
            is_user_action=True,
        )
