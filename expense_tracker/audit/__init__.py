"""Audit logging package."""

from expense_tracker.audit.logger import (
    AuditLogger,
    AuditSink,
    InMemoryAuditSink,
    configure_logging,
)

__all__ = ["AuditLogger", "AuditSink", "InMemoryAuditSink", "configure_logging"]
