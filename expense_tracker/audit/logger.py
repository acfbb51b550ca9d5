"""
Audit Logger

DESIGN DECISION: Every mutation and every swallowed failure is logged.
Storage errors never reach the caller (the collection degrades to
"empty" or "unchanged" instead), so without this log they would be
invisible.

The audit logger:
- Always writes a structured local log line via structlog
- Optionally appends the event to an AuditSink (in-memory trail, tests)
- Gracefully handles sink failures (logging must never break a mutation)
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import structlog

from expense_tracker.models.audit import AuditEvent, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """
    Route structlog output through the stdlib root logger at ``level``.

    structlog renders each event to a JSON string; the stdlib handler
    only needs to print the message.
    """
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )


class AuditSink(ABC):
    """Somewhere audit events are kept beyond the local log."""

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event.

        Returns:
            True if stored successfully
        """
        pass


class InMemoryAuditSink(AuditSink):
    """Keeps events in a list, newest last."""

    def __init__(self):
        self.events: list[AuditEvent] = []

    def append_event(self, event: AuditEvent) -> bool:
        self.events.append(event)
        return True

    def of_type(self, event_type) -> list[AuditEvent]:
        return [e for e in self.events if e.event_type == event_type]


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An optional sink (for inspection by the application or tests)
    """

    def __init__(self, sink: Optional[AuditSink] = None):
        """
        Initialize audit logger.

        Args:
            sink: Where to keep events. If None, only logs locally.
        """
        self._sink = sink
        self._logger = structlog.get_logger("expense_tracker.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Appends to the sink if one is configured.

        Returns True if the sink write succeeded (or no sink configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._sink:
            try:
                return self._sink.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_sink_failed",
                    error=str(e),
                    event_id=event.event_id,
                )
                return False

        return True
