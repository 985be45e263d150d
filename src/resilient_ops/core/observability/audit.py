"""Audit logging for resilience events.

Provides structured audit events for retries, circuit state changes,
classification and recovery, written to a dedicated logger so they can be
filtered separately from regular module logs.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict

logger = logging.getLogger(__name__)


class AuditEventType(Enum):
    """Types of audit events emitted by the resilience layer."""

    ERROR_CLASSIFIED = "error_classified"
    RETRY_ATTEMPT = "retry_attempt"
    CIRCUIT_STATE_CHANGE = "circuit_state_change"
    RECOVERY_ATTEMPT = "recovery_attempt"
    RECOVERY_FAILED = "recovery_failed"


@dataclass
class AuditEvent:
    """Structured audit event."""

    event_type: AuditEventType
    details: Dict[str, Any] = field(default_factory=dict)
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "event_type": self.event_type.value,
            "timestamp": self.timestamp,
            "details": self.details,
        }


class AuditLogger:
    """
    Structured audit logging for resilience events.

    Audit logs are written to a separate logger for easy filtering.
    """

    def __init__(self):
        self._logger = logging.getLogger(f"{__name__}.audit")

    def log(self, event: AuditEvent) -> None:
        """Log an audit event."""
        self._logger.info(f"AUDIT: {event.event_type.value}", extra={"audit": event.to_dict()})


# Global audit logger
_audit = AuditLogger()


def get_audit_logger() -> AuditLogger:
    """Get the global audit logger."""
    return _audit


def audit_log(event_type: str, **details: Any) -> None:
    """
    Convenience function for audit logging.

    Args:
        event_type: Type of event (error_classified, retry_attempt,
                    circuit_state_change, recovery_attempt, recovery_failed)
        **details: Additional details to include in the audit log
    """
    try:
        event_enum = AuditEventType(event_type)
    except ValueError:
        event_enum = AuditEventType.ERROR_CLASSIFIED
        details["original_event_type"] = event_type

    _audit.log(AuditEvent(event_type=event_enum, details=details))
