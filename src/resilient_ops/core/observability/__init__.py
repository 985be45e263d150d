"""
Observability utilities for resilient-ops.

Provides structured audit events for resilience transitions and the
narrow error-reporting interface used by the handling helpers.

    from resilient_ops.core.observability import audit_log, report_error

    audit_log("retry_attempt", attempt=2, delay_ms=2000)
    report_error("Failed to load conversations", classified, {"view": "inbox"})
"""

from resilient_ops.core.observability.audit import (
    AuditEvent,
    AuditEventType,
    AuditLogger,
    audit_log,
    get_audit_logger,
)
from resilient_ops.core.observability.reporting import (
    ErrorReporter,
    LoggingErrorReporter,
    get_error_reporter,
    report_error,
    reset_error_reporter_for_testing,
    set_error_reporter,
)

__all__ = [
    # Audit
    "AuditEvent",
    "AuditEventType",
    "AuditLogger",
    "audit_log",
    "get_audit_logger",
    # Reporting
    "ErrorReporter",
    "LoggingErrorReporter",
    "get_error_reporter",
    "report_error",
    "reset_error_reporter_for_testing",
    "set_error_reporter",
]
