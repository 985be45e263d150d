"""Core classification, retry, circuit breaker and recovery operations for resilient-ops."""

from resilient_ops.core.errors import (
    ClassifiedError,
    ErrorKind,
    classify,
)

from resilient_ops.core.resilience import (
    CircuitBreaker,
    CircuitState,
    RetryPolicy,
    retry_with_backoff,
)

from resilient_ops.core.recovery import (
    RecoveryStrategy,
    attempt_recovery,
)

__all__ = [
    "ClassifiedError",
    "ErrorKind",
    "classify",
    "CircuitBreaker",
    "CircuitState",
    "RetryPolicy",
    "retry_with_backoff",
    "RecoveryStrategy",
    "attempt_recovery",
]
