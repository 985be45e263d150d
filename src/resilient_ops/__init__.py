"""resilient-ops: classified, retried and auto-recovered async operations.

Public surface:
    classify            -- map any failure to a ClassifiedError
    retry_with_backoff  -- bounded exponential-backoff retries
    CircuitBreaker      -- fail fast on a persistently unhealthy dependency
    attempt_recovery    -- run the first matching recovery strategy
"""

from resilient_ops.core.errors import (
    CircuitBreakerError,
    ClassifiedError,
    ErrorKind,
    classify,
    is_retryable,
)
from resilient_ops.core.handling import (
    SafeResult,
    handle_critical_error,
    handle_error,
    handle_error_silently,
    install_global_error_handler,
    safe_call,
    with_error_handling,
    with_fallback,
)
from resilient_ops.core.hooks import HostHooks, configure_host_hooks, get_host_hooks
from resilient_ops.core.recovery import (
    CallbackRecovery,
    NetworkErrorRecovery,
    RecoveryStrategy,
    UnauthorizedRecovery,
    attempt_recovery,
    network_error_recovery,
    unauthorized_recovery,
)
from resilient_ops.core.resilience import (
    CircuitBreaker,
    CircuitBreakerConfig,
    CircuitState,
    RetryPolicy,
    retry_with_backoff,
    retryable_kinds_predicate,
)

__version__ = "0.1.0"

__all__ = [
    # Classification
    "ErrorKind",
    "ClassifiedError",
    "CircuitBreakerError",
    "classify",
    "is_retryable",
    # Retry / circuit breaker
    "RetryPolicy",
    "retry_with_backoff",
    "retryable_kinds_predicate",
    "CircuitBreaker",
    "CircuitBreakerConfig",
    "CircuitState",
    # Recovery
    "RecoveryStrategy",
    "UnauthorizedRecovery",
    "NetworkErrorRecovery",
    "CallbackRecovery",
    "unauthorized_recovery",
    "network_error_recovery",
    "attempt_recovery",
    # Handling
    "SafeResult",
    "handle_error",
    "handle_error_silently",
    "handle_critical_error",
    "with_error_handling",
    "safe_call",
    "with_fallback",
    "install_global_error_handler",
    # Hooks
    "HostHooks",
    "configure_host_hooks",
    "get_host_hooks",
]
