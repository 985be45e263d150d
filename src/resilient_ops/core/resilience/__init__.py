"""Retry and circuit breaker utilities.

- RetryPolicy and retry_with_backoff for bounded exponential-backoff retries
- CircuitBreakerConfig and CircuitBreaker for failing fast on unhealthy
  dependencies
- retryable_kinds_predicate for stopping retries on non-transient failures
"""

from resilient_ops.core.errors.resilience import CircuitBreakerError
from resilient_ops.core.resilience.circuit_breaker import (
    CircuitBreaker,
    CircuitState,
)
from resilient_ops.core.resilience.models import (
    CircuitBreakerConfig,
    RetryPolicy,
    SleepFunc,
)
from resilient_ops.core.resilience.predicates import retryable_kinds_predicate
from resilient_ops.core.resilience.retry import (
    resolve_policy,
    retry_with_backoff,
)

__all__ = [
    # Models
    "RetryPolicy",
    "CircuitBreakerConfig",
    "SleepFunc",
    # Retry
    "resolve_policy",
    "retry_with_backoff",
    "retryable_kinds_predicate",
    # Circuit breaker
    "CircuitBreaker",
    "CircuitState",
    "CircuitBreakerError",
]
