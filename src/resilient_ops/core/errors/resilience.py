"""Resilience error classes.

Sentinel failures raised by the resilience layer itself rather than by the
protected operation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from resilient_ops.core.resilience.circuit_breaker import CircuitState


class CircuitBreakerError(Exception):
    """Circuit breaker is open and rejecting calls.

    Not one of the ErrorKind values; the classifier maps it to a Server
    failure with code CIRCUIT_OPEN.

    Attributes:
        breaker_name: Name of the circuit breaker.
        state: State of the breaker when the call was rejected.
        retry_after: Milliseconds until the breaker lets a probe through.
    """

    def __init__(
        self,
        message: str = "Circuit breaker is open",
        breaker_name: Optional[str] = None,
        state: Optional[CircuitState] = None,
        retry_after: Optional[float] = None,
    ):
        super().__init__(message)
        self.breaker_name = breaker_name
        self.state = state
        self.retry_after = retry_after
