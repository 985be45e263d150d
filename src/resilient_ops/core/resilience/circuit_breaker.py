"""Circuit breaker for a single protected operation.

Each breaker wraps exactly one async operation and owns its own state; there
is no shared registry. Construct one breaker per call site and reuse it for
the lifetime of that call site.

State machine:
    CLOSED    -- failures reach threshold --> OPEN
    OPEN      -- reset_timeout elapsed, next call --> HALF_OPEN (probe)
    HALF_OPEN -- probe succeeds --> CLOSED
    HALF_OPEN -- probe fails --> OPEN (timer restarted)

Only one probe is let through at a time. Calls that arrive while the probe
is still in flight are rejected as if the breaker were open.
"""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Awaitable, Callable, Generic, Optional, TypeVar

from resilient_ops.core.errors.resilience import CircuitBreakerError
from resilient_ops.core.observability import audit_log, report_error
from resilient_ops.core.resilience.models import CircuitBreakerConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CircuitState(str, Enum):
    """Circuit breaker states."""

    CLOSED = "Closed"
    OPEN = "Open"
    HALF_OPEN = "HalfOpen"


class CircuitBreaker(Generic[T]):
    """Three-state circuit breaker around one async operation.

    Args:
        operation: Async function to protect (no arguments).
        config: Thresholds; defaults to CircuitBreakerConfig().
        name: Breaker name used in logs and CircuitBreakerError.
        failure_threshold: Override for config.failure_threshold.
        reset_timeout: Override for config.reset_timeout (ms).
        clock: Monotonic clock in seconds, injectable for tests.

    Example:
        >>> breaker = CircuitBreaker(lambda: client.get(url), name="conversations")
        >>> response = await breaker.execute()
    """

    def __init__(
        self,
        operation: Callable[[], Awaitable[T]],
        config: Optional[CircuitBreakerConfig] = None,
        *,
        name: str = "circuit",
        failure_threshold: Optional[int] = None,
        reset_timeout: Optional[float] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        config = config or CircuitBreakerConfig()
        overrides = {}
        if failure_threshold is not None:
            overrides["failure_threshold"] = failure_threshold
        if reset_timeout is not None:
            overrides["reset_timeout"] = reset_timeout
        if overrides:
            config = CircuitBreakerConfig.model_validate({**config.model_dump(), **overrides})

        self._operation = operation
        self.config = config
        self.name = name
        self._clock = clock or time.monotonic

        self._state = CircuitState.CLOSED
        self._consecutive_failures = 0
        self._last_failure_time: Optional[float] = None
        self._probe_in_flight = False

    @property
    def state(self) -> CircuitState:
        return self._state

    @property
    def consecutive_failures(self) -> int:
        return self._consecutive_failures

    @property
    def last_failure_time(self) -> Optional[float]:
        """Clock reading (seconds) of the most recent failure, or None."""
        return self._last_failure_time

    def _elapsed_ms(self) -> float:
        if self._last_failure_time is None:
            return float("inf")
        return (self._clock() - self._last_failure_time) * 1000.0

    def _cooldown_elapsed(self) -> bool:
        return self._elapsed_ms() >= self.config.reset_timeout

    def is_available(self) -> bool:
        """Check whether a call would be let through, without changing state."""
        if self._state == CircuitState.CLOSED:
            return True
        if self._state == CircuitState.HALF_OPEN:
            return not self._probe_in_flight
        return self._cooldown_elapsed()

    def reset(self) -> None:
        """Manually close the breaker and clear its counters."""
        old_state = self._state
        self._state = CircuitState.CLOSED
        self._consecutive_failures = 0
        self._last_failure_time = None
        self._probe_in_flight = False
        if old_state != CircuitState.CLOSED:
            self._record_transition(old_state, "manual_reset")
        logger.debug("Circuit breaker '%s' manually reset", self.name)

    async def execute(self) -> T:
        """Invoke the protected operation through the breaker.

        Returns:
            The operation's result.

        Raises:
            CircuitBreakerError: If the breaker is open (or a probe is in
                flight); the operation is not invoked.
            Exception: Whatever the operation raised, unmodified.
        """
        self._before_call()

        probing = self._state == CircuitState.HALF_OPEN
        if probing:
            self._probe_in_flight = True
        try:
            result = await self._operation()
        except Exception as e:
            self._on_failure(e)
            raise
        finally:
            if probing:
                self._probe_in_flight = False

        self._on_success()
        return result

    def _before_call(self) -> None:
        if self._state == CircuitState.OPEN:
            if not self._cooldown_elapsed():
                raise self._rejection()
            self._state = CircuitState.HALF_OPEN
            self._record_transition(CircuitState.OPEN, "probe")
            logger.info(
                "Circuit breaker '%s' cool-down elapsed, allowing probe call",
                self.name,
            )
        elif self._state == CircuitState.HALF_OPEN and self._probe_in_flight:
            raise self._rejection()

    def _rejection(self) -> CircuitBreakerError:
        remaining = max(0.0, self.config.reset_timeout - self._elapsed_ms())
        return CircuitBreakerError(
            "Circuit breaker is open",
            breaker_name=self.name,
            state=self._state,
            retry_after=remaining,
        )

    def _on_success(self) -> None:
        self._consecutive_failures = 0
        if self._state != CircuitState.CLOSED:
            old_state = self._state
            self._state = CircuitState.CLOSED
            self._record_transition(old_state, "recovery")
            logger.info("Circuit breaker '%s' closed after successful probe", self.name)

    def _on_failure(self, error: Exception) -> None:
        self._consecutive_failures += 1
        self._last_failure_time = self._clock()

        if self._state == CircuitState.HALF_OPEN:
            self._state = CircuitState.OPEN
            self._record_transition(CircuitState.HALF_OPEN, "tripped")
            report_error(
                f"Circuit breaker '{self.name}' re-opened after failed probe",
                error,
                {"breaker": self.name, "failures": self._consecutive_failures},
            )
        elif (
            self._state == CircuitState.CLOSED
            and self._consecutive_failures >= self.config.failure_threshold
        ):
            self._state = CircuitState.OPEN
            self._record_transition(CircuitState.CLOSED, "tripped")
            report_error(
                f"Circuit breaker '{self.name}' opened",
                error,
                {"breaker": self.name, "failures": self._consecutive_failures},
            )

    def _record_transition(self, old_state: CircuitState, action: str) -> None:
        audit_log(
            "circuit_state_change",
            breaker=self.name,
            old_state=old_state.value,
            new_state=self._state.value,
            action=action,
            failures=self._consecutive_failures,
        )
