"""Resilience data models and protocols.

Defines the core types used across the resilience sub-package:
- RetryPolicy for retry_with_backoff
- CircuitBreakerConfig for CircuitBreaker
- SleepFunc protocol for injectable async sleep

All delays and timeouts are expressed in milliseconds.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field


class RetryPolicy(BaseModel):
    """Retry configuration for retry_with_backoff.

    Delay after the n-th failure (0-indexed) is
    ``min(initial_delay * backoff_factor ** n, max_delay)``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    max_retries: int = Field(default=3, ge=0, alias="maxRetries", description="Retries after the first attempt")
    initial_delay: float = Field(default=1000.0, ge=0, alias="initialDelay", description="First delay in ms")
    max_delay: float = Field(default=10000.0, ge=0, alias="maxDelay", description="Delay cap in ms")
    backoff_factor: float = Field(default=2.0, ge=1, alias="backoffFactor", description="Multiplier per retry")
    on_retry: Optional[Callable[[int, Exception], Any]] = Field(
        default=None, alias="onRetry", description="Called as on_retry(attempt_number, last_error) before each delay"
    )
    should_retry: Optional[Callable[[Exception], bool]] = Field(
        default=None, alias="shouldRetry", description="Return False to stop retrying on a given failure"
    )

    def compute_delay(self, attempt: int) -> float:
        """Return the delay in ms to wait after the given 0-indexed failed attempt."""
        try:
            delay = self.initial_delay * (self.backoff_factor**attempt)
        except OverflowError:
            return self.max_delay
        return min(delay, self.max_delay)


class CircuitBreakerConfig(BaseModel):
    """Circuit breaker thresholds."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    failure_threshold: int = Field(
        default=5, gt=0, alias="failureThreshold", description="Consecutive failures before opening"
    )
    reset_timeout: float = Field(
        default=60000.0, ge=0, alias="resetTimeout", description="Cool-down in ms before a probe call"
    )


class SleepFunc(Protocol):
    """Protocol for injectable sleep function (seconds)."""

    async def __call__(self, seconds: float) -> None: ...
