"""Async retry with exponential backoff.

Standalone retry utility that can be used independently of the circuit
breaker. Failures are propagated unclassified; classification happens at
the caller's boundary.
"""

import asyncio
import inspect
import logging
from collections.abc import Mapping
from typing import Any, Awaitable, Callable, Optional, TypeVar, Union

from resilient_ops.core.observability import audit_log, report_error
from resilient_ops.core.resilience.models import RetryPolicy, SleepFunc

logger = logging.getLogger(__name__)

T = TypeVar("T")


def resolve_policy(policy: Union[RetryPolicy, Mapping[str, Any], None]) -> RetryPolicy:
    """Coerce None, a mapping of policy fields, or a RetryPolicy into a RetryPolicy."""
    if policy is None:
        return RetryPolicy()
    if isinstance(policy, RetryPolicy):
        return policy
    return RetryPolicy.model_validate(dict(policy))


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    policy: Union[RetryPolicy, Mapping[str, Any], None] = None,
    *,
    sleep_func: Optional[SleepFunc] = None,
) -> T:
    """Async retry with exponential backoff.

    Invokes ``operation`` up to ``policy.max_retries + 1`` times. After each
    failed attempt except the last, ``policy.on_retry(attempt_number, error)``
    is called and the scheduler sleeps for ``policy.compute_delay(n)`` ms.
    Attempts are strictly sequential.

    Args:
        operation: Async function to retry (no arguments; use lambda for args).
        policy: RetryPolicy, or a mapping of its fields (default policy if None).
        sleep_func: Injectable sleep function (seconds) for time control in tests.

    Returns:
        Result from the first successful attempt.

    Raises:
        Exception: The last failure, unmodified, if all attempts fail or
            ``policy.should_retry`` rejects a failure.

    Example:
        >>> result = await retry_with_backoff(
        ...     lambda: client.get(url),
        ...     {"max_retries": 3, "initial_delay": 500},
        ... )

    Testing example:
        >>> sleep_times = []
        >>> async def fake_sleep(s): sleep_times.append(s)
        >>> await retry_with_backoff(func, sleep_func=fake_sleep)
    """
    _policy = resolve_policy(policy)
    _sleep = sleep_func or asyncio.sleep
    last_exception: Optional[Exception] = None
    total_attempts = _policy.max_retries + 1

    for attempt in range(total_attempts):
        try:
            return await operation()
        except Exception as e:
            last_exception = e

            if attempt == _policy.max_retries:
                break

            if _policy.should_retry is not None and not _policy.should_retry(e):
                logger.debug("Failure not retryable, giving up after attempt %d: %s", attempt + 1, e)
                break

            delay = _policy.compute_delay(attempt)

            if _policy.on_retry is not None:
                callback_result = _policy.on_retry(attempt + 1, e)
                if inspect.isawaitable(callback_result):
                    await callback_result

            report_error(
                f"Retry attempt {attempt + 1}/{_policy.max_retries} after {delay:.0f}ms",
                e,
                {"severity": "warning", "attempt": attempt + 1, "delay_ms": delay},
            )
            audit_log(
                "retry_attempt",
                attempt=attempt + 1,
                max_attempts=total_attempts,
                delay_ms=delay,
                error_type=type(e).__name__,
                error_message=str(e)[:200],
            )

            await _sleep(delay / 1000.0)

    # All retries exhausted
    if last_exception is not None:
        raise last_exception
    raise RuntimeError("retry_with_backoff: unexpected state")
