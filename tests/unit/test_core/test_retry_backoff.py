"""Tests for retry_with_backoff and RetryPolicy.

Tests cover:
- RetryPolicy defaults, validation and delay computation
- Attempt counting on exhaustion and early success
- on_retry callback ordering (sync and async)
- should_retry predicates
- Sleep durations passed to the injected sleep function
"""

import pytest
from pydantic import ValidationError

from resilient_ops.core.errors import ErrorKind
from resilient_ops.core.resilience import (
    RetryPolicy,
    resolve_policy,
    retry_with_backoff,
    retryable_kinds_predicate,
)


class Flaky:
    """Async callable failing a fixed number of times before succeeding."""

    def __init__(self, failures: int, result="ok"):
        self.failures = failures
        self.result = result
        self.calls = 0
        self.errors = []

    async def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            error = RuntimeError(f"failure {self.calls}")
            self.errors.append(error)
            raise error
        return self.result


class TestRetryPolicy:
    """Tests for RetryPolicy model."""

    def test_default_values(self):
        """Default policy has expected values."""
        policy = RetryPolicy()
        assert policy.max_retries == 3
        assert policy.initial_delay == 1000
        assert policy.max_delay == 10000
        assert policy.backoff_factor == 2
        assert policy.on_retry is None

    def test_camel_case_aliases(self):
        """Policies accept camelCase field names."""
        policy = RetryPolicy.model_validate({"maxRetries": 5, "initialDelay": 10})
        assert policy.max_retries == 5
        assert policy.initial_delay == 10

    @pytest.mark.parametrize(
        "field,value",
        [("max_retries", -1), ("initial_delay", -5), ("max_delay", -1), ("backoff_factor", 0.5)],
    )
    def test_rejects_invalid_values(self, field, value):
        """Out-of-range values raise ValidationError."""
        with pytest.raises(ValidationError):
            RetryPolicy(**{field: value})

    def test_backoff_bound(self):
        """Delays grow exponentially and are clamped to max_delay."""
        policy = RetryPolicy(initial_delay=1000, backoff_factor=2, max_delay=3000)
        assert [policy.compute_delay(n) for n in range(4)] == [1000, 2000, 3000, 3000]

    def test_constant_backoff(self):
        """backoff_factor of 1 yields constant delays."""
        policy = RetryPolicy(initial_delay=250, backoff_factor=1)
        assert {policy.compute_delay(n) for n in range(5)} == {250}

    def test_overflow_is_clamped(self):
        """Huge exponents clamp to max_delay instead of overflowing."""
        policy = RetryPolicy(initial_delay=1000, backoff_factor=10, max_delay=5000)
        assert policy.compute_delay(10_000) == 5000

    def test_policy_is_frozen(self):
        """Policies are immutable."""
        policy = RetryPolicy()
        with pytest.raises(ValidationError):
            policy.max_retries = 10

    def test_resolve_policy(self):
        """resolve_policy accepts None, mappings and instances."""
        assert resolve_policy(None) == RetryPolicy()
        assert resolve_policy({"max_retries": 1}).max_retries == 1
        policy = RetryPolicy(max_retries=2)
        assert resolve_policy(policy) is policy


class TestRetryWithBackoff:
    """Tests for retry_with_backoff."""

    @pytest.mark.asyncio
    async def test_exhaustion_raises_last_failure(self, sleep_recorder):
        """Always-failing operation runs max_retries + 1 times and raises the last error."""
        operation = Flaky(failures=100)
        with pytest.raises(RuntimeError) as exc_info:
            await retry_with_backoff(operation, {"max_retries": 3}, sleep_func=sleep_recorder)
        assert operation.calls == 4
        assert exc_info.value is operation.errors[-1]
        assert str(exc_info.value) == "failure 4"

    @pytest.mark.asyncio
    async def test_success_short_circuits(self, sleep_recorder):
        """Fails twice then succeeds: exactly three calls."""
        operation = Flaky(failures=2, result="payload")
        result = await retry_with_backoff(operation, {"max_retries": 5}, sleep_func=sleep_recorder)
        assert result == "payload"
        assert operation.calls == 3
        assert len(sleep_recorder.calls) == 2

    @pytest.mark.asyncio
    async def test_zero_retries_single_attempt(self, sleep_recorder):
        """max_retries=0 performs one attempt and no delay."""
        operation = Flaky(failures=1)
        with pytest.raises(RuntimeError):
            await retry_with_backoff(operation, RetryPolicy(max_retries=0), sleep_func=sleep_recorder)
        assert operation.calls == 1
        assert sleep_recorder.calls == []

    @pytest.mark.asyncio
    async def test_sleep_durations_follow_backoff(self, sleep_recorder):
        """Sleeps use compute_delay converted to seconds."""
        operation = Flaky(failures=100)
        policy = RetryPolicy(max_retries=4, initial_delay=1000, backoff_factor=2, max_delay=3000)
        with pytest.raises(RuntimeError):
            await retry_with_backoff(operation, policy, sleep_func=sleep_recorder)
        assert sleep_recorder.calls == [1.0, 2.0, 3.0, 3.0]

    @pytest.mark.asyncio
    async def test_on_retry_called_before_each_delay(self, sleep_recorder):
        """on_retry receives 1-based attempt numbers and the last error."""
        events = []
        operation = Flaky(failures=100)

        def on_retry(attempt, error):
            events.append(("retry", attempt, str(error), len(sleep_recorder.calls)))

        with pytest.raises(RuntimeError):
            await retry_with_backoff(
                operation,
                RetryPolicy(max_retries=2, on_retry=on_retry),
                sleep_func=sleep_recorder,
            )
        assert events == [
            ("retry", 1, "failure 1", 0),
            ("retry", 2, "failure 2", 1),
        ]

    @pytest.mark.asyncio
    async def test_async_on_retry_is_awaited(self, sleep_recorder):
        """Async on_retry callbacks are awaited."""
        seen = []

        async def on_retry(attempt, error):
            seen.append(attempt)

        operation = Flaky(failures=1)
        await retry_with_backoff(
            operation,
            {"max_retries": 3, "on_retry": on_retry},
            sleep_func=sleep_recorder,
        )
        assert seen == [1]

    @pytest.mark.asyncio
    async def test_should_retry_stops_early(self, sleep_recorder):
        """A rejecting should_retry surfaces the failure immediately."""
        operation = Flaky(failures=100)
        policy = RetryPolicy(max_retries=5, should_retry=lambda e: False)
        with pytest.raises(RuntimeError):
            await retry_with_backoff(operation, policy, sleep_func=sleep_recorder)
        assert operation.calls == 1
        assert sleep_recorder.calls == []

    @pytest.mark.asyncio
    async def test_retryable_kinds_predicate(self, sleep_recorder):
        """Only transient kinds are retried with retryable_kinds_predicate."""
        calls = 0

        async def unauthorized():
            nonlocal calls
            calls += 1
            raise ValueError("bad input")

        policy = RetryPolicy(max_retries=3, should_retry=retryable_kinds_predicate())
        with pytest.raises(ValueError):
            await retry_with_backoff(unauthorized, policy, sleep_func=sleep_recorder)
        assert calls == 1

        predicate = retryable_kinds_predicate([ErrorKind.UNKNOWN])
        assert predicate(ValueError("x")) is True
        assert predicate(ConnectionError("x")) is False

    @pytest.mark.asyncio
    async def test_reports_each_retry(self, sleep_recorder, reported):
        """Each retry attempt goes to the error reporter at warning severity."""
        operation = Flaky(failures=2)
        await retry_with_backoff(operation, {"max_retries": 3, "initial_delay": 10}, sleep_func=sleep_recorder)
        assert [r[2]["attempt"] for r in reported] == [1, 2]
        assert all(r[2]["severity"] == "warning" for r in reported)
        assert reported[0][1] is operation.errors[0]
