"""Shared fixtures for resilient-ops tests."""

import pytest

from resilient_ops.core.hooks import reset_host_hooks_for_testing
from resilient_ops.core.observability import reset_error_reporter_for_testing


@pytest.fixture(autouse=True)
def _reset_global_hooks():
    """Restore default host hooks and error reporter around every test."""
    reset_host_hooks_for_testing()
    reset_error_reporter_for_testing()
    yield
    reset_host_hooks_for_testing()
    reset_error_reporter_for_testing()


class FakeClock:
    """Manually advanced monotonic clock (seconds)."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, ms: float) -> None:
        self.now += ms / 1000.0


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def sleep_recorder():
    """Async sleep replacement that records requested durations (seconds)."""
    calls = []

    async def fake_sleep(seconds: float) -> None:
        calls.append(seconds)

    fake_sleep.calls = calls
    return fake_sleep


@pytest.fixture
def reported():
    """Install a reporter that captures (message, error, context) tuples."""
    from resilient_ops.core.observability import set_error_reporter

    records = []

    def reporter(message, error=None, context=None):
        records.append((message, error, dict(context or {})))

    set_error_reporter(reporter)
    return records
