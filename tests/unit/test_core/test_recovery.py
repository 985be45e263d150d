"""Tests for recovery strategies and attempt_recovery."""

import httpx
import pytest

from resilient_ops.core.errors import ClassifiedError, ErrorKind
from resilient_ops.core.hooks import configure_host_hooks
from resilient_ops.core.recovery import (
    DEFAULT_RECOVERY_STRATEGIES,
    CallbackRecovery,
    NetworkErrorRecovery,
    RecoveryStrategy,
    UnauthorizedRecovery,
    attempt_recovery,
    network_error_recovery,
    unauthorized_recovery,
)


class RecordingStrategy:
    """Strategy that records its invocations into a shared log."""

    def __init__(self, name, log, matches=True, fails=False):
        self.name = name
        self.log = log
        self.matches = matches
        self.fails = fails

    def can_recover(self, error):
        self.log.append(("check", self.name))
        return self.matches

    def recover(self):
        self.log.append(("recover", self.name))
        if self.fails:
            raise RuntimeError(f"{self.name} broke")


@pytest.fixture
def session_hooks():
    """Configure recording host hooks."""
    calls = []
    configure_host_hooks(
        clear_session=lambda: calls.append(("clear_session",)),
        navigate=lambda path: calls.append(("navigate", path)),
    )
    return calls


class TestStrategies:
    """Tests for the shipped strategies."""

    def test_default_order(self):
        """Defaults are unauthorized then network."""
        assert DEFAULT_RECOVERY_STRATEGIES == (unauthorized_recovery, network_error_recovery)
        assert all(isinstance(s, RecoveryStrategy) for s in DEFAULT_RECOVERY_STRATEGIES)

    def test_predicates(self):
        """Each strategy matches exactly its kind."""
        assert unauthorized_recovery.can_recover(ClassifiedError(ErrorKind.UNAUTHORIZED))
        assert not unauthorized_recovery.can_recover(ClassifiedError(ErrorKind.FORBIDDEN))
        assert network_error_recovery.can_recover(ClassifiedError(ErrorKind.NETWORK))
        assert not network_error_recovery.can_recover(ClassifiedError(ErrorKind.TIMEOUT))

    @pytest.mark.asyncio
    async def test_unauthorized_clears_session_then_navigates(self, session_hooks):
        """Unauthorized recovery clears the session before redirecting."""
        await UnauthorizedRecovery().recover()
        assert session_hooks == [("clear_session",), ("navigate", "/login")]

    @pytest.mark.asyncio
    async def test_unauthorized_login_path_override(self, session_hooks):
        """An explicit login path wins over the hook default."""
        configure_host_hooks(login_path="/auth")
        await UnauthorizedRecovery().recover()
        await UnauthorizedRecovery(login_path="/sso").recover()
        navigations = [c[1] for c in session_hooks if c[0] == "navigate"]
        assert navigations == ["/auth", "/sso"]

    @pytest.mark.asyncio
    async def test_network_recovery_waits(self, sleep_recorder):
        """Network recovery waits for the configured delay."""
        await NetworkErrorRecovery(sleep_func=sleep_recorder).recover()
        await NetworkErrorRecovery(wait=250, sleep_func=sleep_recorder).recover()
        assert sleep_recorder.calls == [2.0, 0.25]

    def test_callback_for_kinds(self):
        """for_kinds matches any of the given kinds."""
        strategy = CallbackRecovery.for_kinds(ErrorKind.FORBIDDEN, ErrorKind.NOT_FOUND, action=lambda: None)
        assert strategy.can_recover(ClassifiedError(ErrorKind.NOT_FOUND))
        assert not strategy.can_recover(ClassifiedError(ErrorKind.SERVER))


class TestAttemptRecovery:
    """Tests for attempt_recovery dispatch."""

    @pytest.mark.asyncio
    async def test_first_match_wins(self):
        """Only the first matching strategy runs."""
        log = []
        strategies = [
            RecordingStrategy("a", log, matches=False),
            RecordingStrategy("b", log),
            RecordingStrategy("c", log),
        ]
        assert await attempt_recovery(ClassifiedError(ErrorKind.SERVER), strategies) is True
        assert log == [("check", "a"), ("check", "b"), ("recover", "b")]

    @pytest.mark.asyncio
    async def test_no_match_returns_false(self):
        """Nothing matching leaves recovery unattempted."""
        log = []
        result = await attempt_recovery(ClassifiedError(ErrorKind.SERVER), [RecordingStrategy("a", log, matches=False)])
        assert result is False
        assert ("recover", "a") not in log

    @pytest.mark.asyncio
    async def test_failed_recovery_is_contained(self, reported):
        """A raising recovery returns False and is reported, not raised."""
        log = []
        strategies = [RecordingStrategy("a", log, fails=True), RecordingStrategy("b", log)]
        result = await attempt_recovery(ClassifiedError(ErrorKind.NETWORK), strategies)
        assert result is False
        assert ("recover", "b") not in log
        failures = [r for r in reported if r[0] == "Error recovery failed"]
        assert len(failures) == 1
        assert str(failures[0][1]) == "a broke"

    @pytest.mark.asyncio
    async def test_raising_predicate_is_no_match(self):
        """A predicate that raises is skipped."""
        log = []

        def explode(error):
            raise RuntimeError("predicate bug")

        strategies = [CallbackRecovery(explode, lambda: log.append("bad")), RecordingStrategy("b", log)]
        assert await attempt_recovery(ClassifiedError(ErrorKind.API), strategies) is True
        assert "bad" not in log
        assert ("recover", "b") in log

    @pytest.mark.asyncio
    async def test_default_unauthorized(self, session_hooks):
        """Default strategies clear the session once for Unauthorized."""
        assert await attempt_recovery(ClassifiedError(ErrorKind.UNAUTHORIZED, status_code=401)) is True
        assert session_hooks.count(("clear_session",)) == 1
        assert ("navigate", "/login") in session_hooks

    @pytest.mark.asyncio
    async def test_defaults_ignore_other_kinds(self, session_hooks):
        """Default strategies do nothing for Validation."""
        assert await attempt_recovery(ClassifiedError(ErrorKind.VALIDATION)) is False
        assert session_hooks == []

    @pytest.mark.asyncio
    async def test_custom_list_replaces_defaults(self, session_hooks):
        """A supplied list replaces the defaults entirely."""
        assert await attempt_recovery(ClassifiedError(ErrorKind.UNAUTHORIZED), []) is False
        assert session_hooks == []

    @pytest.mark.asyncio
    async def test_async_recover_is_awaited(self):
        """Async actions are awaited before returning."""
        done = []

        async def action():
            done.append(True)

        strategy = CallbackRecovery.for_kinds(ErrorKind.FORBIDDEN, action=action)
        assert await attempt_recovery(ClassifiedError(ErrorKind.FORBIDDEN), [strategy]) is True
        assert done == [True]

    @pytest.mark.asyncio
    async def test_raw_failures_are_classified(self, session_hooks):
        """Unclassified failures are classified before dispatch."""
        request = httpx.Request("GET", "https://api.test/me")
        response = httpx.Response(401, json={"message": "expired"}, request=request)
        raw = httpx.HTTPStatusError("401", request=request, response=response)
        assert await attempt_recovery(raw) is True
        assert ("clear_session",) in session_hooks
