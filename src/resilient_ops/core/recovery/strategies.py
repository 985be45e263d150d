"""Recovery strategies.

A strategy pairs a predicate over classified errors with a remediation
action. Shipped variants:
- UnauthorizedRecovery: clear the session and go to the login page
- NetworkErrorRecovery: wait for connectivity before the caller re-attempts
- CallbackRecovery: wrap an arbitrary predicate and action
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, Protocol, Union, runtime_checkable

from resilient_ops.core.errors import ClassifiedError, ErrorKind
from resilient_ops.core.hooks import call_hook, get_host_hooks
from resilient_ops.core.resilience.models import SleepFunc

logger = logging.getLogger(__name__)

DEFAULT_NETWORK_WAIT_MS = 2000.0


@runtime_checkable
class RecoveryStrategy(Protocol):
    """Protocol for recovery strategies."""

    def can_recover(self, error: ClassifiedError) -> bool: ...

    def recover(self) -> Union[None, Awaitable[None]]: ...


class UnauthorizedRecovery:
    """Clear the persisted session and redirect to the login entry point.

    The side effects are delegated to the host hooks (see
    resilient_ops.core.hooks), resolved when ``recover`` runs.

    Args:
        login_path: Override for HostHooks.login_path.
    """

    def __init__(self, login_path: Optional[str] = None):
        self.login_path = login_path

    def can_recover(self, error: ClassifiedError) -> bool:
        return error.kind is ErrorKind.UNAUTHORIZED

    async def recover(self) -> None:
        hooks = get_host_hooks()
        await call_hook(hooks.clear_session)
        await call_hook(hooks.navigate, self.login_path or hooks.login_path)

    def __repr__(self) -> str:
        return f"UnauthorizedRecovery(login_path={self.login_path!r})"


class NetworkErrorRecovery:
    """Wait a fixed delay so connectivity can come back; no redirect.

    Args:
        wait: Delay in ms (default 2000).
        sleep_func: Injectable sleep function (seconds) for tests.
    """

    def __init__(self, wait: float = DEFAULT_NETWORK_WAIT_MS, sleep_func: Optional[SleepFunc] = None):
        self.wait = wait
        self._sleep = sleep_func

    def can_recover(self, error: ClassifiedError) -> bool:
        return error.kind is ErrorKind.NETWORK

    async def recover(self) -> None:
        logger.debug("Waiting %.0fms for connectivity to recover", self.wait)
        sleep = self._sleep or asyncio.sleep
        await sleep(self.wait / 1000.0)

    def __repr__(self) -> str:
        return f"NetworkErrorRecovery(wait={self.wait!r})"


class CallbackRecovery:
    """Strategy built from a predicate and an action closure.

    Example:
        >>> refresh = CallbackRecovery.for_kinds(ErrorKind.FORBIDDEN, action=reload_permissions)
    """

    def __init__(
        self,
        predicate: Callable[[ClassifiedError], bool],
        action: Callable[[], Any],
        name: Optional[str] = None,
    ):
        self._predicate = predicate
        self._action = action
        self.name = name or getattr(action, "__name__", "callback")

    @classmethod
    def for_kinds(
        cls,
        *kinds: ErrorKind,
        action: Callable[[], Any],
        name: Optional[str] = None,
    ) -> "CallbackRecovery":
        """Build a strategy matching any of the given kinds."""
        matched = frozenset(kinds)
        return cls(lambda error: error.kind in matched, action, name=name)

    def can_recover(self, error: ClassifiedError) -> bool:
        return bool(self._predicate(error))

    def recover(self) -> Union[None, Awaitable[None]]:
        return self._action()

    def __repr__(self) -> str:
        return f"CallbackRecovery(name={self.name!r})"


unauthorized_recovery = UnauthorizedRecovery()
network_error_recovery = NetworkErrorRecovery()

DEFAULT_RECOVERY_STRATEGIES: tuple = (unauthorized_recovery, network_error_recovery)
