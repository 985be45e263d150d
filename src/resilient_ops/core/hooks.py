"""Host application hooks.

Recovery and notification need side effects that only the host application
can perform: clearing the persisted session, navigating to the login entry
point, and showing a message to the user. They are registered here as opaque
callables (sync or async).
"""

from __future__ import annotations

import dataclasses
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable

logger = logging.getLogger(__name__)


def _noop_clear_session() -> None:
    logger.debug("No clear_session hook configured; session left untouched")


def _noop_navigate(path: str) -> None:
    logger.debug("No navigate hook configured; skipping navigation to %s", path)


def _noop_notify(message: str) -> None:
    logger.debug("No notify hook configured; dropping user message %r", message)


@dataclass(frozen=True)
class HostHooks:
    """Side effects supplied by the host application.

    Attributes:
        clear_session: Removes persisted credentials.
        navigate: Sends the user to the given path.
        notify: Shows a user-facing message (never diagnostics).
        login_path: Login entry point used by unauthorized recovery.
    """

    clear_session: Callable[[], Any] = _noop_clear_session
    navigate: Callable[[str], Any] = _noop_navigate
    notify: Callable[[str], Any] = _noop_notify
    login_path: str = "/login"


_hooks = HostHooks()


def get_host_hooks() -> HostHooks:
    """Get the active host hooks."""
    return _hooks


def configure_host_hooks(**overrides: Any) -> HostHooks:
    """Replace selected hooks, keeping the others.

    Args:
        **overrides: Any HostHooks field (clear_session, navigate, notify,
            login_path).

    Returns:
        The new active HostHooks.
    """
    global _hooks
    _hooks = dataclasses.replace(_hooks, **overrides)
    return _hooks


def reset_host_hooks_for_testing() -> None:
    """Restore the default no-op hooks."""
    global _hooks
    _hooks = HostHooks()


async def call_hook(hook: Callable[..., Any], *args: Any) -> None:
    """Invoke a hook, awaiting it when it is asynchronous."""
    result = hook(*args)
    if inspect.isawaitable(result):
        await result
