"""Error handling helpers.

Boundary helpers that classify a failure, report it, and (optionally) tell
the user about it. Only ``ClassifiedError.message`` ever reaches the user;
codes and details go to the reporter.
"""

from __future__ import annotations

import asyncio
import functools
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Generic, Optional, Set, TypeVar

from resilient_ops.core.errors import ClassifiedError, classify
from resilient_ops.core.hooks import get_host_hooks
from resilient_ops.core.observability import audit_log, report_error

logger = logging.getLogger(__name__)

T = TypeVar("T")

_pending_notifications: Set["asyncio.Future[Any]"] = set()


def _diagnostics(error: ClassifiedError) -> Dict[str, Any]:
    return {
        "code": error.code,
        "status_code": error.status_code,
        "details": dict(error.details) if error.details is not None else None,
    }


async def _await_notification(pending: Awaitable[Any]) -> None:
    # Hook failures stay inside the task; the loop exception handler never sees them.
    try:
        await pending
    except Exception:
        logger.warning("Notify hook failed", exc_info=True)


def _notify(message: str) -> None:
    try:
        result = get_host_hooks().notify(message)
    except Exception:
        logger.warning("Notify hook failed", exc_info=True)
        return
    if inspect.isawaitable(result):
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("Async notify hook called without a running event loop; message dropped")
            if inspect.iscoroutine(result):
                result.close()
            return
        task = loop.create_task(_await_notification(result))
        _pending_notifications.add(task)
        task.add_done_callback(_pending_notifications.discard)


def _report(message: str, error: ClassifiedError, extra: Optional[Dict[str, Any]] = None) -> None:
    context = _diagnostics(error)
    if extra:
        context.update(extra)
    report_error(message, error, context)
    audit_log(
        "error_classified",
        kind=error.kind.value,
        code=error.code,
        status_code=error.status_code,
    )


def handle_error(error: Any, context: Optional[str] = None) -> ClassifiedError:
    """Classify, report and notify the user about a failure.

    Args:
        error: Any failure value.
        context: Short description of what was being done.

    Returns:
        The classified error.
    """
    classified = classify(error)
    _report(context or "Error occurred", classified)
    _notify(classified.message)
    return classified


def handle_error_silently(error: Any, context: Optional[str] = None) -> ClassifiedError:
    """Classify and report a failure without notifying the user."""
    classified = classify(error)
    _report(context or "Silent error", classified)
    return classified


def handle_critical_error(error: Any, context: Optional[str] = None) -> ClassifiedError:
    """Classify, report as critical, and notify the user."""
    classified = classify(error)
    _report(
        f"[CRITICAL] {context or 'Critical error'}",
        classified,
        {"is_critical": True, "severity": "critical"},
    )
    _notify(classified.message)
    return classified


def with_error_handling(
    context: Optional[str] = None,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Decorator that re-raises any failure of an async function as a ClassifiedError.

    The failure goes through ``handle_error`` (reported and notified) first.

    Example:
        >>> @with_error_handling("Loading conversations")
        ... async def load_conversations(client):
        ...     return await client.get("/conversations")
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                classified = handle_error(e, context)
                if classified is e:
                    raise
                raise classified from e

        return wrapper

    return decorator


@dataclass(frozen=True)
class SafeResult(Generic[T]):
    """Outcome of ``safe_call``: either data or a classified error."""

    success: bool
    data: Optional[T] = None
    error: Optional[ClassifiedError] = None


async def safe_call(
    operation: Callable[[], Awaitable[T]],
    context: Optional[str] = None,
) -> SafeResult[T]:
    """Run an async operation and return a SafeResult instead of raising."""
    try:
        data = await operation()
    except Exception as e:
        return SafeResult(success=False, error=handle_error(e, context))
    return SafeResult(success=True, data=data)


async def with_fallback(operation: Callable[[], Awaitable[T]], fallback: T) -> T:
    """Return the operation's result, or ``fallback`` if it fails."""
    try:
        return await operation()
    except Exception as e:
        logger.warning("Error occurred, using fallback: %s", e)
        return fallback


def install_global_error_handler(
    loop: Optional[asyncio.AbstractEventLoop] = None,
) -> Optional[Callable[[asyncio.AbstractEventLoop, Dict[str, Any]], Any]]:
    """Route unhandled asyncio errors to ``handle_critical_error``.

    Args:
        loop: Event loop to configure (default: the running loop).

    Returns:
        The previously installed exception handler (None for the default).
    """
    target = loop or asyncio.get_running_loop()
    previous = target.get_exception_handler()

    def _handler(_loop: asyncio.AbstractEventLoop, ctx: Dict[str, Any]) -> None:
        exception = ctx.get("exception")
        handle_critical_error(
            exception if exception is not None else ctx.get("message"),
            "Unhandled asyncio exception",
        )

    target.set_exception_handler(_handler)
    logger.info("Global error handler installed")
    return previous
