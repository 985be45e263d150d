"""Error reporting sink.

Every classified error and every resilience transition worth surfacing is
reported through a single narrow interface::

    reporter(message, error=None, context=None)

The concrete sink is swappable. The default ``LoggingErrorReporter`` writes
to stdlib logging; hosts can install a reporter that forwards to a remote
aggregator with ``set_error_reporter``.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Protocol, runtime_checkable

from resilient_ops.core.errors.models import ClassifiedError

logger = logging.getLogger(__name__)


@runtime_checkable
class ErrorReporter(Protocol):
    """Protocol for error reporting sinks."""

    def __call__(
        self,
        message: str,
        error: Optional[BaseException] = None,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None: ...


_SEVERITY_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


class LoggingErrorReporter:
    """Reporter that writes to a stdlib logger.

    Classified errors contribute their diagnostic fields to the log record
    under ``extra["error"]``; the caller's context goes under
    ``extra["context"]``. A ``severity`` context key (debug, info, warning,
    error, critical) selects the log level; the default is error.
    """

    def __init__(self, logger_name: str = "resilient_ops.errors"):
        self._logger = logging.getLogger(logger_name)

    def __call__(
        self,
        message: str,
        error: Optional[BaseException] = None,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        ctx = dict(context or {})
        level = _SEVERITY_LEVELS.get(str(ctx.get("severity", "error")).lower(), logging.ERROR)
        extra: dict = {"context": ctx}
        if isinstance(error, ClassifiedError):
            extra["error"] = error.to_dict()
            self._logger.log(level, "%s: [%s] %s", message, error.kind.value, error.message, extra=extra)
        elif error is not None:
            extra["error"] = {"type": type(error).__name__, "message": str(error)}
            self._logger.log(level, "%s: %s", message, error, extra=extra)
        else:
            self._logger.log(level, "%s", message, extra=extra)


_default_reporter: ErrorReporter = LoggingErrorReporter()
_reporter: ErrorReporter = _default_reporter


def get_error_reporter() -> ErrorReporter:
    """Get the active error reporter."""
    return _reporter


def set_error_reporter(reporter: ErrorReporter) -> ErrorReporter:
    """Install a new error reporter.

    Returns:
        The previously active reporter.
    """
    global _reporter
    previous = _reporter
    _reporter = reporter
    return previous


def reset_error_reporter_for_testing() -> None:
    """Restore the default logging reporter."""
    global _reporter
    _reporter = _default_reporter


def report_error(
    message: str,
    error: Optional[BaseException] = None,
    context: Optional[Mapping[str, Any]] = None,
) -> None:
    """Send a report to the active reporter.

    A failing reporter is logged and otherwise ignored so that reporting can
    never break the caller's error-handling path.
    """
    try:
        _reporter(message, error, context)
    except Exception:
        logger.exception("Error reporter failed while reporting %r", message)
