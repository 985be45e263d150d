"""Error classification.

Maps any raw failure (httpx exceptions, response-shaped objects, plain
exceptions, arbitrary values) to a ClassifiedError. Classification is total
and side-effect free: ``classify`` never raises.
"""

from __future__ import annotations

import socket
import traceback
from collections.abc import Mapping
from typing import Any, Dict, Optional, Tuple

import httpx

from resilient_ops.core.errors.models import (
    DEFAULT_CODES,
    DEFAULT_MESSAGES,
    UNKNOWN_ERROR_CODE,
    ClassifiedError,
    ErrorKind,
)
from resilient_ops.core.errors.resilience import CircuitBreakerError

STATUS_KIND_MAP: Dict[int, ErrorKind] = {
    400: ErrorKind.VALIDATION,
    401: ErrorKind.UNAUTHORIZED,
    403: ErrorKind.FORBIDDEN,
    404: ErrorKind.NOT_FOUND,
    408: ErrorKind.TIMEOUT,
    500: ErrorKind.SERVER,
    502: ErrorKind.SERVER,
    503: ErrorKind.SERVER,
    504: ErrorKind.SERVER,
}

# Failures raised before any response arrived
_NO_RESPONSE_EXCEPTIONS: Tuple[type, ...] = (
    httpx.RequestError,
    ConnectionError,
    socket.gaierror,
    TimeoutError,
)

_MISSING = object()


def kind_for_status(status: int) -> ErrorKind:
    """Map an HTTP status code to an ErrorKind (unmapped statuses -> Api)."""
    return STATUS_KIND_MAP.get(status, ErrorKind.API)


def classify(raw: Any) -> ClassifiedError:
    """Classify an arbitrary failure value.

    Decision order:
    1. Already classified -> returned unchanged.
    2. Response failure (status + body) -> kind from STATUS_KIND_MAP.
    3. Transport failure without a response -> Network.
    4. Error object with a message -> Unknown, name and stack in details.
    5. Anything else -> Unknown, stringified value in details.

    Args:
        raw: The failure value (exception, mapping, string, None, ...).

    Returns:
        A ClassifiedError. Never raises.
    """
    if isinstance(raw, ClassifiedError):
        return raw
    try:
        return _classify(raw)
    except Exception:
        return ClassifiedError(
            ErrorKind.UNKNOWN,
            DEFAULT_MESSAGES[ErrorKind.UNKNOWN],
            UNKNOWN_ERROR_CODE,
            details={"original_error": _safe_str(raw)},
        )


def _classify(raw: Any) -> ClassifiedError:
    if isinstance(raw, CircuitBreakerError):
        return _from_circuit_breaker(raw)

    response = _get_field(raw, "response")
    if response is not _MISSING and response is not None:
        extracted = _extract_response(response)
        if extracted is not None:
            return _from_response(*extracted)

    if isinstance(raw, _NO_RESPONSE_EXCEPTIONS) or (
        response is None and _error_message(raw) is not None
    ):
        return ClassifiedError(
            ErrorKind.NETWORK,
            DEFAULT_MESSAGES[ErrorKind.NETWORK],
            DEFAULT_CODES[ErrorKind.NETWORK],
            details={"original_error": _error_message(raw) or _safe_str(raw)},
        )

    message = _error_message(raw)
    if message is not None:
        return ClassifiedError(
            ErrorKind.UNKNOWN,
            message or DEFAULT_MESSAGES[ErrorKind.UNKNOWN],
            UNKNOWN_ERROR_CODE,
            details={"original_error": _error_name(raw), "stack": _error_stack(raw)},
        )

    return ClassifiedError(
        ErrorKind.UNKNOWN,
        DEFAULT_MESSAGES[ErrorKind.UNKNOWN],
        UNKNOWN_ERROR_CODE,
        details={"original_error": _safe_str(raw)},
    )


def _from_response(status: int, body: Any) -> ClassifiedError:
    kind = kind_for_status(status)
    body_message = _get_field(body, "message") if body is not None else _MISSING
    body_code = _get_field(body, "code") if body is not None else _MISSING
    body_details = _get_field(body, "details") if body is not None else _MISSING

    message = (
        body_message
        if isinstance(body_message, str) and body_message
        else DEFAULT_MESSAGES[ErrorKind.UNKNOWN]
    )
    if kind is ErrorKind.API:
        code = body_code if isinstance(body_code, str) and body_code else UNKNOWN_ERROR_CODE
    else:
        code = DEFAULT_CODES[kind]
    details = body_details if isinstance(body_details, Mapping) else None
    return ClassifiedError(kind, message, code, status_code=status, details=details)


def _from_circuit_breaker(error: CircuitBreakerError) -> ClassifiedError:
    details: Dict[str, Any] = {"original_error": str(error)}
    if error.breaker_name is not None:
        details["breaker_name"] = error.breaker_name
    if error.retry_after is not None:
        details["retry_after"] = error.retry_after
    return ClassifiedError(
        ErrorKind.SERVER,
        DEFAULT_MESSAGES[ErrorKind.SERVER],
        "CIRCUIT_OPEN",
        details=details,
    )


def _extract_response(response: Any) -> Optional[Tuple[int, Any]]:
    """Return (status, body) from a response-like value, or None."""
    if isinstance(response, httpx.Response):
        return response.status_code, _httpx_body(response)

    status = _get_field(response, "status")
    if status is _MISSING:
        status = _get_field(response, "status_code")
    if isinstance(status, float) and status.is_integer():
        status = int(status)
    if isinstance(status, bool) or not isinstance(status, int):
        return None

    body = _get_field(response, "data")
    if body is _MISSING:
        body = None
    return status, body


def _httpx_body(response: httpx.Response) -> Any:
    # Unread streaming bodies are left alone; reading them would do I/O.
    try:
        response.content
    except httpx.ResponseNotRead:
        return None
    try:
        return response.json()
    except ValueError:
        return None


def _get_field(value: Any, name: str) -> Any:
    """Read ``name`` from a mapping key or attribute; _MISSING when absent."""
    if isinstance(value, Mapping):
        return value.get(name, _MISSING)
    if isinstance(value, (str, bytes, int, float)) or value is None:
        return _MISSING
    try:
        return getattr(value, name, _MISSING)
    except Exception:
        return _MISSING


def _error_message(value: Any) -> Optional[str]:
    """Return the message of an error-like value, or None if not error-like."""
    if isinstance(value, BaseException):
        return _safe_str(value)
    message = _get_field(value, "message")
    if isinstance(message, str):
        return message
    return None


def _error_name(value: Any) -> str:
    if isinstance(value, BaseException):
        return type(value).__name__
    name = _get_field(value, "name")
    return name if isinstance(name, str) else type(value).__name__


def _error_stack(value: Any) -> Optional[str]:
    if isinstance(value, BaseException):
        if value.__traceback__ is None:
            return None
        return "".join(traceback.format_exception(type(value), value, value.__traceback__))
    stack = _get_field(value, "stack")
    return stack if isinstance(stack, str) else None


def _safe_str(value: Any) -> str:
    try:
        return str(value)
    except Exception:
        return object.__repr__(value)
