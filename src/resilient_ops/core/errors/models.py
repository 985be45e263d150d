"""Classified error model.

Defines the closed error taxonomy used across resilient-ops:
- ErrorKind enum naming every failure category
- ClassifiedError, the single tagged error value produced by classification
- DEFAULT_MESSAGES / DEFAULT_CODES catalogs for user-facing text and codes
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

UNKNOWN_ERROR_CODE = "UNKNOWN_ERROR"


class ErrorKind(str, Enum):
    """Closed taxonomy of failure categories."""

    NETWORK = "Network"
    VALIDATION = "Validation"
    UNAUTHORIZED = "Unauthorized"
    FORBIDDEN = "Forbidden"
    NOT_FOUND = "NotFound"
    TIMEOUT = "Timeout"
    SERVER = "Server"
    API = "Api"
    UNKNOWN = "Unknown"


# User-displayable fallback text per kind
DEFAULT_MESSAGES: Mapping[ErrorKind, str] = MappingProxyType(
    {
        ErrorKind.NETWORK: "Network error. Please check your connection and try again.",
        ErrorKind.VALIDATION: "The submitted data is invalid. Please check your input.",
        ErrorKind.UNAUTHORIZED: "Your session has expired. Please sign in again.",
        ErrorKind.FORBIDDEN: "You do not have permission to perform this action.",
        ErrorKind.NOT_FOUND: "The requested resource was not found.",
        ErrorKind.TIMEOUT: "The request timed out. Please try again.",
        ErrorKind.SERVER: "A server error occurred. Please try again later.",
        ErrorKind.API: "An unknown error occurred.",
        ErrorKind.UNKNOWN: "An unknown error occurred.",
    }
)

DEFAULT_CODES: Mapping[ErrorKind, str] = MappingProxyType(
    {
        ErrorKind.NETWORK: "NETWORK_ERROR",
        ErrorKind.VALIDATION: "VALIDATION_ERROR",
        ErrorKind.UNAUTHORIZED: "UNAUTHORIZED",
        ErrorKind.FORBIDDEN: "FORBIDDEN",
        ErrorKind.NOT_FOUND: "NOT_FOUND",
        ErrorKind.TIMEOUT: "TIMEOUT_ERROR",
        ErrorKind.SERVER: "SERVER_ERROR",
        ErrorKind.API: UNKNOWN_ERROR_CODE,
        ErrorKind.UNKNOWN: UNKNOWN_ERROR_CODE,
    }
)

RETRYABLE_KINDS = frozenset({ErrorKind.NETWORK, ErrorKind.TIMEOUT, ErrorKind.SERVER})


class ClassifiedError(Exception):
    """Uniform, taxonomy-tagged representation of any failure.

    Instances are immutable: all fields are exposed as read-only properties.
    Construction never raises; unusable arguments are coerced to safe
    defaults so the classifier can always produce a value.

    Attributes:
        kind: Category of the failure.
        message: Text that may be shown to the user.
        code: Machine-matchable code (diagnostic only).
        status_code: HTTP status when the failure came from a response.
        details: Diagnostic payload, never shown to the user.
    """

    def __init__(
        self,
        kind: ErrorKind = ErrorKind.UNKNOWN,
        message: Optional[str] = None,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Mapping[str, Any]] = None,
    ):
        try:
            kind = ErrorKind(kind)
        except ValueError:
            kind = ErrorKind.UNKNOWN
        if not isinstance(message, str) or not message:
            message = DEFAULT_MESSAGES[kind]
        if not isinstance(code, str) or not code:
            code = UNKNOWN_ERROR_CODE
        if isinstance(status_code, bool) or not isinstance(status_code, int):
            status_code = None
        frozen_details: Optional[Mapping[str, Any]] = None
        if isinstance(details, Mapping):
            try:
                frozen_details = MappingProxyType(dict(details))
            except (TypeError, ValueError):
                frozen_details = None

        super().__init__(message)
        self._kind = kind
        self._message = message
        self._code = code
        self._status_code = status_code
        self._details = frozen_details

    @property
    def kind(self) -> ErrorKind:
        return self._kind

    @property
    def message(self) -> str:
        return self._message

    @property
    def code(self) -> str:
        return self._code

    @property
    def status_code(self) -> Optional[int]:
        return self._status_code

    @property
    def details(self) -> Optional[Mapping[str, Any]]:
        return self._details

    @property
    def retryable(self) -> bool:
        """Whether repeating the operation may succeed."""
        return self._kind in RETRYABLE_KINDS

    def _key(self) -> tuple:
        details = dict(self._details) if self._details is not None else None
        return (self._kind, self._message, self._code, self._status_code, details)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ClassifiedError):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash((self._kind, self._message, self._code, self._status_code))

    def __repr__(self) -> str:
        return (
            f"ClassifiedError(kind={self._kind.value!r}, message={self._message!r}, "
            f"code={self._code!r}, status_code={self._status_code!r})"
        )

    def __reduce__(self):
        details = dict(self._details) if self._details is not None else None
        return (
            type(self),
            (self._kind, self._message, self._code, self._status_code, details),
        )

    def to_public_dict(self) -> Dict[str, Any]:
        """Return the user-safe view (kind and message only)."""
        return {"kind": self._kind.value, "message": self._message}

    def to_dict(self) -> Dict[str, Any]:
        """Return the full diagnostic view for logs and tooling."""
        result: Dict[str, Any] = {
            "kind": self._kind.value,
            "message": self._message,
            "code": self._code,
        }
        if self._status_code is not None:
            result["status_code"] = self._status_code
        if self._details is not None:
            result["details"] = dict(self._details)
        return result


def is_retryable(error: ClassifiedError) -> bool:
    """Return True when the error kind indicates a transient failure.

    Network, Timeout and Server failures are retryable; validation,
    authorization and unknown failures are not.
    """
    return error.kind in RETRYABLE_KINDS
