"""Error taxonomy and classification for resilient-ops.

Usage:
    from resilient_ops.core.errors import ErrorKind, classify

    try:
        await fetch_conversations()
    except Exception as e:
        error = classify(e)
        if error.kind is ErrorKind.UNAUTHORIZED:
            ...
"""

from resilient_ops.core.errors.classifier import (
    STATUS_KIND_MAP,
    classify,
    kind_for_status,
)
from resilient_ops.core.errors.models import (
    DEFAULT_CODES,
    DEFAULT_MESSAGES,
    RETRYABLE_KINDS,
    UNKNOWN_ERROR_CODE,
    ClassifiedError,
    ErrorKind,
    is_retryable,
)
from resilient_ops.core.errors.resilience import CircuitBreakerError

__all__ = [
    # Model
    "ErrorKind",
    "ClassifiedError",
    "DEFAULT_CODES",
    "DEFAULT_MESSAGES",
    "RETRYABLE_KINDS",
    "UNKNOWN_ERROR_CODE",
    "is_retryable",
    # Classification
    "STATUS_KIND_MAP",
    "classify",
    "kind_for_status",
    # Resilience errors
    "CircuitBreakerError",
]
