"""Retry predicates built on error classification."""

from typing import Callable, Iterable, Optional

from resilient_ops.core.errors import RETRYABLE_KINDS, ErrorKind, classify


def retryable_kinds_predicate(
    kinds: Optional[Iterable[ErrorKind]] = None,
) -> Callable[[Exception], bool]:
    """Build a RetryPolicy.should_retry predicate from error kinds.

    Args:
        kinds: Kinds worth retrying (default: Network, Timeout, Server).

    Example:
        >>> policy = RetryPolicy(should_retry=retryable_kinds_predicate())
    """
    allowed = frozenset(kinds) if kinds is not None else RETRYABLE_KINDS

    def should_retry(error: Exception) -> bool:
        return classify(error).kind in allowed

    return should_retry
