"""Recovery dispatch.

Evaluates an ordered list of strategies against a classified error and runs
the first match.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Optional, Sequence

from resilient_ops.core.errors import ClassifiedError, classify
from resilient_ops.core.observability import audit_log, report_error
from resilient_ops.core.recovery.strategies import (
    DEFAULT_RECOVERY_STRATEGIES,
    RecoveryStrategy,
)

logger = logging.getLogger(__name__)


async def attempt_recovery(
    error: ClassifiedError,
    strategies: Optional[Sequence[RecoveryStrategy]] = None,
) -> bool:
    """Run the first strategy whose ``can_recover`` matches the error.

    Strategies are evaluated top to bottom and only the first match runs.
    A caller-supplied list fully replaces the defaults
    (unauthorized_recovery, network_error_recovery); an empty list disables
    recovery.

    Args:
        error: The classified error (raw failures are classified first).
        strategies: Ordered strategies, or None for the defaults.

    Returns:
        True if a strategy matched and its recovery completed; False if
        nothing matched or the matched recovery raised. A failed recovery is
        reported, never re-raised.
    """
    classified = classify(error)
    candidates: Sequence[Any] = DEFAULT_RECOVERY_STRATEGIES if strategies is None else strategies

    for strategy in candidates:
        try:
            matched = strategy.can_recover(classified)
        except Exception:
            logger.warning("Recovery predicate of %r raised; treating as no match", strategy, exc_info=True)
            continue
        if not matched:
            continue

        strategy_name = type(strategy).__name__
        audit_log(
            "recovery_attempt",
            strategy=strategy_name,
            error_kind=classified.kind.value,
            error_code=classified.code,
        )
        report_error(
            f"Attempting recovery with {strategy_name}",
            classified,
            {"severity": "info", "strategy": strategy_name},
        )
        try:
            result = strategy.recover()
            if inspect.isawaitable(result):
                await result
        except Exception as recovery_error:
            audit_log(
                "recovery_failed",
                strategy=strategy_name,
                error_kind=classified.kind.value,
                recovery_error=str(recovery_error)[:200],
            )
            report_error(
                "Error recovery failed",
                recovery_error,
                {"strategy": strategy_name, "error_kind": classified.kind.value},
            )
            return False
        logger.debug("Recovery with %s completed for %s", strategy_name, classified.kind.value)
        return True

    return False
