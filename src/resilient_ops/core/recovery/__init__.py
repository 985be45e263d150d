"""Error recovery strategies and dispatch.

    from resilient_ops.core.recovery import attempt_recovery

    recovered = await attempt_recovery(classify(exc))
"""

from resilient_ops.core.recovery.dispatcher import attempt_recovery
from resilient_ops.core.recovery.strategies import (
    DEFAULT_NETWORK_WAIT_MS,
    DEFAULT_RECOVERY_STRATEGIES,
    CallbackRecovery,
    NetworkErrorRecovery,
    RecoveryStrategy,
    UnauthorizedRecovery,
    network_error_recovery,
    unauthorized_recovery,
)

__all__ = [
    # Dispatch
    "attempt_recovery",
    # Strategies
    "RecoveryStrategy",
    "UnauthorizedRecovery",
    "NetworkErrorRecovery",
    "CallbackRecovery",
    "unauthorized_recovery",
    "network_error_recovery",
    "DEFAULT_RECOVERY_STRATEGIES",
    "DEFAULT_NETWORK_WAIT_MS",
]
