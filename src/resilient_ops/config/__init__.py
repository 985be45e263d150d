"""Configuration for resilient-ops.

    from resilient_ops.config import load_settings

    settings = load_settings()
    breaker = settings.build_breaker(fetch_inbox, name="inbox")
"""

from resilient_ops.config.settings import (
    CONFIG_FILE_ENV_VAR,
    PROJECT_CONFIG_NAME,
    ResilienceSettings,
    load_settings,
)

__all__ = [
    "CONFIG_FILE_ENV_VAR",
    "PROJECT_CONFIG_NAME",
    "ResilienceSettings",
    "load_settings",
]
