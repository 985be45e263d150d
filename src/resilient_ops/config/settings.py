"""Resilience settings and loading logic.

Priority (highest to lowest):
1. Environment variables (RESILIENT_OPS_*)
2. Explicit config file, or RESILIENT_OPS_CONFIG_FILE
3. Project config (./resilient-ops.toml)
4. Default values

TOML layout::

    [retry]
    max_retries = 3
    initial_delay_ms = 1000
    max_delay_ms = 10000
    backoff_factor = 2.0

    [circuit_breaker]
    failure_threshold = 5
    reset_timeout_ms = 60000

    [recovery]
    network_wait_ms = 2000
    login_path = "/login"

    [logging]
    level = "INFO"
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple, TypeVar, Union

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # Python < 3.11 fallback

from resilient_ops.core.recovery import NetworkErrorRecovery, UnauthorizedRecovery
from resilient_ops.core.resilience import CircuitBreaker, CircuitBreakerConfig, RetryPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T")

CONFIG_FILE_ENV_VAR = "RESILIENT_OPS_CONFIG_FILE"
PROJECT_CONFIG_NAME = "resilient-ops.toml"

# env var -> (section, key, parser)
_ENV_OVERRIDES: Dict[str, Tuple[str, str, Callable[[str], Any]]] = {
    "RESILIENT_OPS_MAX_RETRIES": ("retry", "max_retries", int),
    "RESILIENT_OPS_INITIAL_DELAY_MS": ("retry", "initial_delay", float),
    "RESILIENT_OPS_MAX_DELAY_MS": ("retry", "max_delay", float),
    "RESILIENT_OPS_BACKOFF_FACTOR": ("retry", "backoff_factor", float),
    "RESILIENT_OPS_FAILURE_THRESHOLD": ("circuit_breaker", "failure_threshold", int),
    "RESILIENT_OPS_RESET_TIMEOUT_MS": ("circuit_breaker", "reset_timeout", float),
    "RESILIENT_OPS_NETWORK_WAIT_MS": ("recovery", "network_recovery_wait", float),
    "RESILIENT_OPS_LOGIN_PATH": ("recovery", "login_path", str),
    "RESILIENT_OPS_LOG_LEVEL": ("logging", "log_level", str),
}


@dataclass
class ResilienceSettings:
    """Configuration for the resilience stack.

    Attributes:
        retry: Default retry policy
        circuit_breaker: Default breaker thresholds
        network_recovery_wait: Network recovery wait in ms
        login_path: Login entry point for unauthorized recovery
        log_level: Root log level for the CLI
    """

    retry: RetryPolicy = field(default_factory=RetryPolicy)
    circuit_breaker: CircuitBreakerConfig = field(default_factory=CircuitBreakerConfig)
    network_recovery_wait: float = 2000.0
    login_path: str = "/login"
    log_level: str = "INFO"

    @classmethod
    def from_toml_dict(cls, data: Dict[str, Any]) -> "ResilienceSettings":
        """Create settings from a parsed TOML document.

        Args:
            data: Dict from TOML parsing

        Returns:
            ResilienceSettings instance
        """
        settings = cls()
        settings._apply_toml(data)
        return settings

    @classmethod
    def from_toml(cls, path: Union[str, Path]) -> "ResilienceSettings":
        """Load settings from a TOML file."""
        return cls.from_toml_dict(_read_toml(Path(path)))

    def _apply_toml(self, data: Dict[str, Any]) -> None:
        retry = data.get("retry", {})
        if retry:
            updates: Dict[str, Any] = {}
            if "max_retries" in retry:
                updates["max_retries"] = int(retry["max_retries"])
            if "initial_delay_ms" in retry:
                updates["initial_delay"] = float(retry["initial_delay_ms"])
            if "max_delay_ms" in retry:
                updates["max_delay"] = float(retry["max_delay_ms"])
            if "backoff_factor" in retry:
                updates["backoff_factor"] = float(retry["backoff_factor"])
            self.retry = _updated(self.retry, updates)

        breaker = data.get("circuit_breaker", {})
        if breaker:
            updates = {}
            if "failure_threshold" in breaker:
                updates["failure_threshold"] = int(breaker["failure_threshold"])
            if "reset_timeout_ms" in breaker:
                updates["reset_timeout"] = float(breaker["reset_timeout_ms"])
            self.circuit_breaker = _updated(self.circuit_breaker, updates)

        recovery = data.get("recovery", {})
        if "network_wait_ms" in recovery:
            self.network_recovery_wait = float(recovery["network_wait_ms"])
        if "login_path" in recovery:
            self.login_path = str(recovery["login_path"])

        log_section = data.get("logging", {})
        if "level" in log_section:
            self.log_level = str(log_section["level"]).upper()

    def _load_env(self) -> None:
        """Apply RESILIENT_OPS_* environment overrides."""
        retry_updates: Dict[str, Any] = {}
        breaker_updates: Dict[str, Any] = {}

        for env_var, (section, key, parser) in _ENV_OVERRIDES.items():
            raw = os.environ.get(env_var)
            if raw is None or raw == "":
                continue
            try:
                value = parser(raw)
            except ValueError:
                logger.warning("Ignoring invalid value for %s: %r", env_var, raw)
                continue

            if section == "retry":
                retry_updates[key] = value
            elif section == "circuit_breaker":
                breaker_updates[key] = value
            elif key == "log_level":
                self.log_level = str(value).upper()
            else:
                setattr(self, key, value)

        self.retry = _updated(self.retry, retry_updates)
        self.circuit_breaker = _updated(self.circuit_breaker, breaker_updates)

    def build_breaker(self, operation: Callable[[], Awaitable[T]], name: str = "circuit") -> CircuitBreaker[T]:
        """Create a circuit breaker for one call site using these thresholds."""
        return CircuitBreaker(operation, self.circuit_breaker, name=name)

    def build_default_strategies(self) -> list:
        """Create the default recovery strategies using these settings."""
        return [
            UnauthorizedRecovery(login_path=self.login_path),
            NetworkErrorRecovery(wait=self.network_recovery_wait),
        ]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dict."""
        return {
            "retry": self.retry.model_dump(exclude={"on_retry", "should_retry"}),
            "circuit_breaker": self.circuit_breaker.model_dump(),
            "recovery": {
                "network_wait_ms": self.network_recovery_wait,
                "login_path": self.login_path,
            },
            "logging": {"level": self.log_level},
        }


def _updated(model: Any, updates: Dict[str, Any]) -> Any:
    """Return a validated copy of a pydantic model with updated fields."""
    if not updates:
        return model
    return type(model).model_validate({**model.model_dump(), **updates})


def load_settings(config_file: Optional[Union[str, Path]] = None) -> ResilienceSettings:
    """Load settings from TOML and environment.

    Args:
        config_file: Explicit TOML path (falls back to RESILIENT_OPS_CONFIG_FILE,
            then ./resilient-ops.toml).

    Returns:
        Resolved ResilienceSettings.

    Raises:
        pydantic.ValidationError: If a configured value is out of range.
    """
    settings = ResilienceSettings()

    toml_path = config_file or os.environ.get(CONFIG_FILE_ENV_VAR)
    if toml_path:
        path = Path(toml_path)
        if path.exists():
            settings._apply_toml(_read_toml(path))
            logger.debug("Loaded config from %s", path)
        else:
            logger.warning("Config file not found: %s", path)
    else:
        project_config = Path(PROJECT_CONFIG_NAME)
        if project_config.exists():
            settings._apply_toml(_read_toml(project_config))
            logger.debug("Loaded project config from %s", project_config)

    settings._load_env()
    return settings


def _read_toml(path: Path) -> Dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)
