"""Endpoint probe command.

Issues GET requests through the full stack (retry -> circuit breaker ->
httpx) and reports the outcome as a classified result.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional, Tuple

import click
import httpx

from resilient_ops.cli.output import emit_error, emit_success
from resilient_ops.config import load_settings
from resilient_ops.core.errors import CircuitBreakerError, classify
from resilient_ops.core.resilience import CircuitBreaker, CircuitBreakerConfig, RetryPolicy, retry_with_backoff

logger = logging.getLogger(__name__)


def _build_client(timeout: float) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=timeout, follow_redirects=True)


async def _probe(
    url: str,
    policy: RetryPolicy,
    breaker_config: CircuitBreakerConfig,
    timeout: float,
) -> Tuple[Optional[httpx.Response], Optional[Exception], int, CircuitBreaker]:
    attempts = 0

    async with _build_client(timeout) as client:

        async def fetch() -> httpx.Response:
            nonlocal attempts
            attempts += 1
            response = await client.get(url)
            response.raise_for_status()
            return response

        breaker = CircuitBreaker(fetch, breaker_config, name=f"probe:{url}")
        guarded = policy.model_copy(
            update={"should_retry": lambda e: not isinstance(e, CircuitBreakerError)}
        )
        try:
            response = await retry_with_backoff(breaker.execute, guarded)
        except Exception as e:
            return None, e, attempts, breaker
        return response, None, attempts, breaker


@click.command("probe")
@click.argument("url")
@click.option("--retries", type=click.IntRange(min=0), help="Max retries after the first attempt")
@click.option("--initial-delay", type=click.FloatRange(min=0), help="First retry delay in ms")
@click.option("--max-delay", type=click.FloatRange(min=0), help="Retry delay cap in ms")
@click.option("--failure-threshold", type=click.IntRange(min=1), help="Failures before the breaker opens")
@click.option("--timeout", type=click.FloatRange(min=0), default=10.0, show_default=True, help="Request timeout in seconds")
@click.option(
    "--config-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="TOML config file for default policy values",
)
@click.option("--verbose", is_flag=True, help="Include diagnostic code and details")
def probe_cmd(
    url: str,
    retries: Optional[int],
    initial_delay: Optional[float],
    max_delay: Optional[float],
    failure_threshold: Optional[int],
    timeout: float,
    config_file: Optional[Path],
    verbose: bool,
) -> None:
    """Probe URL with retries and a circuit breaker.

    Examples:
        resilient-ops probe https://api.example.com/health
        resilient-ops probe https://api.example.com/health --retries 5 --initial-delay 200
    """
    try:
        settings = load_settings(config_file)
    except ValueError as e:
        emit_error(f"Invalid configuration: {e}", code="INVALID_CONFIG")

    retry_updates = {}
    if retries is not None:
        retry_updates["max_retries"] = retries
    if initial_delay is not None:
        retry_updates["initial_delay"] = initial_delay
    if max_delay is not None:
        retry_updates["max_delay"] = max_delay
    policy = settings.retry.model_copy(update=retry_updates)

    breaker_config = settings.circuit_breaker
    if failure_threshold is not None:
        breaker_config = breaker_config.model_copy(update={"failure_threshold": failure_threshold})

    response, error, attempts, breaker = asyncio.run(_probe(url, policy, breaker_config, timeout))

    if error is None and response is not None:
        emit_success(
            {
                "url": url,
                "status_code": response.status_code,
                "attempts": attempts,
                "breaker_state": breaker.state.value,
            }
        )
        return

    classified = classify(error)
    data = {
        "url": url,
        "attempts": attempts,
        "breaker_state": breaker.state.value,
        "error": classified.to_public_dict(),
    }
    if verbose:
        data["diagnostics"] = classified.to_dict()
    logger.debug("Probe of %s failed: %r", url, classified)
    emit_error(classified.message, code=classified.kind.value, data=data)
