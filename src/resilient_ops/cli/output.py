"""JSON output helpers for CLI commands.

Every command prints exactly one JSON document on stdout so the output can
be piped into other tools.
"""

import json
from typing import Any, Dict, NoReturn, Optional

import click


def emit_success(data: Dict[str, Any]) -> None:
    """Print a success envelope."""
    click.echo(json.dumps({"success": True, "data": data}, indent=2, default=str))


def emit_error(
    message: str,
    code: str,
    data: Optional[Dict[str, Any]] = None,
    exit_code: int = 1,
) -> NoReturn:
    """Print an error envelope and exit with a non-zero status."""
    payload: Dict[str, Any] = {"success": False, "error": message, "code": code}
    if data:
        payload["data"] = data
    click.echo(json.dumps(payload, indent=2, default=str))
    raise click.exceptions.Exit(exit_code)
