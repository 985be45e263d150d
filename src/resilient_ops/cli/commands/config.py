"""Configuration inspection commands."""

from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError

from resilient_ops.cli.output import emit_error, emit_success
from resilient_ops.config import load_settings


@click.group("config")
def config_group() -> None:
    """Configuration commands."""
    pass


@config_group.command("show")
@click.option(
    "--config-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="TOML config file (default: RESILIENT_OPS_CONFIG_FILE or ./resilient-ops.toml)",
)
def show_cmd(config_file: Optional[Path]) -> None:
    """Print the resolved settings.

    Examples:
        resilient-ops config show
        resilient-ops config show --config-file ops.toml
    """
    try:
        settings = load_settings(config_file)
    except ValidationError as e:
        emit_error(
            f"Invalid configuration: {e.error_count()} error(s)",
            code="INVALID_CONFIG",
            data={"errors": e.errors(include_url=False)},
        )
    except ValueError as e:
        emit_error(f"Could not parse configuration: {e}", code="INVALID_CONFIG")
    emit_success(settings.to_dict())
