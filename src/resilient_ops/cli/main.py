"""Entry point for the ``resilient-ops`` command."""

import logging

import click

from resilient_ops import __version__
from resilient_ops.cli.commands import config_group, probe_cmd


@click.group()
@click.version_option(__version__, prog_name="resilient-ops")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Log level for stderr logging",
)
def cli(log_level: str) -> None:
    """Classified, retried and circuit-protected HTTP diagnostics."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


cli.add_command(probe_cmd)
cli.add_command(config_group)


if __name__ == "__main__":
    cli()
