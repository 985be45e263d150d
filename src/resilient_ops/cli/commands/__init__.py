"""CLI commands."""

from resilient_ops.cli.commands.config import config_group
from resilient_ops.cli.commands.probe import probe_cmd

__all__ = [
    "config_group",
    "probe_cmd",
]
