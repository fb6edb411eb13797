"""CLI commands module for PropFlow."""

from propflow.cli.commands.replay import replay_command
from propflow.cli.commands.show import show_command

__all__ = [
    "replay_command",
    "show_command",
]
