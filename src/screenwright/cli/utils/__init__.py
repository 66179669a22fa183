"""CLI utilities."""

from screenwright.cli.utils.cli_handler import CLIHandler, ConsoleNotifier, cli_command

__all__ = ["CLIHandler", "ConsoleNotifier", "cli_command"]
