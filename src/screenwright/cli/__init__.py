"""Screenwright CLI package.

Commands live in ``screenwright.cli.commands``, one module per command.
"""

from .main import app

__all__ = ["app"]
