"""Screenwright CLI commands."""

from __future__ import annotations

from screenwright.cli.commands.clean import clean_command
from screenwright.cli.commands.format import format_command
from screenwright.cli.commands.generate import generate_command
from screenwright.cli.commands.normalize import normalize_command
from screenwright.cli.commands.validate import validate_command

__all__ = [
    "clean_command",
    "format_command",
    "generate_command",
    "normalize_command",
    "validate_command",
]
