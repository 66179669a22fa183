"""Unified CLI handler for standardized error handling and output."""

from __future__ import annotations

import asyncio
import inspect
import sys
from collections.abc import Callable
from functools import wraps
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape

from screenwright.cli.formatters.json_formatter import JsonFormatter
from screenwright.cli.validators.base import ValidationError
from screenwright.cli.validators.file_validator import FileValidator
from screenwright.config import get_logger
from screenwright.exceptions import ScreenwrightError

logger = get_logger(__name__)


class CLIHandler:
    """Unified handler for CLI commands."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize CLI handler.

        Args:
            console: Rich console for output
        """
        self.console = console or Console()
        self.json_formatter = JsonFormatter()

    def handle_error(
        self, error: Exception, json_output: bool = False, exit_code: int = 1
    ) -> None:
        """Handle and display errors consistently.

        Args:
            error: Exception to handle
            json_output: Whether to output JSON
            exit_code: Exit code to use
        """
        error_msg = str(error)
        logger.error(f"Command failed: {error_msg}")

        if json_output:
            print(self.json_formatter.format_error_response(error, exit_code))
        elif isinstance(error, ValidationError):
            self.console.print(f"[red]Validation Error: {escape(error_msg)}[/red]")
        elif isinstance(error, ScreenwrightError):
            # Already formatted with its hint and details
            self.console.print(f"[red]{escape(error_msg)}[/red]")
        else:
            self.console.print(f"[red]Error: {escape(error_msg)}[/red]")

        raise typer.Exit(exit_code)

    def handle_success(
        self, message: str, data: Any = None, json_output: bool = False
    ) -> None:
        """Handle success responses consistently."""
        if json_output:
            print(self.json_formatter.format_success(message, data))
        else:
            self.console.print(f"[green]{escape(message)}[/green]")

    def read_stdin(self, required: bool = True) -> str | None:
        """Read content from stdin.

        Args:
            required: Whether stdin content is required

        Returns:
            Content from stdin or None

        Raises:
            typer.Exit: If required and no content available
        """
        if sys.stdin.isatty():
            if required:
                self.console.print(
                    "[red]Error: No input provided. "
                    "Pass a file or pipe from stdin[/red]"
                )
                raise typer.Exit(1)
            return None
        return sys.stdin.read()

    def read_input(self, path: Path | None) -> str:
        """Read a file argument, or stdin when no file is given."""
        if path is not None:
            return FileValidator().read_text(path)
        return self.read_stdin(required=True) or ""


class ConsoleNotifier:
    """Agent notifier that prints to a rich console (stderr by default)."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize the notifier."""
        self.console = console or Console(stderr=True)

    def success(self, message: str) -> None:
        self.console.print(f"[green]{escape(message)}[/green]")

    def error(self, message: str) -> None:
        self.console.print(f"[red]{escape(message)}[/red]")

    def info(self, message: str) -> None:
        self.console.print(f"[yellow]{escape(message)}[/yellow]")


def cli_command(
    async_func: bool = False,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator for CLI commands with standardized error handling.

    Args:
        async_func: Whether the decorated function is async

    Returns:
        Decorator function
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            handler = CLIHandler()
            try:
                if async_func or inspect.iscoroutinefunction(func):
                    return asyncio.run(func(*args, **kwargs))
                return func(*args, **kwargs)
            except typer.Exit:
                raise
            except Exception as e:
                handler.handle_error(e, kwargs.get("json_output", False))

        return wrapper

    return decorator
