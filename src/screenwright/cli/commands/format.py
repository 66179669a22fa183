"""CLI command for screenwright format."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from screenwright.cli.utils.cli_handler import CLIHandler
from screenwright.cli.validators.base import LineArrayValidator, ValidationError
from screenwright.config import get_logger
from screenwright.fountain import format_fountain_spacing

logger = get_logger(__name__)
console = Console()


def format_command(
    file: Annotated[
        Path | None,
        typer.Argument(help="File with screenplay lines (default: stdin)"),
    ] = None,
    json_array: Annotated[
        bool,
        typer.Option("--json-array", help="Input is a JSON array of lines"),
    ] = False,
    json_output: Annotated[
        bool, typer.Option("--json", help="Output as JSON")
    ] = False,
) -> None:
    """Apply Fountain spacing to a list of screenplay lines."""
    handler = CLIHandler(console)

    try:
        text = handler.read_input(file)
        if json_array:
            try:
                data = json.loads(text)
            except json.JSONDecodeError as e:
                raise ValidationError(f"Invalid JSON array: {e.msg}", "lines") from e
            lines = LineArrayValidator().validate(data)
        else:
            lines = text.splitlines()

        logger.debug("Formatting lines", count=len(lines))
        formatted = format_fountain_spacing(lines)

        if json_output:
            print(json.dumps({"content": formatted}, indent=2))
        else:
            typer.echo(formatted)
    except typer.Exit:
        raise
    except Exception as e:
        handler.handle_error(e, json_output)
