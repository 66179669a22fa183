"""CLI command for screenwright clean."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from screenwright.cli.utils.cli_handler import CLIHandler, cli_command
from screenwright.fountain import clean_fountain_output

console = Console()


@cli_command()
def clean_command(
    file: Annotated[
        Path | None,
        typer.Argument(help="Raw model output (default: stdin)"),
    ] = None,
) -> None:
    """Strip markdown and assistant commentary from free-text model output."""
    text = CLIHandler(console).read_input(file)
    typer.echo(clean_fountain_output(text))
