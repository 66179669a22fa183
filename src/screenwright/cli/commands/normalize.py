"""CLI command for screenwright normalize."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from screenwright.cli.utils.cli_handler import CLIHandler
from screenwright.cli.validators.file_validator import FileValidator
from screenwright.fountain import normalize_screenplay_text

console = Console()


def normalize_command(
    file: Annotated[
        Path,
        typer.Argument(help="Imported screenplay text (PDF/DOCX export, etc.)"),
    ],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the result here instead of stdout"),
    ] = None,
) -> None:
    """Repair encoding, line wrapping and spacing of an imported screenplay."""
    handler = CLIHandler(console)

    try:
        text = FileValidator().read_text(file)
        normalized = normalize_screenplay_text(text)

        if output is None:
            typer.echo(normalized)
            return

        output.write_text(normalized + "\n", encoding="utf-8")
        handler.handle_success(f"Normalized screenplay written to {output}")
    except typer.Exit:
        raise
    except Exception as e:
        handler.handle_error(e)
