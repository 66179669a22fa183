"""CLI command for screenwright validate."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from screenwright.agents.models import AgentKind
from screenwright.cli.formatters.json_formatter import JsonFormatter
from screenwright.cli.utils.cli_handler import CLIHandler
from screenwright.cli.validators.file_validator import FileValidator
from screenwright.config import get_settings
from screenwright.validation import (
    ContentValidation,
    validate_dialogue_content,
    validate_director_content,
    validate_director_modal_content,
    validate_rewrite_content,
    validate_screenwriter_content,
)

console = Console()


def run_validator(
    agent: AgentKind,
    response: str,
    context_before: str | None = None,
    scenes: int = 1,
    length: str | None = None,
) -> ContentValidation:
    """Validate a saved response the way ``agent`` would."""
    if agent is AgentKind.SCREENWRITER:
        return validate_screenwriter_content(response, context_before)
    if agent is AgentKind.DIRECTOR:
        if length:
            return validate_director_content(response, context_before, length, scenes)
        return validate_director_modal_content(response, context_before, scenes)
    if agent is AgentKind.DIALOGUE:
        return validate_dialogue_content(response)
    return validate_rewrite_content(response)


def validate_command(
    agent: Annotated[
        AgentKind, typer.Argument(help="Agent that produced the response")
    ],
    file: Annotated[Path, typer.Argument(help="File holding the raw model response")],
    context: Annotated[
        Path | None,
        typer.Option("--context", help="Screenplay text that preceded the cursor"),
    ] = None,
    scenes: Annotated[
        int | None,
        typer.Option("--scenes", help="Expected number of director scenes (1-3)"),
    ] = None,
    length: Annotated[
        str | None,
        typer.Option(
            "--length",
            help="Validate a director content array (short, full, multiple)",
        ),
    ] = None,
    json_output: Annotated[
        bool, typer.Option("--json", help="Output as JSON")
    ] = False,
) -> None:
    """Check a structured model response and show the content it renders to."""
    handler = CLIHandler(console)

    try:
        validator = FileValidator()
        response = validator.read_text(file)
        context_before = validator.read_text(context) if context else None

        settings = get_settings()
        scene_count = scenes if scenes is not None else settings.director_scene_count
        result = run_validator(agent, response, context_before, scene_count, length)
    except typer.Exit:
        raise
    except Exception as e:
        handler.handle_error(e, json_output)
        return

    if json_output:
        print(JsonFormatter().format(result))
    elif result.valid:
        typer.echo(result.content)
    else:
        console.print(f"[red]Invalid {agent.value} response:[/red]")
        for error in result.errors:
            console.print(f"  - {escape(error)}")

    if not result.valid:
        raise typer.Exit(1)
