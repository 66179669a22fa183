"""CLI command for screenwright generate."""

from __future__ import annotations

import asyncio
import contextlib
import signal
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from screenwright.agents import (
    AgentKind,
    AgentRunner,
    DialogueForm,
    GenerationOutcome,
    HttpGenerationClient,
    SceneDirection,
)
from screenwright.cli.formatters.json_formatter import JsonFormatter
from screenwright.cli.utils.cli_handler import CLIHandler, ConsoleNotifier
from screenwright.cli.validators.base import ValidationError
from screenwright.cli.validators.file_validator import FileValidator
from screenwright.config import get_logger, get_settings
from screenwright.config.settings import ScreenwrightSettings
from screenwright.fountain.scene_context import detect_current_scene

logger = get_logger(__name__)
console = Console()


async def run_agent(
    runner: AgentRunner,
    agent: AgentKind,
    prompt: str,
    screenplay: str | None,
    cursor: int,
    characters: list[str],
    location: str | None,
    selection: tuple[int, int] | None,
) -> GenerationOutcome:
    """Dispatch one CLI generation to the right agent."""
    if agent is AgentKind.SCREENWRITER:
        return await runner.screenwriter(prompt, screenplay, cursor, selection)

    if agent is AgentKind.DIALOGUE:
        scene = detect_current_scene(screenplay or "", cursor)
        if not characters and scene:
            characters = scene.characters
        form = DialogueForm(
            scene_heading=scene.heading if scene else "",
            act=str(scene.act) if scene else "",
            characters=characters,
            conflict=prompt,
        )
        return await runner.dialogue(form, screenplay, cursor)

    if agent is AgentKind.DIRECTOR:
        direction = SceneDirection(location=location or "", scenario=prompt)
        return await runner.director([direction], screenplay, cursor, selection)

    if not screenplay or selection is None:
        raise ValidationError("Rewrite needs --screenplay with --start and --end")
    return await runner.rewrite(prompt, screenplay, *selection)


async def _generate(
    settings: ScreenwrightSettings,
    agent: AgentKind,
    prompt: str,
    screenplay: str | None,
    cursor: int,
    characters: list[str],
    location: str | None,
    selection: tuple[int, int] | None,
) -> GenerationOutcome:
    async with HttpGenerationClient.from_settings(settings) as client:
        runner = AgentRunner(settings, client, ConsoleNotifier())

        # Ctrl-C cancels the generation instead of killing the process
        loop = asyncio.get_running_loop()
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(signal.SIGINT, runner.cancel, agent)
        try:
            return await run_agent(
                runner,
                agent,
                prompt,
                screenplay,
                cursor,
                characters,
                location,
                selection,
            )
        finally:
            with contextlib.suppress(NotImplementedError):
                loop.remove_signal_handler(signal.SIGINT)


def generate_command(
    agent: Annotated[AgentKind, typer.Argument(help="Agent to run")],
    prompt: Annotated[
        str,
        typer.Argument(
            help="Request (screenwriter), conflict (dialogue), "
            "scenario (director) or instruction (rewrite)"
        ),
    ],
    screenplay: Annotated[
        Path | None,
        typer.Option("--screenplay", "-s", help="Screenplay the content is for"),
    ] = None,
    cursor: Annotated[
        int | None,
        typer.Option("--cursor", help="Cursor offset (default: end of screenplay)"),
    ] = None,
    model: Annotated[
        str | None,
        typer.Option("--model", "-m", help="Model for this run"),
    ] = None,
    character: Annotated[
        list[str] | None,
        typer.Option("--character", help="Dialogue character (repeatable)"),
    ] = None,
    location: Annotated[
        str | None,
        typer.Option("--location", help="Director scene location"),
    ] = None,
    start: Annotated[
        int | None,
        typer.Option("--start", help="Selection start offset"),
    ] = None,
    end: Annotated[
        int | None,
        typer.Option("--end", help="Selection end offset"),
    ] = None,
    json_output: Annotated[
        bool, typer.Option("--json", help="Output as JSON")
    ] = False,
) -> None:
    """Run one streamed generation and print the editor-ready text."""
    handler = CLIHandler(console)

    try:
        settings = get_settings()
        if model:
            agent_models = {**settings.agent_models, agent.value: model}
            settings = settings.model_copy(update={"agent_models": agent_models})

        text = FileValidator().read_text(screenplay) if screenplay else None
        position = len(text or "") if cursor is None else cursor
        if text is not None:
            position = max(0, min(position, len(text)))

        selection = None
        if start is not None and end is not None:
            selection = (start, end)

        outcome = asyncio.run(
            _generate(
                settings,
                agent,
                prompt,
                text,
                position,
                list(character or []),
                location,
                selection,
            )
        )
    except typer.Exit:
        raise
    except Exception as e:
        handler.handle_error(e, json_output)
        return

    if json_output:
        print(JsonFormatter().format(outcome))
    elif outcome.succeeded:
        typer.echo(outcome.content)

    if not outcome.succeeded:
        logger.debug("Generation did not succeed", status=outcome.status.value)
        raise typer.Exit(1)
