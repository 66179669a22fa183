"""Main CLI entry point."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from screenwright import __version__
from screenwright.cli.commands import (
    clean_command,
    format_command,
    generate_command,
    normalize_command,
    validate_command,
)
from screenwright.cli.formatters.json_formatter import JsonFormatter
from screenwright.cli.utils.cli_handler import CLIHandler
from screenwright.cli.validators.file_validator import ConfigFileValidator
from screenwright.config import (
    clear_settings_cache,
    configure_logging,
    get_logger,
    get_settings,
    set_settings,
)
from screenwright.config.settings import ScreenwrightSettings

logger = get_logger(__name__)
console = Console()

app = typer.Typer(
    name="screenwright",
    help="Fountain formatting and AI writing agents for screenplays",
    pretty_exceptions_enable=False,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command(name="format")(format_command)
app.command(name="normalize")(normalize_command)
app.command(name="clean")(clean_command)
app.command(name="validate")(validate_command)
app.command(name="generate")(generate_command)


@app.command()
def version(
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show Screenwright version."""
    version_info = {
        "name": "Screenwright",
        "version": __version__,
        "description": "Fountain formatting and AI writing agents for screenplays",
    }

    if json_output:
        print(JsonFormatter().format(version_info))
    else:
        console.print(f"Screenwright v{version_info['version']}")


@app.callback()
def main_callback(
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
            envvar="SCREENWRIGHT_CONFIG",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging (INFO level)"),
    ] = False,
    debug: Annotated[
        bool,
        typer.Option(
            "--debug", help="Enable debug logging", envvar="SCREENWRIGHT_DEBUG"
        ),
    ] = False,
) -> None:
    """Configure global options."""
    if debug:
        os.environ["SCREENWRIGHT_LOG_LEVEL"] = "DEBUG"
        os.environ["SCREENWRIGHT_DEBUG"] = "true"
    elif verbose:
        os.environ["SCREENWRIGHT_LOG_LEVEL"] = "INFO"

    if debug or verbose:
        # Force reconfiguration of logging
        clear_settings_cache()
        configure_logging(get_settings())
        if debug:
            logger.debug("Debug mode enabled")
        else:
            logger.info("Verbose mode enabled")

    if config:
        try:
            config_path = ConfigFileValidator().validate(config)
            settings = ScreenwrightSettings.from_multiple_sources(
                config_files=[config_path]
            )
        except Exception as e:
            CLIHandler(console).handle_error(e)
            return
        set_settings(settings)
        configure_logging(settings)
        logger.debug("Loaded configuration", config_file=str(config_path))


def main() -> None:
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
