"""Screenwright configuration settings."""

from __future__ import annotations

import json
import os
import tomllib
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from screenwright.exceptions import ConfigurationError, check_config_keys

AGENT_NAMES = ("screenwriter", "dialogue", "director", "rewrite")


class ScreenwrightSettings(BaseSettings):
    """Screenwright configuration settings.

    Settings are loaded with the following precedence (highest to lowest):
    1. CLI arguments (when provided via command flags)
       Example: screenwright generate dialogue "..." --model gpt-4o

    2. Config file values (YAML, TOML, or JSON)
       Example: screenwright --config myconfig.yaml
       Multiple files: Later files override earlier ones

    3. Environment variables (prefixed with SCREENWRIGHT_)
       Example: export SCREENWRIGHT_API_BASE_URL=http://localhost:3001/api

    4. .env file (in current directory or specified path)

    5. Default values (defined in field declarations below)

    Model selection per agent lives here instead of browser storage, so an
    agent session is always constructed with an explicit settings object.
    """

    model_config = SettingsConfigDict(
        env_prefix="SCREENWRIGHT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Debug settings
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    # Logging settings
    log_level: str = Field(
        default="WARNING",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        pattern="^(?i)(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
    )
    log_format: str = Field(
        default="console",
        description="Log output format (console, json, structured)",
        pattern="^(?i)(console|json|structured)$",
    )
    log_file: Path | None = Field(
        default=None,
        description="Optional log file path",
    )

    # Generation backend settings
    api_base_url: str = Field(
        default="http://localhost:3001/api",
        description="Base URL of the chat/generation backend",
    )
    api_key: str | None = Field(
        default=None,
        description="Bearer token sent to the generation backend",
    )
    api_timeout: float = Field(
        default=120.0,
        description="Timeout in seconds for one streamed generation",
        ge=1.0,
    )

    # Model selection
    default_model: str = Field(
        default="claude-sonnet-4-5",
        description="Model used by any agent without an explicit override",
    )
    agent_models: dict[str, str] = Field(
        default_factory=dict,
        description=(
            "Per-agent model override, keyed by agent name "
            "(screenwriter, dialogue, director, rewrite)"
        ),
    )

    # Director settings
    director_generation_length: str = Field(
        default="full",
        description="Director output length (short, full, multiple)",
        pattern="^(short|full|multiple)$",
    )
    director_scene_count: int = Field(
        default=1,
        description="Number of scenes the director modal generates",
        ge=1,
        le=3,
    )

    @field_validator("log_file", mode="before")
    @classmethod
    def expand_path(cls, v: Any) -> Path | None:
        """Expand environment variables and ~ in path values."""
        if v is None:
            return None
        if isinstance(v, str):
            expanded = os.path.expandvars(v)
            return Path(expanded).expanduser().resolve()
        if isinstance(v, Path):
            return v.resolve()
        if isinstance(v, (dict, list, set, tuple)):  # noqa: UP038
            raise ValueError(
                f"Path fields cannot accept {type(v).__name__} types. "
                f"Expected str or Path, got: {v!r}"
            )
        return Path(str(v)).resolve()

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> str:
        """Normalize log level to uppercase for case-insensitive handling."""
        if isinstance(v, str):
            return v.upper()
        raise ValueError(f"log_level must be a string, got {type(v).__name__}")

    @field_validator("log_format", mode="before")
    @classmethod
    def normalize_log_format(cls, v: Any) -> str:
        """Normalize log format to lowercase for case-insensitive handling."""
        if isinstance(v, str):
            return v.lower()
        raise ValueError(f"log_format must be a string, got {type(v).__name__}")

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Store the base URL without a trailing slash."""
        return v.rstrip("/")

    @field_validator("agent_models")
    @classmethod
    def check_agent_names(cls, v: dict[str, str]) -> dict[str, str]:
        """Reject overrides for agents that do not exist."""
        unknown = sorted(set(v) - set(AGENT_NAMES))
        if unknown:
            raise ValueError(
                f"Unknown agent(s) in agent_models: {', '.join(unknown)}. "
                f"Valid agents are: {', '.join(AGENT_NAMES)}"
            )
        return v

    def model_for(self, agent: str) -> str:
        """Return the model configured for an agent."""
        return self.agent_models.get(agent) or self.default_model

    @classmethod
    def from_env(cls) -> ScreenwrightSettings:
        """Create settings from environment variables."""
        return cls()

    @classmethod
    def from_file(cls, config_path: Path | str) -> ScreenwrightSettings:
        """Load settings from a configuration file.

        Args:
            config_path: Path to configuration file (YAML, TOML, or JSON).

        Returns:
            Settings loaded from the file.

        Raises:
            ConfigurationError: If file format is not supported.
            FileNotFoundError: If config file doesn't exist.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        suffix = config_path.suffix.lower()

        if suffix in {".yml", ".yaml"}:
            with config_path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        elif suffix == ".toml":
            with config_path.open("rb") as f:
                data = tomllib.load(f)
        elif suffix == ".json":
            with config_path.open(encoding="utf-8") as f:
                data = json.load(f)
        else:
            raise ConfigurationError(
                message=f"Unsupported configuration file format: {suffix}",
                hint="Use one of the supported formats: .yml, .yaml, .toml, or .json",
                details={
                    "file": str(config_path),
                    "detected_format": suffix,
                    "supported_formats": [".yml", ".yaml", ".toml", ".json"],
                },
            )

        check_config_keys(data)

        return cls(**data)

    @classmethod
    def from_multiple_sources(
        cls,
        config_files: list[Path | str] | None = None,
        cli_args: dict[str, Any] | None = None,
    ) -> ScreenwrightSettings:
        """Load settings with proper precedence from multiple sources.

        Precedence (highest to lowest):
        1. CLI arguments
        2. Config files (last file wins)
        3. Environment variables
        4. Default values

        Args:
            config_files: List of config files to load (later files override earlier).
            cli_args: Dictionary of CLI arguments.

        Returns:
            Merged settings from all sources.
        """
        data: dict[str, Any] = {}

        if config_files:
            for config_file in config_files:
                try:
                    file_settings = cls.from_file(config_file)
                except FileNotFoundError:
                    from screenwright.config.logging import get_logger as _get_logger

                    _get_logger("screenwright.config.settings").warning(
                        "Configuration file not found, using defaults",
                        config_file=str(config_file),
                    )
                    continue
                data.update(file_settings.model_dump(exclude_unset=True))

        settings = cls(**data)

        if cli_args:
            cli_data = {k: v for k, v in cli_args.items() if v is not None}
            if cli_data:
                updated_data = settings.model_dump()
                updated_data.update(cli_data)
                settings = cls(**updated_data)

        return settings


# Global settings instance
_settings: ScreenwrightSettings | None = None


def _get_config_paths() -> list[Path | str]:
    """Get the existing config files, later files override earlier."""
    potential_paths = [
        Path.home() / ".config" / "screenwright" / "config.yaml",
        Path.home() / ".config" / "screenwright" / "config.toml",
        Path.cwd() / "screenwright.yaml",
        Path.cwd() / "screenwright.toml",
        Path.cwd() / "screenwright.json",
    ]

    existing_paths: list[Path | str] = []
    for path in potential_paths:
        try:
            if path.is_file():
                existing_paths.append(path)
        except OSError:
            continue
    return existing_paths


def get_settings() -> ScreenwrightSettings:
    """Get the global settings instance.

    Returns:
        Global ScreenwrightSettings instance.
    """
    global _settings
    if _settings is None:
        config_paths = _get_config_paths()
        if config_paths:
            _settings = ScreenwrightSettings.from_multiple_sources(
                config_files=config_paths
            )
        else:
            _settings = ScreenwrightSettings.from_env()
    return _settings


def set_settings(settings: ScreenwrightSettings) -> None:
    """Set the global settings instance.

    Args:
        settings: Settings instance to use globally.
    """
    global _settings
    _settings = settings


def clear_settings_cache() -> None:
    """Clear the global settings cache.

    Forces get_settings() to re-read environment variables and config files
    on the next call.
    """
    global _settings
    _settings = None


def get_settings_for_cli(
    config_file: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> ScreenwrightSettings:
    """Get settings for CLI commands with consistent precedence.

    Args:
        config_file: Optional specific config file to load. If not provided,
                    uses standard config locations.
        cli_overrides: Dictionary of CLI argument overrides. Only non-None
                      values are applied.

    Returns:
        ScreenwrightSettings instance with all sources merged.

    Raises:
        FileNotFoundError: If config_file is specified but doesn't exist.
    """
    if config_file:
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_file}")
        return ScreenwrightSettings.from_multiple_sources(
            config_files=[config_file],
            cli_args=cli_overrides,
        )

    settings = get_settings()
    if cli_overrides:
        filtered = {k: v for k, v in cli_overrides.items() if v is not None}
        if filtered:
            data = settings.model_dump()
            data.update(filtered)
            settings = ScreenwrightSettings(**data)
    return settings
