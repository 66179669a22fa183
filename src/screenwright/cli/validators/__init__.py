"""Input validators for CLI commands."""

from screenwright.cli.validators.base import (
    LineArrayValidator,
    ValidationError,
    Validator,
)
from screenwright.cli.validators.file_validator import (
    ConfigFileValidator,
    FileValidator,
)

__all__ = [
    "ConfigFileValidator",
    "FileValidator",
    "LineArrayValidator",
    "ValidationError",
    "Validator",
]
