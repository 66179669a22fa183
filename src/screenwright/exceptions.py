"""Custom exception hierarchy for Screenwright with helpful error messages."""

from __future__ import annotations

from typing import Any


class ScreenwrightError(Exception):
    """Base exception with helpful formatting for all Screenwright errors.

    Provides structured error messages with hints and details to help users
    understand and fix problems.
    """

    def __init__(
        self,
        message: str,
        hint: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize exception with structured error information.

        Args:
            message: Primary error message describing what went wrong
            hint: Optional hint suggesting how to fix the problem
            details: Optional dictionary with additional debugging information
        """
        self.message = message
        self.hint = hint
        self.details = details
        super().__init__(self.format_error())

    def format_error(self) -> str:
        """Format the error message with hint and details.

        Returns:
            Formatted error string with all available information
        """
        output = f"Error: {self.message}"
        if self.hint:
            output += f"\nHint: {self.hint}"
        if self.details:
            details_str = "\n".join(
                f"  {key}: {value}" for key, value in self.details.items()
            )
            output += f"\nDetails:\n{details_str}"
        return output


class ConfigurationError(ScreenwrightError):
    """Configuration errors including invalid settings and missing config files."""

    pass


class GenerationError(ScreenwrightError):
    """Transport or backend failure while streaming a generation."""

    def __init__(
        self,
        message: str = "Failed to generate content",
        status_code: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize generation error.

        Args:
            message: Error message
            status_code: HTTP status returned by the backend, if any
            original_error: The original exception that caused this error
        """
        self.status_code = status_code
        self.original_error = original_error

        details: dict[str, Any] = {}
        if status_code is not None:
            details["status_code"] = status_code
        if original_error:
            details["original_error"] = (
                f"{type(original_error).__name__}: {original_error}"
            )

        hint = None
        if status_code == 402:
            hint = "Not enough credits for this generation"
        elif status_code in (401, 403):
            hint = "Check SCREENWRIGHT_API_KEY"

        super().__init__(message=message, hint=hint, details=details or None)


class GenerationCancelledError(ScreenwrightError):
    """The generation was cancelled before its result could be applied."""

    def __init__(self, message: str = "Generation cancelled") -> None:
        """Initialize cancellation error."""
        super().__init__(message=message)


def check_config_keys(config: dict[str, Any]) -> None:
    """Check for common configuration mistakes.

    Args:
        config: Configuration dictionary to validate

    Raises:
        ConfigurationError: With hints about correct configuration keys
    """
    wrong_keys = {
        "model": "default_model",
        "api_url": "api_base_url",
        "selected_model": "agent_models",
    }

    for wrong, correct in wrong_keys.items():
        if wrong in config:
            raise ConfigurationError(
                message=f"Invalid configuration key '{wrong}'",
                hint=f"Use '{correct}' instead of '{wrong}'",
                details={
                    "found_keys": list(config.keys()),
                    "invalid_key": wrong,
                    "correct_key": correct,
                },
            )
