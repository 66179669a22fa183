"""Tests for the Screenwright exception hierarchy."""

import json

import pytest

from screenwright.cli.formatters.json_formatter import JsonFormatter
from screenwright.exceptions import (
    ConfigurationError,
    GenerationCancelledError,
    GenerationError,
    ScreenwrightError,
    check_config_keys,
)


class TestScreenwrightError:
    """Test the base error formatting."""

    def test_message_only(self):
        """Test a bare message."""
        assert str(ScreenwrightError("Broken")) == "Error: Broken"

    def test_hint_and_details(self):
        """Test hints and details are appended."""
        error = ScreenwrightError("Broken", hint="Fix it", details={"file": "a.yaml"})
        assert str(error) == "Error: Broken\nHint: Fix it\nDetails:\n  file: a.yaml"


class TestGenerationError:
    """Test transport error hints."""

    @pytest.mark.parametrize(
        ("status", "hint"),
        [
            (402, "Not enough credits for this generation"),
            (401, "Check SCREENWRIGHT_API_KEY"),
            (403, "Check SCREENWRIGHT_API_KEY"),
            (500, None),
        ],
    )
    def test_status_hints(self, status, hint):
        """Test hints per HTTP status."""
        error = GenerationError("Failed", status_code=status)
        assert error.hint == hint
        assert error.details == {"status_code": status}

    def test_original_error(self):
        """Test the wrapped exception is described in the details."""
        error = GenerationError(original_error=TimeoutError("slow"))
        assert error.message == "Failed to generate content"
        assert error.details == {"original_error": "TimeoutError: slow"}


def test_cancelled_error():
    """Test the cancellation message."""
    assert GenerationCancelledError().message == "Generation cancelled"


@pytest.mark.parametrize(
    ("key", "correct"),
    [("model", "default_model"), ("api_url", "api_base_url")],
)
def test_check_config_keys(key, correct):
    """Test common mistakes are caught with a hint."""
    with pytest.raises(ConfigurationError) as exc_info:
        check_config_keys({key: "x"})
    assert exc_info.value.hint == f"Use '{correct}' instead of '{key}'"


def test_check_config_keys_valid():
    """Test valid keys pass."""
    check_config_keys({"default_model": "gpt-4o", "agent_models": {}})


def test_json_error_response():
    """Test JSON error output separates message and hint."""
    payload = json.loads(
        JsonFormatter().format_error_response(GenerationError("No credits", 402))
    )
    assert payload == {
        "success": False,
        "code": 1,
        "error": "No credits",
        "hint": "Not enough credits for this generation",
    }
