"""Tests for structured output schemas."""

import pytest

from screenwright.validation.schemas import (
    REWRITE_SCHEMA,
    response_format_for,
    supports_structured_outputs,
)


@pytest.mark.parametrize(
    "model_id",
    [
        "claude-sonnet-4-5",
        "claude-opus-4-1",
        "claude-3-5-sonnet-20241022",
        "gpt-4o-mini",
        "gpt-5",
        "gemini-2.5-pro",
        "o3-mini",
    ],
)
def test_structured_models(model_id):
    """Test models that accept a JSON schema."""
    assert supports_structured_outputs(model_id)


@pytest.mark.parametrize(
    "model_id",
    ["claude-3-5-haiku-20241022", "claude-haiku-4-5", "llama-3-70b", "", None],
)
def test_unstructured_models(model_id):
    """Test haiku, unknown and missing models fall back to prompt instructions."""
    assert not supports_structured_outputs(model_id)


def test_response_format():
    """Test the json_schema response format wrapper."""
    wrapped = response_format_for(REWRITE_SCHEMA, "rewrite_response")
    assert wrapped == {
        "type": "json_schema",
        "json_schema": {
            "name": "rewrite_response",
            "strict": True,
            "schema": REWRITE_SCHEMA,
        },
    }
