"""JSON schemas for agent responses.

The same schema is requested from models that support structured outputs
and checked against every response before it is used.
"""

from __future__ import annotations

import copy
from typing import Any

HEADING_PATTERN = "^(INT\\.|EXT\\.|I/E\\.)"
NON_BLANK_PATTERN = "\\S"

# lineCount is optional; models without structured outputs often omit it
SCREENPLAY_CONTENT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "content": {
            "type": "array",
            "items": {"type": "string"},
            "minItems": 1,
            "maxItems": 10,
        },
        "lineCount": {"type": "integer"},
    },
    "required": ["content"],
    "additionalProperties": False,
}

DIRECTOR_SCENES_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "scenes": {
            "type": "array",
            "minItems": 1,
            "maxItems": 3,
            "items": {
                "type": "object",
                "properties": {
                    "heading": {"type": "string", "pattern": HEADING_PATTERN},
                    "content": {
                        "type": "array",
                        "items": {"type": "string"},
                        "minItems": 5,
                        "maxItems": 50,
                    },
                },
                "required": ["heading", "content"],
                "additionalProperties": False,
            },
        },
        "totalLines": {"type": "integer"},
    },
    "required": ["scenes"],
    "additionalProperties": False,
}

DIALOGUE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "dialogue": {
            "type": "array",
            "minItems": 1,
            "items": {
                "type": "object",
                "properties": {
                    "character": {"type": "string", "minLength": 1},
                    "line": {"type": "string", "pattern": NON_BLANK_PATTERN},
                    "subtext": {"type": "string"},
                },
                "required": ["character", "line"],
                "additionalProperties": False,
            },
        },
        "breakdown": {"type": "string"},
    },
    "required": ["dialogue"],
    "additionalProperties": False,
}

REWRITE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "rewrittenText": {"type": "string", "pattern": NON_BLANK_PATTERN}
    },
    "required": ["rewrittenText"],
    "additionalProperties": False,
}


def director_content_schema(max_lines: int) -> dict[str, Any]:
    """Schema of a director ``content`` response capped at ``max_lines``."""
    schema = copy.deepcopy(SCREENPLAY_CONTENT_SCHEMA)
    schema["properties"]["content"]["maxItems"] = max_lines
    return schema

_STRUCTURED_MARKERS = (
    "claude-3-5",
    "claude-sonnet-4",
    "claude-opus-4",
    "claude-3-opus",
    "claude-3-sonnet",
    "gpt-4o",
    "gpt-5",
    "gpt-4-turbo",
    "gemini-2.0",
    "gemini-2.5",
    "gemini-3",
)
_STRUCTURED_PREFIXES = ("o1", "o3")


def supports_structured_outputs(model_id: str | None) -> bool:
    """Check whether a model accepts a JSON schema ``response_format``.

    Haiku models are excluded; they follow JSON instructions in the prompt
    instead.
    """
    if not model_id:
        return False
    model = model_id.lower()
    if "haiku" in model:
        return False
    return any(marker in model for marker in _STRUCTURED_MARKERS) or model.startswith(
        _STRUCTURED_PREFIXES
    )


def response_format_for(schema: dict[str, Any], name: str) -> dict[str, Any]:
    """Wrap a schema in an OpenAI-style ``json_schema`` response format."""
    return {
        "type": "json_schema",
        "json_schema": {"name": name, "strict": True, "schema": schema},
    }
