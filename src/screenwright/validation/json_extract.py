"""Locate and parse the JSON object inside a model response."""

from __future__ import annotations

import json
import re
from typing import Any

from screenwright.validation.models import ContentValidation

_JSON_FENCE = re.compile(r"```json\s*([\s\S]*?)\s*```", re.I)
_ANY_FENCE = re.compile(r"```\s*([\s\S]*?)\s*```")
_OUTER_OBJECT = re.compile(r"\{[\s\S]*\}")


def extract_json_text(response: str) -> str:
    """Narrow a response down to the text most likely to be its JSON object.

    Structured-output models return bare JSON. Other models wrap it in a
    markdown fence or surround it with explanations.
    """
    candidate = response.strip()

    fenced = _JSON_FENCE.search(candidate)
    if fenced:
        candidate = fenced.group(1).strip()
    else:
        generic = _ANY_FENCE.search(candidate)
        if generic and generic.group(1).strip().startswith("{"):
            candidate = generic.group(1).strip()

    outer = _OUTER_OBJECT.search(candidate)
    if outer:
        candidate = outer.group(0)
    return candidate


def parse_response_object(
    response: Any,
) -> tuple[dict[str, Any] | None, ContentValidation | None]:
    """Parse a response into a JSON object.

    Returns:
        ``(parsed, None)`` on success, ``(None, failure)`` otherwise
    """
    if not response or not isinstance(response, str):
        return None, ContentValidation.failure("Response is empty or not a string")

    try:
        parsed = json.loads(response.strip())
    except json.JSONDecodeError:
        candidate = extract_json_text(response)
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError as e:
            return None, ContentValidation.failure(
                f"JSON parsing failed: {e.msg}",
                f"Attempted to parse: {candidate[:200]}...",
            )

    if not isinstance(parsed, dict):
        return None, ContentValidation.failure(
            "Response must be a JSON object, not an array or primitive",
            raw_json=parsed,
        )
    return parsed, None
