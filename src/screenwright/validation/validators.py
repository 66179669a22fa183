"""Validate structured agent responses before they reach the editor.

The shape of each response is checked with ``jsonschema`` against the
schema requested from the model. The checks a schema cannot express, such
as lines copied from before the cursor, follow once the shape is right.

Every validator is total: malformed input produces a failed
``ContentValidation`` listing what was wrong, never an exception.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any

from jsonschema import Draft202012Validator, ValidationError

from screenwright.config import get_logger
from screenwright.validation.json_extract import parse_response_object
from screenwright.validation.models import ContentValidation
from screenwright.validation.schemas import (
    DIALOGUE_SCHEMA,
    DIRECTOR_SCENES_SCHEMA,
    HEADING_PATTERN,
    NON_BLANK_PATTERN,
    REWRITE_SCHEMA,
    SCREENPLAY_CONTENT_SCHEMA,
    director_content_schema,
)

logger = get_logger(__name__)

_SCENE_HEADING = re.compile(r"^(int\.|ext\.|i/e\.)", re.I)
_FORBIDDEN_HEADING = re.compile(r"^(INT\.|EXT\.|I/E\.|#\s*INT\.|#\s*EXT\.)", re.I)
_HEADING_SPLIT = re.compile(r"\s+-\s+")
_WHITESPACE = re.compile(r"\s+")
_REQUIRED_PROPERTY = re.compile(r"^'(.+)' is a required property$")

DUPLICATE_MIN_LENGTH = 20
DIRECTOR_LINES_PER_SCENE = 50

_SCREENPLAY_VALIDATOR = Draft202012Validator(SCREENPLAY_CONTENT_SCHEMA)
_SCENES_VALIDATOR = Draft202012Validator(DIRECTOR_SCENES_SCHEMA)
_DIALOGUE_VALIDATOR = Draft202012Validator(DIALOGUE_SCHEMA)
_REWRITE_VALIDATOR = Draft202012Validator(REWRITE_SCHEMA)

_TYPE_NAMES = {
    "array": "an array",
    "integer": "an integer",
    "number": "a number",
    "object": "an object",
    "string": "a string",
}
_ITEM_NOUNS = {"scenes": "scene", "dialogue": "exchange"}
_ITEM_LABELS = {"scenes": "scene {}", "dialogue": "dialogue exchange {}"}
_PATTERN_MESSAGES = {
    HEADING_PATTERN: "must start with INT./EXT./I/E.",
    NON_BLANK_PATTERN: "cannot be empty",
}


def _count(number: int, noun: str) -> str:
    return f"{number} {noun}" if number == 1 else f"{number} {noun}s"


def _quoted(names: Iterable[str]) -> str:
    return ", ".join(f'"{name}"' for name in names)


def _locate(path: list[Any]) -> tuple[str, str | None]:
    """Split an instance path into a readable subject and a trailing field.

    ``["scenes", 0, "content", 2]`` becomes ``("Scene 1, content item 2",
    None)`` and ``["dialogue", 1, "line"]`` becomes ``("Dialogue exchange
    2", "line")``.
    """
    parts: list[str] = []
    field: str | None = None
    for key in path:
        if isinstance(key, int) and field is not None:
            label = _ITEM_LABELS.get(field)
            parts.append(label.format(key + 1) if label else f"{field} item {key}")
            field = None
        else:
            field = str(key)
    subject = ", ".join(parts)
    return subject[:1].upper() + subject[1:], field


def describe_schema_error(error: ValidationError) -> str:
    """Turn a ``jsonschema`` error into the message shown to the user."""
    subject, field = _locate(list(error.absolute_path))
    keyword = error.validator

    if keyword == "required":
        match = _REQUIRED_PROPERTY.match(error.message)
        name = match.group(1) if match else error.message
        message = f'Missing required field: "{name}"'
        return f"{subject}: {message}" if subject else message
    if keyword == "additionalProperties":
        allowed = error.schema.get("properties", {})
        unexpected = sorted(key for key in error.instance if key not in allowed)
        message = f"Unexpected field(s): {_quoted(unexpected)}"
        return f"{subject}: {message}" if subject else message

    noun = _ITEM_NOUNS.get(field or "", "item")
    if keyword == "type":
        type_name = error.validator_value
        predicate = f"must be {_TYPE_NAMES.get(type_name, type_name)}"
    elif keyword == "minItems":
        predicate = f"must have at least {_count(error.validator_value, noun)}"
    elif keyword == "maxItems":
        predicate = (
            f"must have at most {_count(error.validator_value, noun)} "
            f"(got {len(error.instance)})"
        )
    elif keyword == "minLength":
        predicate = "cannot be empty"
    elif keyword == "pattern":
        predicate = _PATTERN_MESSAGES.get(
            error.validator_value, f"must match {error.validator_value}"
        )
    else:
        predicate = error.message

    if field is None:
        return f"{subject} {predicate}"
    message = f'Field "{field}" {predicate}'
    return f"{subject}: {message}" if subject else message


def schema_errors(validator: Draft202012Validator, instance: Any) -> list[str]:
    """Every schema violation of ``instance``, in document order."""
    errors = sorted(
        validator.iter_errors(instance), key=lambda e: list(e.absolute_path)
    )
    return [describe_schema_error(error) for error in errors]


def _normalize(line: str) -> str:
    return _WHITESPACE.sub(" ", line.strip().lower())


def _context_lines(context_before: str | None) -> list[str]:
    if not context_before:
        return []
    return [
        _normalize(line) for line in context_before.split("\n") if line.strip()
    ]


def _is_duplicate_heading(heading: str, context: list[str]) -> bool:
    """Compare headings by location so a repeated scene is caught."""
    for line in context:
        if _SCENE_HEADING.match(line):
            heading_parts = _HEADING_SPLIT.split(heading)
            context_parts = _HEADING_SPLIT.split(line)
            if len(heading_parts) >= 2 and len(context_parts) >= 2:
                if heading_parts[0] == context_parts[0]:
                    return True
                continue
        if line == heading:
            return True
    return False


def _check_line_count(parsed: dict[str, Any], errors: list[str]) -> None:
    line_count = parsed.get("lineCount")
    if line_count is not None and line_count != len(parsed["content"]):
        errors.append(
            f'Field "lineCount" ({line_count}) does not match '
            f"content.length ({len(parsed['content'])})"
        )


def _check_duplicates(
    lines: list[str],
    context: list[str],
    errors: list[str],
    headings_by_location: bool = False,
) -> None:
    for index, line in enumerate(lines):
        normalized = _normalize(line)
        if headings_by_location and _SCENE_HEADING.match(normalized):
            if _is_duplicate_heading(normalized, context):
                errors.append(
                    f"Content item {index} is a duplicate scene heading "
                    "from content before cursor"
                )
        elif len(normalized) >= DUPLICATE_MIN_LENGTH and normalized in context:
            errors.append(
                f"Content item {index} is a duplicate of content before cursor"
            )


def _content_result(
    parsed: dict[str, Any], errors: list[str]
) -> ContentValidation:
    if errors:
        return ContentValidation.failure(*errors, raw_json=parsed)
    joined = "\n".join(parsed["content"]).strip()
    return ContentValidation(valid=True, content=joined, raw_json=parsed)


def validate_screenplay_content(
    response: Any, context_before: str | None = None
) -> ContentValidation:
    """Validate a short continuation: ``{"content": [...], "lineCount": n}``.

    Args:
        response: Raw model response (JSON, possibly fenced)
        context_before: Editor text before the cursor, used to reject lines
            the model copied instead of continuing

    Returns:
        Validation result; ``content`` joins the lines with newlines
    """
    parsed, failure = parse_response_object(response)
    if parsed is None:
        return failure or ContentValidation.failure()

    errors = schema_errors(_SCREENPLAY_VALIDATOR, parsed)
    if errors:
        return ContentValidation.failure(*errors, raw_json=parsed)

    for index, line in enumerate(parsed["content"]):
        if line.strip() and _FORBIDDEN_HEADING.match(line.strip()):
            errors.append(f"Content item {index} contains a scene heading (forbidden)")
    _check_line_count(parsed, errors)
    _check_duplicates(parsed["content"], _context_lines(context_before), errors)
    return _content_result(parsed, errors)


def validate_screenwriter_content(
    response: Any, context_before: str | None = None
) -> ContentValidation:
    """Validate a screenwriter continuation (1-3 lines, no scene headings)."""
    return validate_screenplay_content(response, context_before)


def director_max_lines(generation_length: str, scene_count: int) -> int:
    """Line cap for a director response of the given length."""
    if generation_length == "short":
        return 15
    if generation_length == "multiple":
        return scene_count * DIRECTOR_LINES_PER_SCENE
    return DIRECTOR_LINES_PER_SCENE


def validate_director_content(
    response: Any,
    context_before: str | None = None,
    generation_length: str = "full",
    scene_count: int = 3,
) -> ContentValidation:
    """Validate a director response: a longer ``content`` array.

    Scene headings are allowed (multiple-scene mode) but may not repeat a
    location already present before the cursor.
    """
    parsed, failure = parse_response_object(response)
    if parsed is None:
        return failure or ContentValidation.failure()

    schema = director_content_schema(director_max_lines(generation_length, scene_count))
    errors = schema_errors(Draft202012Validator(schema), parsed)
    if errors:
        return ContentValidation.failure(*errors, raw_json=parsed)

    _check_line_count(parsed, errors)
    _check_duplicates(
        parsed["content"],
        _context_lines(context_before),
        errors,
        headings_by_location=True,
    )
    return _content_result(parsed, errors)


def _check_scene_lines(number: int, lines: list[str], errors: list[str]) -> None:
    for line_number, line in enumerate(lines, start=1):
        stripped = line.strip()
        if stripped.startswith("="):
            errors.append(
                f"Scene {number}, line {line_number}: Synopses (lines starting "
                "with =) are not allowed in scene content"
            )
        if stripped.startswith("#"):
            errors.append(
                f"Scene {number}, line {line_number}: Act breaks (lines "
                "starting with #) are not allowed in scene content"
            )


def validate_director_modal_content(
    response: Any,
    context_before: str | None = None,
    expected_scene_count: int = 1,
) -> ContentValidation:
    """Validate a director modal response: ``{"scenes": [{heading, content}]}``.

    Valid scenes are rendered as heading, blank line, scene lines, with a
    blank line between scenes.
    """
    parsed, failure = parse_response_object(response)
    if parsed is None:
        return failure or ContentValidation.failure()

    errors = schema_errors(_SCENES_VALIDATOR, parsed)
    if errors:
        return ContentValidation.failure(*errors, raw_json=parsed)

    scenes: list[dict[str, Any]] = parsed["scenes"]
    if len(scenes) != expected_scene_count:
        errors.append(f"Expected {expected_scene_count} scene(s), got {len(scenes)}")

    context = _context_lines(context_before)
    for number, scene in enumerate(scenes, start=1):
        _check_scene_lines(number, scene["content"], errors)
        if context and _is_duplicate_heading(_normalize(scene["heading"]), context):
            errors.append(
                f"Scene {number}: Scene heading is a duplicate of content "
                "before cursor"
            )

    total_lines = parsed.get("totalLines")
    actual = sum(len(scene["content"]) for scene in scenes)
    # Metadata only, never blocks insertion
    if total_lines is not None and total_lines != actual:
        logger.warning(
            "Director totalLines does not match scene content",
            total_lines=total_lines,
            actual_lines=actual,
        )

    if errors:
        return ContentValidation.failure(*errors, raw_json=parsed)

    rendered = []
    for scene in scenes:
        body = "\n".join(scene["content"]).strip()
        rendered.append(f"{scene['heading'].strip()}\n\n{body}")
    return ContentValidation(valid=True, content="\n\n".join(rendered), raw_json=parsed)


def validate_dialogue_content(response: Any) -> ContentValidation:
    """Validate a dialogue response and render it as Fountain.

    Each exchange becomes ``CHARACTER``, an optional ``(subtext)``
    parenthetical and the line, with a blank line between exchanges.
    """
    parsed, failure = parse_response_object(response)
    if parsed is None:
        return failure or ContentValidation.failure()

    errors = schema_errors(_DIALOGUE_VALIDATOR, parsed)
    if errors:
        return ContentValidation.failure(*errors, raw_json=parsed)

    dialogue: list[dict[str, Any]] = parsed["dialogue"]
    for number, exchange in enumerate(dialogue, start=1):
        character = exchange["character"]
        if character != character.upper():
            errors.append(
                f"Dialogue exchange {number}: Character name must be in ALL CAPS"
            )
    if errors:
        return ContentValidation.failure(*errors, raw_json=parsed)

    exchanges = []
    for exchange in dialogue:
        block = exchange["character"]
        subtext = exchange.get("subtext", "").strip()
        if subtext:
            block += f"\n({subtext})"
        block += f"\n{exchange['line']}"
        exchanges.append(block)
    return ContentValidation(
        valid=True, content="\n\n".join(exchanges), raw_json=parsed
    )


def validate_rewrite_content(response: Any) -> ContentValidation:
    """Validate a rewrite response: ``{"rewrittenText": "..."}``.

    Only leading whitespace is trimmed; trailing newlines are kept so the
    rewrite blends with the text after the selection.
    """
    parsed, failure = parse_response_object(response)
    if parsed is None:
        return failure or ContentValidation.failure()

    errors = schema_errors(_REWRITE_VALIDATOR, parsed)
    if errors:
        return ContentValidation.failure(*errors, raw_json=parsed)
    return ContentValidation(
        valid=True, content=parsed["rewrittenText"].lstrip(), raw_json=parsed
    )


def build_retry_prompt(original_prompt: str, errors: list[str]) -> str:
    """Restate a prompt with the validation errors of the previous attempt."""
    listed = "\n".join(f"- {error}" for error in errors)
    return (
        f"{original_prompt}\n\n"
        "PREVIOUS ATTEMPT FAILED VALIDATION:\n"
        f"{listed}\n\n"
        "Please respond with ONLY valid JSON. No explanations, no markdown "
        "formatting, just the raw JSON object."
    )
