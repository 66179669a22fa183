"""Validation of structured agent responses."""

from __future__ import annotations

from .json_extract import extract_json_text, parse_response_object
from .models import ContentValidation
from .schemas import supports_structured_outputs
from .validators import (
    build_retry_prompt,
    validate_dialogue_content,
    validate_director_content,
    validate_director_modal_content,
    validate_rewrite_content,
    validate_screenplay_content,
    validate_screenwriter_content,
)

__all__ = [
    "ContentValidation",
    "build_retry_prompt",
    "extract_json_text",
    "parse_response_object",
    "supports_structured_outputs",
    "validate_dialogue_content",
    "validate_director_content",
    "validate_director_modal_content",
    "validate_rewrite_content",
    "validate_screenplay_content",
    "validate_screenwriter_content",
]
