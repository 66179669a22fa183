"""Fountain screenplay text processing for AI-generated content."""

from __future__ import annotations

from .classifier import classify_lines, expand_lines
from .cleaner import clean_fountain_output
from .elements import (
    LineRole,
    TaggedLine,
    is_character_name,
    is_parenthetical,
    is_scene_heading,
)
from .insertion import prepare_insertion
from .normalizer import normalize_screenplay_text
from .scene_context import SceneContext, detect_current_scene
from .spacing import collapse_blank_lines, format_fountain_spacing

__all__ = [
    "LineRole",
    "SceneContext",
    "TaggedLine",
    "classify_lines",
    "clean_fountain_output",
    "collapse_blank_lines",
    "detect_current_scene",
    "expand_lines",
    "format_fountain_spacing",
    "is_character_name",
    "is_parenthetical",
    "is_scene_heading",
    "normalize_screenplay_text",
    "prepare_insertion",
]
