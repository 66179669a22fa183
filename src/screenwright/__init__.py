"""Screenwright: Fountain screenplay tooling for AI writing agents.

Formats model output into correctly spaced Fountain, validates structured
agent responses, and runs cancellable streamed generations for the
screenwriter, dialogue, director and rewrite agents.
"""

from .config import ScreenwrightSettings, get_logger, get_settings
from .exceptions import (
    ConfigurationError,
    GenerationCancelledError,
    GenerationError,
    ScreenwrightError,
)
from .fountain import (
    LineRole,
    clean_fountain_output,
    format_fountain_spacing,
    normalize_screenplay_text,
)

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "GenerationCancelledError",
    "GenerationError",
    "LineRole",
    "ScreenwrightError",
    "ScreenwrightSettings",
    "__version__",
    "clean_fountain_output",
    "format_fountain_spacing",
    "get_logger",
    "get_settings",
    "normalize_screenplay_text",
]
