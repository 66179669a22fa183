"""Result models for AI response validation."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ContentValidation(BaseModel):
    """Outcome of validating one structured AI response.

    ``content`` is only populated when ``valid`` is True. ``raw_json`` holds
    the parsed object whenever parsing succeeded, even if the schema checks
    failed, so callers can recover the original content array.
    """

    valid: bool
    content: str = ""
    errors: list[str] = Field(default_factory=list)
    raw_json: Any = None

    @property
    def first_error(self) -> str:
        """The error shown to the user."""
        return self.errors[0] if self.errors else "Unknown error"

    @property
    def content_lines(self) -> list[Any] | None:
        """The raw ``content`` array of the response, when there is one."""
        if isinstance(self.raw_json, dict):
            lines = self.raw_json.get("content")
            if isinstance(lines, list):
                return lines
        return None

    @classmethod
    def failure(cls, *errors: str, raw_json: Any = None) -> ContentValidation:
        """Build a failed validation result."""
        return cls(valid=False, errors=list(errors), raw_json=raw_json)
