"""Fountain screenplay line roles and the predicates that recognise them."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

SCENE_HEADING_PATTERN = re.compile(r"^(INT\./EXT\.|INT/EXT\.|INT\.|EXT\.|I/E\.)", re.I)
CHARACTER_PATTERN = re.compile(r"^[A-Z][A-Z\s#0-9']+$")
PARENTHETICAL_PATTERN = re.compile(r"^\(.+\)$")
_PARENTHETICAL_CONTENT = re.compile(r"\([^)]+\)")
_LOWERCASE = re.compile(r"[a-z]")

CHARACTER_MIN_LENGTH = 2
CHARACTER_MAX_LENGTH = 50


class LineRole(str, Enum):
    """Role of a single screenplay line."""

    SCENE_HEADING = "scene_heading"
    CHARACTER = "character"
    PARENTHETICAL = "parenthetical"
    DIALOGUE = "dialogue"
    ACTION = "action"
    TRANSITION = "transition"
    BLANK = "blank"


@dataclass(frozen=True)
class TaggedLine:
    """A screenplay line paired with its inferred role."""

    text: str
    role: LineRole

    @property
    def is_blank(self) -> bool:
        """Whether the line is an intentional blank line."""
        return self.role is LineRole.BLANK


def is_scene_heading(line: str) -> bool:
    """Check whether a line starts a scene (INT./EXT./I/E.)."""
    return bool(SCENE_HEADING_PATTERN.match(line.strip()))


def is_character_name(line: str) -> bool:
    """Check whether a line is a character cue.

    A cue is entirely upper case, 2-50 characters long, is not a scene
    heading and carries no parenthetical extension. "SARAH CHEN (30s)" is
    therefore treated as action.

    Args:
        line: A single line of screenplay text

    Returns:
        True if the line looks like a character cue
    """
    line = line.strip()
    return (
        bool(CHARACTER_PATTERN.match(line))
        and CHARACTER_MIN_LENGTH <= len(line) <= CHARACTER_MAX_LENGTH
        and not is_scene_heading(line)
        and not _LOWERCASE.search(line)
        and not _PARENTHETICAL_CONTENT.search(line)
    )


def is_parenthetical(line: str) -> bool:
    """Check whether a line is fully wrapped in parentheses."""
    return bool(PARENTHETICAL_PATTERN.match(line.strip()))
