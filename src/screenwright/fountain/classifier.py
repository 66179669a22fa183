"""Classify AI-generated screenplay lines into Fountain roles."""

from __future__ import annotations

from collections.abc import Iterable

from screenwright.fountain.elements import (
    LineRole,
    TaggedLine,
    is_character_name,
    is_parenthetical,
    is_scene_heading,
)

# Roles after which a plain line is spoken text
_SPEAKER_ROLES = frozenset({LineRole.CHARACTER, LineRole.PARENTHETICAL})


def expand_lines(lines: Iterable[object]) -> list[str]:
    """Split entries with embedded newlines into separate lines.

    Models sometimes return several screenplay lines in a single array slot.
    Every piece is stripped; blank pieces stay as blank entries so that the
    spacing pass can see them. Entries that are not strings are dropped.

    Args:
        lines: Raw entries of one AI response

    Returns:
        One stripped string per screenplay line
    """
    expanded: list[str] = []
    for item in lines:
        if not isinstance(item, str):
            continue
        if "\n" in item:
            expanded.extend(piece.strip() for piece in item.split("\n"))
        else:
            expanded.append(item.strip())
    return expanded


def classify_line(line: str, previous: LineRole | None) -> LineRole:
    """Infer the role of one stripped line given the role before it."""
    if not line:
        return LineRole.BLANK
    if is_scene_heading(line):
        return LineRole.SCENE_HEADING
    if is_character_name(line):
        return LineRole.CHARACTER
    if is_parenthetical(line):
        return LineRole.PARENTHETICAL
    if previous in _SPEAKER_ROLES:
        return LineRole.DIALOGUE
    return LineRole.ACTION


def classify_lines(lines: Iterable[str]) -> list[TaggedLine]:
    """Tag every line with its role in a single left-to-right pass."""
    tagged: list[TaggedLine] = []
    previous: LineRole | None = None
    for line in lines:
        text = line.strip()
        role = classify_line(text, previous)
        tagged.append(TaggedLine(text=text, role=role))
        previous = role
    return tagged
