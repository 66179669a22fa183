"""Extract scene context around the editor cursor for agent prompts."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Any

_SCENE_START = re.compile(r"^(INT\.|EXT\.|INT/EXT\.|I/E\.)\s+", re.I)
_CHARACTER_LINE = re.compile(r"^([A-Z][A-Z \t]+)$", re.M)
_NON_CHARACTER_PREFIXES = (
    "INT",
    "EXT",
    "FADE",
    "CUT",
    "DISSOLVE",
    "TO",
    "BLACK",
    "CONTINUED",
    "THE END",
)

LINES_PER_PAGE = 55
CONTEXT_BEFORE_CHARS = 150
CONTEXT_AFTER_CHARS = 200
SELECTION_CONTEXT_CHARS = 100


@dataclass
class SceneContext:
    """The scene surrounding a cursor position."""

    heading: str
    act: int
    characters: list[str] = field(default_factory=list)
    content: str = ""
    context_before_cursor: str = ""
    context_after_cursor: str = ""
    start_line: int = 0
    end_line: int = 0
    current_line: int = 0
    page_number: int = 0
    total_pages: int = 0

    def to_request_metadata(self) -> dict[str, Any]:
        """Scene metadata sent alongside a generation request."""
        return {
            "heading": self.heading,
            "act": self.act,
            "characters": self.characters,
            "pageNumber": self.page_number,
        }


@dataclass
class SelectionContext:
    """A selected span with a little text on each side."""

    selected_text: str
    before_context: str
    after_context: str
    start: int
    end: int


def extract_characters(scene_content: str) -> list[str]:
    """Collect unique character cues from a scene, in order of appearance."""
    seen: dict[str, None] = {}
    for match in _CHARACTER_LINE.finditer(scene_content):
        name = match.group(1).strip()
        if not 2 <= len(name) <= 30:
            continue
        if name.startswith(_NON_CHARACTER_PREFIXES):
            continue
        seen.setdefault(name, None)
    return list(seen)


def detect_act(current_page: int, total_pages: int) -> int:
    """Estimate the act from the relative page position (25/50/25 split)."""
    if total_pages <= 0:
        return 1
    position = current_page / total_pages
    if position < 0.25:
        return 1
    if position < 0.75:
        return 2
    return 3


def _line_at(lines: list[str], cursor: int) -> int:
    offset = 0
    for i, line in enumerate(lines):
        offset += len(line) + 1
        if offset >= cursor:
            return i
    return 0


def detect_current_scene(content: str, cursor: int) -> SceneContext | None:
    """Find the scene containing the cursor.

    Args:
        content: Full screenplay text
        cursor: Character offset of the cursor

    Returns:
        Scene context, or None when there is no content
    """
    if not content:
        return None

    lines = content.split("\n")
    current_line = _line_at(lines, cursor)

    heading: str | None = None
    start_line = 0
    for i in range(current_line, -1, -1):
        if _SCENE_START.match(lines[i]):
            heading = lines[i].strip()
            start_line = i
            break

    end_line = len(lines) - 1
    for i in range(current_line + 1, len(lines)):
        if _SCENE_START.match(lines[i]):
            end_line = i - 1
            break

    scene_content = "\n".join(lines[start_line : end_line + 1])
    scene_start = sum(len(line) + 1 for line in lines[:start_line])
    cursor_in_scene = cursor - scene_start

    before = ""
    if cursor_in_scene > 0:
        window = scene_content[
            max(0, cursor_in_scene - CONTEXT_BEFORE_CHARS) : cursor_in_scene
        ].strip()
        # The model must not see (and then repeat) the scene heading
        before = "\n".join(
            line for line in window.split("\n") if not _SCENE_START.match(line.strip())
        ).strip()

    after = ""
    if 0 <= cursor_in_scene < len(scene_content):
        after = scene_content[
            cursor_in_scene : cursor_in_scene + CONTEXT_AFTER_CHARS
        ].strip()

    total_pages = math.ceil(len(lines) / LINES_PER_PAGE)
    page_number = math.ceil(start_line / LINES_PER_PAGE)

    return SceneContext(
        heading=heading or "Unknown Scene",
        act=detect_act(page_number, total_pages),
        characters=extract_characters(scene_content),
        content=scene_content,
        context_before_cursor=before,
        context_after_cursor=after,
        start_line=start_line,
        end_line=end_line,
        current_line=current_line,
        page_number=page_number,
        total_pages=total_pages,
    )


def extract_selection_context(
    content: str, start: int, end: int
) -> SelectionContext | None:
    """Return the selected text with up to 100 characters on each side."""
    if not content:
        return None
    return SelectionContext(
        selected_text=content[start:end],
        before_context=content[max(0, start - SELECTION_CONTEXT_CHARS) : start],
        after_context=content[end : end + SELECTION_CONTEXT_CHARS],
        start=start,
        end=end,
    )
