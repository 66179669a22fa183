"""Strip markdown and assistant chatter from free-text model output."""

from __future__ import annotations

import re

from screenwright.fountain.elements import is_scene_heading
from screenwright.fountain.spacing import collapse_blank_lines

_MARKDOWN_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"\*\*([^*]+)\*\*"), r"\1"),
    (re.compile(r"__([^_]+)__"), r"\1"),
    (re.compile(r"\b\*([^*\n]+)\*\b"), r"\1"),
    (re.compile(r"\b_([^_\n]+)_\b"), r"\1"),
    (re.compile(r"^---+$", re.M), ""),
    (re.compile(r"\[([^\]]+)\]\([^)]+\)"), r"\1"),
    (re.compile(r"```[a-z]*\n"), ""),
    (re.compile(r"```"), ""),
]

# Everything from the first match onwards is commentary, not screenplay
_CHATTER_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"(SCREENWRITING\s+)?NOTE:.*$", re.I | re.S),
    re.compile(r"^#?\s*REVISION\s*$", re.I | re.M),
    re.compile(r"ALTERNATIVE OPTIONS?:.*$", re.I | re.S),
    re.compile(r"Option \d+[:\-].*$", re.I | re.M),
    re.compile(r"Which direction.*$", re.I | re.S),
    re.compile(r"What comes next\?.*$", re.I | re.S),
    re.compile(r"What happens next\?.*$", re.I | re.S),
    re.compile(r"Would you like.*$", re.I | re.S),
    re.compile(
        r"Here are (some|a few) (suggestions|options|ideas|ways|things).*$",
        re.I | re.S,
    ),
    re.compile(r"WRITING NOTE.*$", re.I | re.S),
    re.compile(r"Recommendation:.*$", re.I | re.S),
    re.compile(r"Enhanced options?:.*$", re.I | re.S),
]

_LEAD_IN = re.compile(
    r"^(Here's|Here is|I'll|I will|Let me|Here are|I've|I have|Sure|Okay|OK)\b"
    r"[^\n]*:\s*\n",
    re.I,
)
_REVISED_HEADER = re.compile(r"^#+\s+(REVISED|REVISION)", re.I)


def strip_markdown(text: str) -> str:
    """Remove markdown emphasis, rules, links and code fences."""
    for pattern, replacement in _MARKDOWN_RULES:
        text = pattern.sub(replacement, text)
    return text


def truncate_chatter(text: str) -> str:
    """Cut the text at the first assistant commentary marker."""
    earliest = len(text)
    for pattern in _CHATTER_PATTERNS:
        match = pattern.search(text)
        if match:
            earliest = min(earliest, match.start())
    return text[:earliest].strip()


def clean_fountain_output(text: str) -> str:
    """Reduce a free-text model reply to its screenplay content.

    Args:
        text: Raw model output

    Returns:
        Screenplay text with markdown, commentary, scene headings and
        revision headers removed
    """
    if not text:
        return text

    cleaned = strip_markdown(text)
    cleaned = _LEAD_IN.sub("", cleaned.lstrip())
    cleaned = truncate_chatter(cleaned)

    kept: list[str] = []
    for line in cleaned.split("\n"):
        stripped = line.strip()
        if not kept and not stripped:
            continue
        if is_scene_heading(stripped) or _REVISED_HEADER.match(stripped):
            continue
        kept.append(line.rstrip())

    return collapse_blank_lines("\n".join(kept)).strip()
