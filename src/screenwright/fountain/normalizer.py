"""Normalize badly formatted screenplay text (imports, pasted drafts).

Handles mis-decoded characters, soft-wrapped lines and missing Fountain
spacing while keeping the line structure of the original text.
"""

from __future__ import annotations

import re

from screenwright.config import get_logger
from screenwright.fountain.elements import LineRole, TaggedLine
from screenwright.fountain.spacing import collapse_blank_lines, space_tagged_lines

logger = get_logger(__name__)

REPLACEMENT_CHAR = "�"

# UTF-8 punctuation decoded as cp1252
_MOJIBAKE: list[tuple[str, str]] = [
    ("â€™", "'"),
    ("â€œ", '"'),
    ("â€\u009d", '"'),
    ("â€”", "—"),
    ("â€“", "–"),
    ("â€¦", "…"),
]

_SENTENCE_END = re.compile(r"[.!?:;]$")
_STARTS_UPPER = re.compile(r"^[A-Z]")
_WRAP_SCENE_HEADING = re.compile(r"^(INT\.|EXT\.|INT/EXT)", re.I)
_IMPORTED_HEADING = re.compile(r"^(INT|EXT|INT/EXT|INT\./EXT|EST|I/E)[.\s]", re.I)
# Cues in imported scripts may carry an extension: JOHN (V.O.), DR. SMITH
_IMPORTED_CUE = re.compile(r"^[A-Z][A-Z\s.']+(\s*\([^)]*\))?$")
_CUE_MAX_WORDS = 4

_SPEAKER_ROLES = frozenset({LineRole.CHARACTER, LineRole.PARENTHETICAL})
_INNER_WHITESPACE = re.compile(r"\s{2,}")


def detect_encoding_issues(text: str) -> bool:
    """Check for replacement characters or mis-decoded punctuation."""
    if REPLACEMENT_CHAR in text:
        return True
    return any(sequence in text for sequence, _ in _MOJIBAKE)


def _replace_unknown_char(text: str, index: int) -> str:
    before = text[index - 1] if index > 0 else ""
    after = text[index + 1] if index + 1 < len(text) else ""
    if before.isalnum() and after.isalnum():
        return "'"
    if before.isspace() or after.isspace():
        return '"'
    return "'"


def fix_character_encoding(text: str) -> str:
    """Repair mis-decoded punctuation.

    Known mojibake sequences are replaced first. Each remaining U+FFFD is
    guessed from its neighbours: between letters or digits it was most
    likely an apostrophe, next to whitespace a quote.
    """
    for sequence, replacement in _MOJIBAKE:
        text = text.replace(sequence, replacement)

    if REPLACEMENT_CHAR not in text:
        return text

    return "".join(
        _replace_unknown_char(text, i) if char == REPLACEMENT_CHAR else char
        for i, char in enumerate(text)
    )


def _is_wrapped(current: str, following: str) -> bool:
    if not following:
        return False
    if _SENTENCE_END.search(current):
        return False
    if _STARTS_UPPER.match(following) or _WRAP_SCENE_HEADING.match(following):
        return False
    is_cue = is_imported_cue(current)
    next_is_parenthetical = following.startswith("(") and following.endswith(")")
    return not (is_cue and next_is_parenthetical)


def normalize_whitespace(text: str) -> str:
    """Normalize whitespace while preserving Fountain line structure.

    Strips every line, collapses inner whitespace runs and joins lines that
    were soft-wrapped by a PDF or word processor. Blank lines are kept.
    """
    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    normalized: list[str] = []
    pending = ""

    for i, raw in enumerate(lines):
        stripped = raw.strip()
        if not stripped:
            if pending:
                normalized.append(pending)
                pending = ""
            normalized.append("")
            continue

        line = _INNER_WHITESPACE.sub(" ", stripped)
        if pending:
            line = f"{pending} {line}"
            pending = ""

        following = lines[i + 1].strip() if i + 1 < len(lines) else ""
        if _is_wrapped(line, following):
            pending = line
        else:
            normalized.append(line)

    if pending:
        normalized.append(pending)
    return "\n".join(normalized)


def is_imported_cue(line: str) -> bool:
    """Check whether a line of an imported script is a character cue."""
    line = line.strip()
    return (
        line == line.upper()
        and bool(_IMPORTED_CUE.match(line))
        and len(line.split()) <= _CUE_MAX_WORDS
        and not _IMPORTED_HEADING.match(line)
    )


def is_transition(line: str) -> bool:
    """Check for an upper case transition such as ``CUT TO:``."""
    line = line.strip()
    return line.endswith("TO:") and line == line.upper()


def classify_imported_lines(lines: list[str]) -> list[TaggedLine]:
    """Tag the lines of an imported script with their Fountain roles.

    Unlike AI output, imported scripts use cue extensions and transitions.
    A cue must be followed by a non-blank line to count as one.
    """
    stripped = [line.strip() for line in lines]
    following = [""] * len(stripped)
    upcoming = ""
    for i in range(len(stripped) - 1, -1, -1):
        following[i] = upcoming
        upcoming = stripped[i] or upcoming

    tagged: list[TaggedLine] = []
    previous: LineRole | None = None
    for text, next_line in zip(stripped, following):
        if not text:
            role = LineRole.BLANK
        elif _IMPORTED_HEADING.match(text):
            role = LineRole.SCENE_HEADING
        elif is_transition(text):
            role = LineRole.TRANSITION
        elif next_line and is_imported_cue(text):
            role = LineRole.CHARACTER
        elif text.startswith("(") and text.endswith(")"):
            role = LineRole.PARENTHETICAL
        elif previous in _SPEAKER_ROLES:
            role = LineRole.DIALOGUE
        else:
            role = LineRole.ACTION
        tagged.append(TaggedLine(text=text, role=role))
        previous = role
    return tagged


def enforce_fountain_spacing(text: str) -> str:
    """Insert the blank lines Fountain expects between screenplay elements."""
    tagged = classify_imported_lines(text.split("\n"))
    return collapse_blank_lines("\n".join(space_tagged_lines(tagged))).strip()


def normalize_screenplay_text(content: str) -> str:
    """Apply encoding repair, whitespace normalization and spacing in order.

    Args:
        content: Raw screenplay text

    Returns:
        Normalized screenplay text; blank input is returned unchanged
    """
    if not content or not content.strip():
        return content

    logger.info(
        "Normalizing screenplay text",
        original_length=len(content),
        has_encoding_issues=detect_encoding_issues(content),
    )

    normalized = fix_character_encoding(content)
    normalized = normalize_whitespace(normalized)
    normalized = enforce_fountain_spacing(normalized)

    logger.info(
        "Normalization complete",
        original_length=len(content),
        normalized_length=len(normalized),
        lines_original=content.count("\n") + 1,
        lines_normalized=normalized.count("\n") + 1,
    )
    return normalized
