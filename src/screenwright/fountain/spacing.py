"""Fountain blank-line spacing for AI-generated screenplay content.

Spacing follows the Fountain conventions (https://fountain.io/syntax/):

- Character: one blank line before, none after
- Character -> Parenthetical/Dialogue: no blank line
- Parenthetical -> Dialogue: no blank line
- Dialogue -> Action/Character: one blank line
- Scene heading: one blank line before and after
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from screenwright.fountain.classifier import classify_lines, expand_lines
from screenwright.fountain.elements import LineRole, TaggedLine

_EXCESS_NEWLINES = re.compile(r"\n{3,}")

A = LineRole.ACTION
C = LineRole.CHARACTER
D = LineRole.DIALOGUE
P = LineRole.PARENTHETICAL
S = LineRole.SCENE_HEADING
T = LineRole.TRANSITION

# Blank lines required before the current line, keyed by (previous, current).
# Missing pairs need none. Beyond the cue and dialogue rules, a scene heading
# is set off from the element before and after it, so
# ["INT. HOUSE - DAY", "Rain falls."] gains a blank line, and transitions
# stand alone. Only the import normalizer tags transitions.
BLANK_LINES_BEFORE: dict[tuple[LineRole, LineRole], int] = {
    (A, C): 1,
    (D, C): 1,
    (S, C): 1,
    (D, A): 1,
    (D, S): 1,
    (A, S): 1,
    (C, S): 1,
    (P, S): 1,
    (S, A): 1,
    (A, T): 1,
    (D, T): 1,
    (T, S): 1,
    (T, A): 1,
    (T, C): 1,
}


def blank_lines_between(previous: LineRole | None, current: LineRole) -> int:
    """Look up how many blank lines separate two adjacent roles."""
    if previous is None:
        return 0
    return BLANK_LINES_BEFORE.get((previous, current), 0)


def collapse_blank_lines(text: str) -> str:
    """Cap every run of blank lines at a single blank line."""
    return _EXCESS_NEWLINES.sub("\n\n", text)


def space_tagged_lines(tagged: Sequence[TaggedLine]) -> list[str]:
    """Emit lines with the blank separators their roles require.

    A separator is only added when the output does not already end in a
    blank line, so intentional blank entries are never doubled.
    """
    output: list[str] = []
    previous: LineRole | None = None
    for line in tagged:
        if (
            blank_lines_between(previous, line.role)
            and output
            and output[-1] != ""
        ):
            output.append("")
        output.append(line.text)
        previous = line.role
    return output


def format_fountain_spacing(lines: Iterable[object]) -> str:
    """Format one AI response with proper Fountain spacing.

    Never raises: unrecognised lines fall back to action and are passed
    through unchanged.

    Args:
        lines: Content array of an AI response (may contain blank entries
            and entries with embedded newlines)

    Returns:
        Screenplay text with at most one consecutive blank line

    Example:
        >>> format_fountain_spacing(["The door creaks open.", "JOHN", "What was that?"])
        'The door creaks open.\\n\\nJOHN\\nWhat was that?'
    """
    if isinstance(lines, str):
        lines = [lines]
    tagged = classify_lines(expand_lines(lines))
    if not tagged:
        return ""
    formatted = "\n".join(space_tagged_lines(tagged))
    return collapse_blank_lines(formatted).strip()
