"""Prepare formatted content for insertion at the editor cursor."""

from __future__ import annotations


def prepare_insertion(content: str, editor_text: str, cursor: int) -> str:
    """Surround content with the newlines it needs at the cursor.

    A blank line separates the content from text already on the cursor's
    line; at the start of a line a single newline is enough. A trailing
    newline is added when text follows the cursor on the same line.

    Args:
        content: Formatted screenplay text
        editor_text: Current editor buffer (not modified)
        cursor: Character offset of the insertion point

    Returns:
        Text ready to be inserted at the cursor
    """
    cursor = max(0, min(cursor, len(editor_text)))
    before = editor_text[:cursor]
    after = editor_text[cursor:]

    current_line = before.rsplit("\n", 1)[-1]
    prefix = "\n\n" if current_line.strip() else "\n"

    insertion = prefix + content.strip()
    if after.strip() and not after.startswith(("\n", "\r\n")):
        insertion += "\n"
    return insertion
