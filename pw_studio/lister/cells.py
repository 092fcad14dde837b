"""Table cell rendering."""

from typing import Any

from ..host import value_text

CELL_MAX_LENGTH = 100
CELL_TRUNCATE_AT = 97


def format_cell(value: Any) -> str:
    """
    Plain text for a listing cell.

    Page references show their titles, sequences are comma-joined, booleans
    become ``"1"`` or ``""``, and long text is cut with a trailing ``"..."``.
    """
    text = value_text(value)
    if len(text) > CELL_MAX_LENGTH:
        text = text[:CELL_TRUNCATE_AT] + "..."
    return text
