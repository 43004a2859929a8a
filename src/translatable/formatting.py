"""Plain-text formatting helpers for diagnostic output."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any


def truncate(text: str, max_length: int) -> str:
    """Truncate text to a maximum length."""
    if not text:
        return ""
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


def format_cell(value: Any) -> str:
    """Format arbitrary values for generic table cells."""
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def render_table(headers: Sequence[str], rows: Sequence[Sequence[Any]]) -> str:
    """Render rows as a bordered, left-aligned text table.

    Example::

        +-------------+-------------+
        | Column name | Column type |
        +-------------+-------------+
        | title       | text        |
        +-------------+-------------+
    """
    cells = [[format_cell(value) for value in row] for row in rows]
    widths = [len(header) for header in headers]
    for row in cells:
        for index, cell in enumerate(row):
            widths[index] = max(widths[index], len(cell))

    border = "+" + "+".join("-" * (width + 2) for width in widths) + "+"

    def _line(values: Sequence[str]) -> str:
        padded = (f" {value.ljust(width)} " for value, width in zip(values, widths, strict=True))
        return "|" + "|".join(padded) + "|"

    lines = [border, _line(headers), border]
    lines.extend(_line(row) for row in cells)
    lines.append(border)
    return "\n".join(lines)
