"""Shared text formatting helpers for benchkit.

Provides functions for formatting numbers, percentages and aligned text
tables used by the results display and the CLI.
"""

from __future__ import annotations

import math


def format_number(
    value: float,
    *,
    decimals: int = 6,
    trailing_zeros: bool = True,
) -> str:
    """Format a number with thousands separators and fixed decimals.

    *decimals* is capped at 18.  With ``trailing_zeros=False`` the
    fractional part is stripped of trailing zeros (and the point, if
    nothing remains).

    Examples: ``format_number(1234.5, decimals=2)`` → ``'1,234.50'``.
    """
    if math.isnan(value):
        return "N/A"
    if math.isinf(value):
        return "∞" if value > 0 else "-∞"
    decimals = max(0, min(decimals, 18))
    text = f"{value:,.{decimals}f}"
    if not trailing_zeros and "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_percent(fraction: float, precision: int = 2) -> str:
    """Format a fraction (0.0123) as a percentage (``'1.23%'``)."""
    if math.isnan(fraction):
        return "N/A"
    return f"{fraction * 100:.{precision}f}%"


def format_table(
    headers: list[str],
    rows: list[list[str]],
    *,
    alignments: list[str] | None = None,
    indent: int = 2,
) -> str:
    """Format a list of rows as an aligned text table.

    Column widths come from the widest cell.  Columns marked ``'r'`` in
    *alignments* are right-aligned; everything else is left-aligned.
    A rule of box-drawing characters separates header and body.

    Args:
        headers: Column header strings.
        rows: List of rows, each a list of cell strings.
        alignments: Per-column alignment: ``'l'`` or ``'r'``.
        indent: Number of leading spaces per line.

    Returns:
        The formatted table as a string.
    """
    if not headers:
        return ""

    ncols = len(headers)
    aligns = list(alignments or [])
    aligns += ["l"] * (ncols - len(aligns))

    body = [(list(row) + [""] * ncols)[:ncols] for row in rows]

    widths = [len(h) for h in headers]
    for row in body:
        for ci, cell in enumerate(row):
            widths[ci] = max(widths[ci], len(cell))

    def _line(cells: list[str]) -> str:
        parts = [
            cell.rjust(widths[ci]) if aligns[ci] == "r" else cell.ljust(widths[ci])
            for ci, cell in enumerate(cells)
        ]
        return (" " * indent + "  ".join(parts)).rstrip()

    lines = [_line(list(headers))]
    lines.append(" " * indent + "─" * (sum(widths) + 2 * (ncols - 1)))
    lines.extend(_line(row) for row in body)
    return "\n".join(lines)
