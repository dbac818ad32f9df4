"""Literal month-token substitution for date-like template cells.

The template is authored with March as the placeholder month, so a cell is a
target when its display text contains ``/3/``. This is a substring rule, not
a date parse: ``2024/03/15`` and other months are never touched.
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional

from .addressing import column_index_of
from .models import Cell, CellRange, Sheet
from .trace import NULL_SINK, TraceSink

DEFAULT_MONTH_COLUMNS: tuple[str, ...] = ("J", "M", "N", "O", "P")
DEFAULT_PLACEHOLDER = "3"
STRING_TYPE = "s"

CellFormatter = Callable[[Cell], Optional[str]]


def display_text(cell: Cell, formatter: CellFormatter | None = None) -> str:
    """Return the formatted text of ``cell``, falling back to its raw value."""

    formatted: Optional[str] = None
    if formatter is not None:
        try:
            formatted = formatter(cell)
        except (TypeError, ValueError):
            formatted = None
    return formatted or str(cell.value)


def substitute_month(
    sheet: Sheet,
    month: int,
    columns: Iterable[str],
    cell_range: CellRange,
    *,
    placeholder: str = DEFAULT_PLACEHOLDER,
    formatter: CellFormatter | None = None,
    trace: TraceSink = NULL_SINK,
) -> int:
    """Rewrite ``/{placeholder}/`` to ``/{month}/`` in the given columns.

    Matching cells get the rewritten display text as their value and are
    forced to the string type; every other attribute is kept.

    Returns:
        Number of cells rewritten.
    """

    token = f"/{placeholder}/"
    replacement = f"/{month}/"
    replaced = 0
    for column in columns:
        col = column_index_of(column)
        for row in range(1, cell_range.end.row + 1):
            cell = sheet.get(row, col)
            if cell is None or cell.value is None:
                continue
            source_text = display_text(cell, formatter)
            if token not in source_text:
                trace.emit("month.skip", column=column, row=row + 1, text=source_text)
                continue
            new_value = source_text.replace(token, replacement)
            cell.value = new_value
            cell.data_type = STRING_TYPE
            replaced += 1
            trace.emit(
                "month.replace", column=column, row=row + 1, before=source_text, after=new_value
            )
    return replaced


__all__ = [
    "DEFAULT_MONTH_COLUMNS",
    "DEFAULT_PLACEHOLDER",
    "CellFormatter",
    "display_text",
    "substitute_month",
]
