"""Column fill: write one source value down a template column."""

from __future__ import annotations

from typing import Mapping

from .addressing import column_index_of, decode_range
from .models import CellRange, Sheet, SourceRow
from .trace import NULL_SINK, TraceSink

FIRST_DATA_ROW = 1


def fill_column(
    sheet: Sheet,
    column: str,
    value: str,
    cell_range: CellRange,
    trace: TraceSink = NULL_SINK,
) -> int:
    """Replace the value of every template cell in ``column`` below the header.

    Rows are visited from the first data row through the range's bottom row.
    The first absent or falsy cell ends the column's data region. Only
    ``value`` changes; the cell type and formatting stay as the template
    declared them.

    Returns:
        Number of cells written.
    """

    col = column_index_of(column)
    written = 0
    for row in range(FIRST_DATA_ROW, cell_range.end.row + 1):
        cell = sheet.get(row, col)
        if cell is None or not cell.value:
            trace.emit("fill.stop", column=column, row=row + 1)
            break
        cell.value = value
        written += 1
        trace.emit("fill.write", column=column, row=row + 1, value=value)
    return written


def fill_row_data(
    sheet: Sheet,
    row: SourceRow,
    column_mapping: Mapping[str, str],
    trace: TraceSink = NULL_SINK,
) -> dict[str, int]:
    """Fill every mapped destination column from one source row.

    ``column_mapping`` maps source keys (``A``-``D``) to template columns.
    """

    cell_range = decode_range(sheet.ref)
    counts: dict[str, int] = {}
    for source_key, target_column in column_mapping.items():
        counts[target_column] = fill_column(
            sheet, target_column, row.value_for(source_key), cell_range, trace=trace
        )
    return counts


__all__ = ["FIRST_DATA_ROW", "fill_column", "fill_row_data"]
