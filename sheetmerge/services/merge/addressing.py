"""Cell and range addressing helpers.

Coordinates are zero-based ``(row, col)`` pairs; textual addresses use the
usual ``A1`` notation.
"""

from __future__ import annotations

from typing import Optional

from openpyxl.utils.cell import (
    column_index_from_string,
    coordinate_from_string,
    get_column_letter,
    range_boundaries,
)

from .models import CellAddress, CellRange

MAX_COLUMN_INDEX = 16383
ORIGIN_RANGE = CellRange(CellAddress(0, 0), CellAddress(0, 0))


def column_letter_of(index: int) -> str:
    """Return the bijective base-26 letters for a zero-based column index."""

    return get_column_letter(index + 1)


def column_index_of(letters: str) -> int:
    """Return the zero-based column index for column ``letters``."""

    return column_index_from_string(letters.strip().upper()) - 1


def encode_cell(address: CellAddress) -> str:
    return f"{column_letter_of(address.col)}{address.row + 1}"


def decode_cell(text: str) -> CellAddress:
    letters, row = coordinate_from_string(text.strip().upper())
    return CellAddress(row - 1, column_index_of(letters))


def decode_range(text: Optional[str]) -> CellRange:
    """Parse ``TL:BR`` (or a single cell) into a range.

    Missing or malformed text falls back to the single-cell range at the
    origin; fill and substitution self-limit through the sentinel rule.
    """

    if not text:
        return ORIGIN_RANGE
    try:
        min_col, min_row, max_col, max_row = range_boundaries(text.strip().upper())
    except (TypeError, ValueError):
        return ORIGIN_RANGE
    if None in (min_col, min_row, max_col, max_row):
        # Whole-row / whole-column references carry no usable extent.
        return ORIGIN_RANGE
    return CellRange(
        CellAddress(min_row - 1, min_col - 1),
        CellAddress(max_row - 1, max_col - 1),
    )


def encode_range(cell_range: CellRange) -> str:
    start = encode_cell(cell_range.start)
    end = encode_cell(cell_range.end)
    if start == end:
        return start
    return f"{start}:{end}"


__all__ = [
    "MAX_COLUMN_INDEX",
    "ORIGIN_RANGE",
    "column_letter_of",
    "column_index_of",
    "encode_cell",
    "decode_cell",
    "decode_range",
    "encode_range",
]
