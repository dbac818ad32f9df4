"""Append the data rows of many filled documents into one sheet."""

from __future__ import annotations

import logging
from typing import Sequence

from sheetmerge.core.errors import EmptyInputError

from .addressing import decode_range, encode_range
from .clone import clone_document
from .models import CellAddress, CellRange, Document

LOGGER = logging.getLogger(__name__)


def merge_documents(documents: Sequence[Document]) -> Document:
    """Concatenate the first sheet of every document below the first one's.

    The first document is cloned as the base, keeping its header and
    formatting. Each later document contributes its rows below its header,
    in order, bounded by the base sheet's declared rightmost column. The
    merged range is recomputed to cover every appended row.

    Raises:
        EmptyInputError: When ``documents`` is empty.
    """

    if not documents:
        raise EmptyInputError("No documents to merge")

    merged = clone_document(documents[0])
    base_sheet = merged.first_sheet
    if base_sheet is None:
        raise EmptyInputError("Base document has no sheets")

    base_range = decode_range(base_sheet.ref)
    last_col = base_range.end.col
    cursor = base_range.end.row + 1

    for document in documents[1:]:
        sheet = document.first_sheet
        if sheet is None:
            continue
        sheet_range = decode_range(sheet.ref)
        for row in range(1, sheet_range.end.row + 1):
            for col in range(0, last_col + 1):
                cell = sheet.get(row, col)
                if cell is not None:
                    base_sheet.set(cursor, col, cell.copy())
            cursor += 1

    base_sheet.ref = encode_range(
        CellRange(base_range.start, CellAddress(cursor - 1, last_col))
    )
    LOGGER.info(
        "Merged %s documents into %s rows (range %s)",
        len(documents),
        cursor,
        base_sheet.ref,
    )
    return merged


__all__ = ["merge_documents"]
