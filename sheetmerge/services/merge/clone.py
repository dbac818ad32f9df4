"""Format-preserving copies of documents, sheets and cells."""

from __future__ import annotations

from copy import deepcopy

from .models import Cell, Document, Sheet


def clone_cell(cell: Cell) -> Cell:
    return cell.copy()


def clone_sheet(sheet: Sheet) -> Sheet:
    """Copy a sheet with a fresh cell mapping and fresh cells.

    The declared ``ref`` and the non-cell metadata are copied verbatim, not
    recomputed.
    """

    return Sheet(
        name=sheet.name,
        cells={address: cell.copy() for address, cell in sheet.cells.items()},
        ref=sheet.ref,
        meta=deepcopy(sheet.meta),
    )


def clone_document(document: Document) -> Document:
    """Return a structurally independent copy of ``document``."""

    return Document(
        sheets=[clone_sheet(sheet) for sheet in document.sheets],
        container=document.container,
        props=deepcopy(document.props),
    )


__all__ = ["clone_cell", "clone_sheet", "clone_document"]
