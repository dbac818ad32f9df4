"""Spreadsheet codec: xlsx bytes <-> in-memory Document model."""

# Module responsibilities:
# - Decode workbook bytes into the sparse cell model with every preserved attribute.
# - Encode a Document back onto its own container so styles, widths and merges survive.
# - Reject bytes that are not a spreadsheet container with a descriptive DecodeError.

from __future__ import annotations

import math
from io import BytesIO
from pathlib import Path
from typing import Any, Dict
from zipfile import BadZipFile

from openpyxl import Workbook, load_workbook
from openpyxl.cell.cell import MergedCell
from openpyxl.comments import Comment
from openpyxl.styles.cell_style import StyleArray
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.worksheet.worksheet import Worksheet

from sheetmerge.core.errors import DecodeError
from sheetmerge.services.merge.models import Cell, CellAddress, Document, Sheet

from .utils.log import get_logger

logger = get_logger("codec")

FILE_FORMATS: Dict[str, str] = {
    "xlsx": "Excel 2007+ (.xlsx)",
    "xlsm": "Excel macro-enabled (.xlsm)",
    "xls": "Excel 97-2003 (.xls)",
    "et": "WPS Office (.et)",
    "ett": "WPS Template (.ett)",
    "csv": "CSV (.csv)",
    "ods": "OpenDocument (.ods)",
}

_PROP_FIELDS = ("title", "subject", "creator", "description", "keywords", "category")
COMMENT_AUTHOR = "sheetmerge"


def detect_file_format(file_name: str) -> str:
    """Return a human readable label for the file's extension."""

    extension = Path(file_name).suffix.lower().lstrip(".")
    return FILE_FORMATS.get(extension, f"Unknown format (.{extension})")


def _load(data: bytes, data_only: bool = False) -> Workbook:
    try:
        return load_workbook(BytesIO(data), data_only=data_only)
    except (BadZipFile, InvalidFileException, KeyError, OSError, ValueError, TypeError) as exc:
        raise DecodeError(f"Not a recognised spreadsheet container: {exc}") from exc


def _formula_text(value: Any) -> str:
    # ArrayFormula / DataTableFormula carry their text separately.
    text = getattr(value, "text", None)
    return str(text if text is not None else value)


def _decode_sheet(ws: Worksheet, cached: Worksheet) -> Sheet:
    sheet = Sheet(name=ws.title, ref=ws.dimensions)
    for row in ws.iter_rows():
        for source in row:
            if isinstance(source, MergedCell):
                continue
            if source.value is None and not source.has_style:
                continue
            cell = Cell(
                value=source.value,
                data_type=source.data_type,
                number_format=source.number_format,
                style_ref=tuple(source._style),
                hyperlink=source.hyperlink.target if source.hyperlink is not None else None,
                comment=source.comment.text if source.comment is not None else None,
            )
            if source.data_type == "f":
                cell.formula = _formula_text(source.value)
                cell.value = cached.cell(row=source.row, column=source.column).value
            sheet.cells[CellAddress(source.row - 1, source.column - 1)] = cell

    sheet.meta = {
        "merged_cells": [str(rng) for rng in ws.merged_cells.ranges],
        "freeze_panes": ws.freeze_panes,
        "column_widths": {
            key: dim.width for key, dim in ws.column_dimensions.items() if dim.width
        },
    }
    return sheet


def decode(data: bytes) -> Document:
    """Decode workbook bytes into a Document.

    Raises:
        DecodeError: When ``data`` is not a readable xlsx container.
    """

    workbook = _load(data)
    values = _load(data, data_only=True)
    document = Document(container=bytes(data))
    for ws in workbook.worksheets:
        document.sheets.append(_decode_sheet(ws, values[ws.title]))
    document.props = {
        name: getattr(workbook.properties, name)
        for name in _PROP_FIELDS
        if getattr(workbook.properties, name, None)
    }
    logger.info(
        "Workbook decoded",
        extra={"sheets": document.sheet_names, "bytes": len(data)},
    )
    return document


def _coerce_value(cell: Cell) -> Any:
    """Keep the declared type: numeric cells receive numeric text as numbers."""

    value = cell.value
    if cell.data_type == "n" and isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return value
        if not math.isfinite(number):
            return value
        return int(number) if number.is_integer() and "." not in value else number
    return value


def _write_cell(target: Any, cell: Cell) -> None:
    if cell.style_ref is not None:
        target._style = StyleArray(cell.style_ref)
    target.number_format = cell.number_format
    if cell.formula:
        target.value = cell.formula
    else:
        target.value = _coerce_value(cell)
        if cell.data_type == "s" and isinstance(cell.value, str):
            # Text that looks like a formula must stay literal text.
            target.data_type = "s"
    if cell.hyperlink:
        target.hyperlink = cell.hyperlink
    if cell.comment and (target.comment is None or target.comment.text != cell.comment):
        target.comment = Comment(cell.comment, COMMENT_AUTHOR)


def _encode_sheet(ws: Worksheet, sheet: Sheet) -> None:
    for row in ws.iter_rows():
        for existing in row:
            if isinstance(existing, MergedCell):
                continue
            if CellAddress(existing.row - 1, existing.column - 1) not in sheet.cells:
                existing.value = None

    for address, cell in sorted(sheet.cells.items()):
        target = ws.cell(row=address.row + 1, column=address.col + 1)
        if isinstance(target, MergedCell):
            continue
        _write_cell(target, cell)

    freeze = sheet.meta.get("freeze_panes")
    if freeze:
        ws.freeze_panes = freeze
    for key, width in sheet.meta.get("column_widths", {}).items():
        ws.column_dimensions[key].width = width


def encode(document: Document) -> bytes:
    """Encode a Document onto its container and return xlsx bytes."""

    workbook = _load(document.container) if document.container else Workbook()
    for sheet in document.sheets:
        if sheet.name in workbook.sheetnames:
            ws = workbook[sheet.name]
        else:
            ws = workbook.create_sheet(title=sheet.name)
        _encode_sheet(ws, sheet)
    for name, value in document.props.items():
        setattr(workbook.properties, name, value)

    buffer = BytesIO()
    workbook.save(buffer)
    payload = buffer.getvalue()
    logger.info(
        "Workbook encoded",
        extra={"sheets": document.sheet_names, "bytes": len(payload)},
    )
    return payload


__all__ = ["FILE_FORMATS", "decode", "encode", "detect_file_format"]
