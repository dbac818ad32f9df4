from __future__ import annotations

import faulthandler
import os
import sys
import tempfile
from datetime import datetime
from io import BytesIO
from pathlib import Path
from typing import Callable

import pytest
from openpyxl import Workbook
from openpyxl.styles import Font

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

faulthandler.enable()  # Ensure crashes emit tracebacks.

# Keep log files out of the real home directory; set before package imports.
os.environ.setdefault("SHEETMERGE_HOME", tempfile.mkdtemp(prefix="sheetmerge-tests-"))

from sheetmerge.services.merge.models import Cell, Document, Sheet  # noqa: E402

HEADERS = list("ABCDEFGHIJKLMNOP")


def build_template_workbook(data_rows: int = 2) -> Workbook:
    """Template with a header row and ``data_rows`` placeholder rows.

    Columns A-C and G hold placeholder text, H a formula, J a March date
    formatted ``yyyy/m/d``, M a March date typed as text, N a zero-padded
    date that must never match.
    """

    wb = Workbook()
    ws = wb.active
    ws.title = "Flights"
    for idx, header in enumerate(HEADERS, start=1):
        ws.cell(row=1, column=idx, value=f"col_{header}")
    for row in range(2, 2 + data_rows):
        ws.cell(row=row, column=1, value="name").font = Font(bold=True)
        amount = ws.cell(row=row, column=2, value="amount")
        amount.number_format = "0.00"
        ws.cell(row=row, column=3, value="hours")
        ws.cell(row=row, column=7, value="remark")
        ws.cell(row=row, column=8, value=f"=B{row}*2")
        stamp = ws.cell(row=row, column=10, value=datetime(2024, 3, 15))
        stamp.number_format = "yyyy/m/d"
        ws.cell(row=row, column=13, value="2024/3/1")
        ws.cell(row=row, column=14, value="2024/03/15")
    ws.column_dimensions["A"].width = 24
    return wb


def workbook_bytes(wb: Workbook) -> bytes:
    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


@pytest.fixture()
def template_bytes() -> bytes:
    return workbook_bytes(build_template_workbook())


@pytest.fixture()
def make_document() -> Callable[..., Document]:
    """Build an in-memory single-sheet document from ``{"A2": value}`` pairs."""

    from sheetmerge.services.merge.addressing import decode_cell

    def _make(cells: dict[str, object], ref: str | None = None, name: str = "Sheet1") -> Document:
        sheet = Sheet(name=name, ref=ref)
        for coordinate, value in cells.items():
            cell = value if isinstance(value, Cell) else Cell(value=value, data_type="s")
            sheet.cells[decode_cell(coordinate)] = cell
        return Document(sheets=[sheet])

    return _make


@pytest.fixture()
def template_workbook() -> Workbook:
    return build_template_workbook()
