from __future__ import annotations

import pytest

from sheetmerge.core.errors import EmptyInputError
from sheetmerge.services.merge.batch import merge_documents
from sheetmerge.services.merge.models import Cell


def _filled(make_document, label: str, data_rows: int = 2, ref: str | None = None):
    cells: dict[str, object] = {"A1": "Name", "B1": "Value", "C1": "Note"}
    for row in range(2, 2 + data_rows):
        cells[f"A{row}"] = f"{label}-{row}"
        cells[f"B{row}"] = Cell(value=row, data_type="n", number_format="0.00")
        cells[f"C{row}"] = f"note {label}"
    return make_document(cells, ref=ref or f"A1:C{1 + data_rows}")


def test_merge_requires_documents() -> None:
    with pytest.raises(EmptyInputError):
        merge_documents([])


def test_merge_concatenates_rows_in_document_order(make_document) -> None:
    docs = [_filled(make_document, label) for label in ("alice", "bob", "carol")]

    merged = merge_documents(docs)
    sheet = merged.first_sheet

    assert sheet.ref == "A1:C7"
    assert sheet.get(0, 0).value == "Name"
    assert [sheet.get(row, 0).value for row in range(1, 7)] == [
        "alice-2",
        "alice-3",
        "bob-2",
        "bob-3",
        "carol-2",
        "carol-3",
    ]
    assert sheet.get(3, 1).number_format == "0.00"
    assert sheet.get(3, 1).value == 2


def test_merge_row_count_is_sum_of_data_rows(make_document) -> None:
    docs = [
        _filled(make_document, "a", data_rows=1),
        _filled(make_document, "b", data_rows=3),
        _filled(make_document, "c", data_rows=2),
    ]

    sheet = merge_documents(docs).first_sheet

    data_rows = {address.row for address in sheet.cells if address.row > 0}
    assert len(data_rows) == 1 + 3 + 2
    assert sheet.ref == "A1:C7"


def test_merge_single_document_keeps_range(make_document) -> None:
    sheet = merge_documents([_filled(make_document, "solo")]).first_sheet
    assert sheet.ref == "A1:C3"


def test_merge_truncates_columns_beyond_base_width(make_document) -> None:
    base = _filled(make_document, "base")
    wide = _filled(make_document, "wide", ref="A1:E3")
    wide.first_sheet.set(1, 4, Cell(value="dropped", data_type="s"))

    sheet = merge_documents([base, wide]).first_sheet

    assert all(address.col <= 2 for address in sheet.cells)
    assert sheet.ref == "A1:C5"


def test_merge_leaves_inputs_untouched_and_copies_cells(make_document) -> None:
    docs = [_filled(make_document, "x"), _filled(make_document, "y")]
    before = [{addr: cell.copy() for addr, cell in doc.first_sheet.cells.items()} for doc in docs]

    merged = merge_documents(docs)
    merged.first_sheet.get(3, 0).value = "mutated"

    assert docs[1].first_sheet.get(1, 0).value == "y-2"
    assert [doc.first_sheet.cells for doc in docs] == before
    assert docs[0].first_sheet.ref == "A1:C3"
    assert len(docs[0].first_sheet.cells) == 9
