"""End-to-end tests for the merge orchestrator."""

from __future__ import annotations

from io import BytesIO

import pytest
from openpyxl import load_workbook

from sheetmerge.config import MergeOptions
from sheetmerge.core.errors import DecodeError, EmptySourceError, InvalidStateError, RowProcessingError
from sheetmerge.services.merge.api import MergeRun, MergeStatus, process_batch
from sheetmerge.services.merge.models import SourceRow
from sheetmerge_io.codec import decode, encode

ROWS = [
    SourceRow(name="Alice", column_a="Alice", column_b="10", column_c="20", column_d="30"),
    SourceRow(name="Bob", column_a="Bob", column_b="40", column_c="50", column_d="60"),
]


def _sheet(payload: bytes):
    return load_workbook(BytesIO(payload)).worksheets[0]


def test_process_batch_generates_individual_and_merged_files(template_bytes: bytes) -> None:
    events: list[tuple[int, int, str]] = []

    result = process_batch(
        template_bytes,
        "template.xlsx",
        ROWS,
        MergeOptions(month=9),
        progress_cb=lambda current, total, message: events.append((current, total, message)),
    )

    assert [item.name for item in result.individual_files] == ["Alice+template.xlsx", "Bob+template.xlsx"]
    assert result.merged_file.name == "飞行记录合并表.xlsx"
    assert result.merged_file.size == len(result.merged_file.data)
    assert events == [
        (1, 2, "Processed Alice"),
        (2, 2, "Processed Bob"),
        (2, 2, "Building merged file..."),
    ]

    ws = _sheet(result.individual_files[1].data)
    assert ws["A1"].value == "col_A"
    for row in (2, 3):
        assert ws[f"A{row}"].value == "Bob"
        assert ws[f"B{row}"].value == "40"
        assert ws[f"C{row}"].value == "50"
        assert ws[f"G{row}"].value == "60"
        assert ws[f"D{row}"].value is None
        assert ws[f"J{row}"].value == "2024/9/15"
        assert ws[f"M{row}"].value == "2024/9/1"
        assert ws[f"N{row}"].value == "2024/03/15"
    assert ws["A2"].font.bold is True
    assert ws["B2"].number_format == "0.00"
    assert ws["J2"].number_format == "yyyy/m/d"
    assert ws["H2"].value == "=B2*2"
    assert ws.column_dimensions["A"].width == 24


def test_merged_file_stacks_rows_below_single_header(template_bytes: bytes) -> None:
    result = process_batch(template_bytes, "template.xlsx", ROWS, MergeOptions(month=9))

    ws = _sheet(result.merged_file.data)
    assert ws.max_row == 5
    assert ws["A1"].value == "col_A"
    assert [ws[f"A{row}"].value for row in range(2, 6)] == ["Alice", "Alice", "Bob", "Bob"]
    assert [ws[f"G{row}"].value for row in range(2, 6)] == ["30", "30", "60", "60"]
    assert ws["A5"].font.bold is True
    assert ws["J5"].value == "2024/9/15"


def test_template_document_is_never_mutated(template_bytes: bytes) -> None:
    template = decode(template_bytes)
    snapshot = {addr: cell.copy() for addr, cell in template.first_sheet.cells.items()}

    MergeRun(MergeOptions(month=9)).run(template, "template.xlsx", ROWS)

    assert template.first_sheet.cells == snapshot


def test_yield_callback_runs_between_rows(template_bytes: bytes) -> None:
    calls: list[int] = []
    run = MergeRun(MergeOptions(month=4))

    run.run(decode(template_bytes), "t.xlsx", ROWS, yield_cb=lambda: calls.append(run.current))

    assert calls == [1, 2]
    assert run.status is MergeStatus.COMPLETED


def test_row_failure_aborts_batch(template_bytes: bytes) -> None:
    calls: list[str] = []

    def flaky_encoder(document) -> bytes:
        calls.append(document.first_sheet.get(1, 0).value)
        if len(calls) == 2:
            raise RuntimeError("disk full")
        return encode(document)

    rows = ROWS + [SourceRow(name="Carol", column_a="Carol")]
    run = MergeRun(MergeOptions(month=9), encoder=flaky_encoder)

    with pytest.raises(RowProcessingError) as excinfo:
        run.run(decode(template_bytes), "t.xlsx", rows)

    assert excinfo.value.row_index == 2
    assert excinfo.value.row_name == "Bob"
    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert calls == ["Alice", "Bob"]
    assert run.status is MergeStatus.FAILED
    assert "disk full" in (run.error or "")

    with pytest.raises(InvalidStateError):
        run.run(decode(template_bytes), "t.xlsx", rows)

    run.reset()
    assert run.status is MergeStatus.IDLE
    assert run.error is None


def test_empty_source_fails_before_processing(template_bytes: bytes) -> None:
    run = MergeRun(MergeOptions(month=9))

    with pytest.raises(EmptySourceError):
        run.run(decode(template_bytes), "t.xlsx", [])

    assert run.status is MergeStatus.FAILED


def test_invalid_template_bytes_raise_decode_error() -> None:
    with pytest.raises(DecodeError):
        process_batch(b"definitely not a workbook", "broken.xlsx", ROWS)


def test_builtin_short_date_cells_are_rewritten(template_workbook) -> None:
    ws = template_workbook.active
    ws["J2"].number_format = "mm-dd-yy"
    buffer = BytesIO()
    template_workbook.save(buffer)

    result = process_batch(buffer.getvalue(), "template.xlsx", ROWS[:1], MergeOptions(month=9))

    ws = _sheet(result.individual_files[0].data)
    assert ws["J2"].value == "2024/9/15"
    assert ws["J3"].value == "2024/9/15"


def test_short_date_display_follows_configured_format(template_workbook) -> None:
    ws = template_workbook.active
    ws["J2"].number_format = "mm-dd-yy"
    buffer = BytesIO()
    template_workbook.save(buffer)

    options = MergeOptions(month=9, date_format="d/m/yyyy")
    result = process_batch(buffer.getvalue(), "template.xlsx", ROWS[:1], options)

    assert _sheet(result.individual_files[0].data)["J2"].value == "15/9/2024"


def test_callback_failure_marks_run_failed(template_bytes: bytes) -> None:
    def broken_progress(current: int, total: int, message: str) -> None:
        raise RuntimeError("progress sink closed")

    run = MergeRun(MergeOptions(month=9))

    with pytest.raises(RuntimeError):
        run.run(decode(template_bytes), "t.xlsx", ROWS, progress_cb=broken_progress)

    assert run.status is MergeStatus.FAILED
    assert run.error == "progress sink closed"
