"""Public API for the merge service: per-row generation plus the merged file."""

from __future__ import annotations

from enum import Enum
from functools import partial
from typing import Callable, List, Sequence
import logging

from pydantic import BaseModel, ConfigDict

from sheetmerge.config import MergeOptions
from sheetmerge.core.errors import (
    EmptySourceError,
    InvalidStateError,
    RowProcessingError,
    SheetMergeError,
)
from sheetmerge_io.codec import decode, encode
from sheetmerge_io.formatting import format_cell

from .addressing import decode_range
from .batch import merge_documents
from .clone import clone_document
from .fill import fill_row_data
from .models import Document, OutputFile, SourceRow
from .month import CellFormatter, substitute_month
from .trace import NULL_SINK, TraceSink

LOGGER = logging.getLogger(__name__)

ProgressCB = Callable[[int, int, str], None]
Encoder = Callable[[Document], bytes]


class MergeStatus(str, Enum):
    IDLE = "idle"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


TERMINAL_STATES = {MergeStatus.COMPLETED, MergeStatus.FAILED}


class MergeResult(BaseModel):
    """Generated files returned to callers."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    individual_files: List[OutputFile]
    merged_file: OutputFile

    @property
    def all_files(self) -> List[OutputFile]:
        return [*self.individual_files, self.merged_file]

    @property
    def total_size(self) -> int:
        return sum(item.size for item in self.all_files)


def output_name(row: SourceRow, template_name: str) -> str:
    return f"{row.name}+{template_name}"


class MergeRun:
    """Drives one batch: clone -> fill -> substitute -> encode per row, then merge.

    Rows run strictly in order. Any failure moves the run to ``failed`` and
    is re-raised; a finished run must be ``reset()`` before it can run again.
    """

    def __init__(
        self,
        options: MergeOptions | None = None,
        *,
        encoder: Encoder = encode,
        formatter: CellFormatter | None = None,
        trace: TraceSink = NULL_SINK,
        logger: logging.Logger | None = None,
    ) -> None:
        self.options = options or MergeOptions()
        self.encoder = encoder
        self.formatter = formatter or partial(format_cell, short_date_format=self.options.date_format)
        self.trace = trace
        self.logger = logger or LOGGER
        self.reset()

    def reset(self) -> None:
        self.status = MergeStatus.IDLE
        self.current = 0
        self.total = 0
        self.message = ""
        self.error: str | None = None

    def _progress(self, current: int, message: str, progress_cb: ProgressCB | None) -> None:
        self.current = current
        self.message = message
        if progress_cb:
            progress_cb(current, self.total, message)
        self.logger.info("%s/%s - %s", current, self.total, message)

    def _fail(self, exc: BaseException) -> None:
        self.status = MergeStatus.FAILED
        self.error = str(exc)
        self.message = f"Processing failed: {exc}"
        self.logger.error("Merge run failed: %s", exc)

    def process_row(self, template: Document, row: SourceRow) -> Document:
        """Return a filled copy of ``template`` for one source row."""

        document = clone_document(template)
        sheet = document.first_sheet
        if sheet is None:
            return document
        fill_row_data(sheet, row, self.options.column_mapping.as_dict(), trace=self.trace)
        substitute_month(
            sheet,
            self.options.month,
            self.options.month_columns,
            decode_range(sheet.ref),
            placeholder=self.options.month_token,
            formatter=self.formatter,
            trace=self.trace,
        )
        return document

    def run(
        self,
        template: Document,
        template_name: str,
        rows: Sequence[SourceRow],
        progress_cb: ProgressCB | None = None,
        yield_cb: Callable[[], None] | None = None,
    ) -> MergeResult:
        if self.status in TERMINAL_STATES:
            raise InvalidStateError(f"Run already {self.status.value}; call reset() first")
        if not rows:
            exc = EmptySourceError("No source rows to process")
            self._fail(exc)
            raise exc

        self.status = MergeStatus.PROCESSING
        self.total = len(rows)
        individual: List[OutputFile] = []
        documents: List[Document] = []

        try:
            for index, row in enumerate(rows, start=1):
                try:
                    document = self.process_row(template, row)
                    payload = self.encoder(document)
                except Exception as exc:  # noqa: BLE001 - surfaced as a row failure
                    raise RowProcessingError(index, row.name, str(exc)) from exc
                individual.append(OutputFile(name=output_name(row, template_name), data=payload))
                documents.append(document)
                self._progress(index, f"Processed {row.name}", progress_cb)
                if yield_cb:
                    yield_cb()

            self._progress(self.total, "Building merged file...", progress_cb)
            merged = merge_documents(documents)
            try:
                merged_payload = self.encoder(merged)
            except Exception as exc:  # noqa: BLE001
                raise SheetMergeError(f"Merged file could not be encoded: {exc}") from exc
        except Exception as exc:
            self._fail(exc)
            raise

        self.status = MergeStatus.COMPLETED
        self.message = "Processing complete"
        self.logger.info(
            "Generated %s files plus merged file %s",
            len(individual),
            self.options.merged_file_name,
        )
        return MergeResult(
            individual_files=individual,
            merged_file=OutputFile(name=self.options.merged_file_name, data=merged_payload),
        )


def process_batch(
    template_bytes: bytes,
    template_name: str,
    rows: Sequence[SourceRow],
    options: MergeOptions | None = None,
    progress_cb: ProgressCB | None = None,
    trace: TraceSink = NULL_SINK,
) -> MergeResult:
    """Decode the template and run a fresh batch over ``rows``.

    Raises:
        DecodeError: When the template is not a spreadsheet container.
        EmptySourceError: When ``rows`` is empty.
        RowProcessingError: When any row fails.
    """

    template = decode(template_bytes)
    LOGGER.info("Template decoded: %s (%s sheets)", template_name, len(template.sheets))
    return MergeRun(options, trace=trace).run(template, template_name, rows, progress_cb=progress_cb)


__all__ = [
    "MergeResult",
    "MergeRun",
    "MergeStatus",
    "output_name",
    "process_batch",
]
