"""Source table input helpers."""

# Module responsibilities:
# - Provide a thin wrapper around pandas readers returning rows of text fields.
# - Turn raw rows into SourceRow records (header skipped, blank keys dropped).
# - Emit structured logs for traceability.

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence
from zipfile import BadZipFile

import pandas as pd

from sheetmerge.core.errors import DecodeError, EmptySourceError
from sheetmerge.services.merge.models import SourceRow

from .utils.log import get_logger

logger = get_logger("source_table")

SOURCE_FIELD_COUNT = 4
EXCEL_SUFFIXES = {".xlsx", ".xlsm"}


def _frame_to_rows(df: pd.DataFrame) -> List[List[str]]:
    df = df.fillna("")
    return [[str(value) for value in record] for record in df.itertuples(index=False)]


def read_rows(path: Path, nrows: Optional[int] = None) -> List[List[str]]:
    """Load the first sheet (or CSV) as a list of text rows, header included.

    Raises:
        FileNotFoundError: When the file does not exist.
        DecodeError: When pandas cannot parse the file.
    """

    if not path.exists():
        raise FileNotFoundError(f"Source table not found: {path}")

    logger.info("Reading source table", extra={"path": str(path)})
    suffix = path.suffix.lower()
    try:
        if suffix in EXCEL_SUFFIXES:
            df = pd.read_excel(path, sheet_name=0, header=None, dtype=str, nrows=nrows)
        elif suffix == ".csv":
            df = pd.read_csv(
                path, header=None, dtype=str, keep_default_na=False, nrows=nrows, encoding="utf-8-sig"
            )
        else:
            raise DecodeError(f"Unsupported source table format: {path.name}")
    except pd.errors.EmptyDataError:
        return []
    except (BadZipFile, ValueError, OSError) as exc:
        logger.error("Failed to read source table", extra={"error": str(exc)})
        raise DecodeError(f"Unable to parse {path.name}: {exc}") from exc

    rows = _frame_to_rows(df)
    logger.info("Source table loaded", extra={"rows": len(rows)})
    return rows


def rows_to_source_rows(rows: Sequence[Sequence[object]]) -> List[SourceRow]:
    """Convert raw rows into SourceRows.

    Row 0 is the header. A row is kept only when its first field is present
    and non-empty; missing trailing fields become empty strings.
    """

    result: List[SourceRow] = []
    for raw in rows[1:]:
        fields = ["" if value is None else str(value) for value in list(raw)[:SOURCE_FIELD_COUNT]]
        if not fields or not fields[0]:
            continue
        fields += [""] * (SOURCE_FIELD_COUNT - len(fields))
        result.append(
            SourceRow(
                name=fields[0],
                column_a=fields[0],
                column_b=fields[1],
                column_c=fields[2],
                column_d=fields[3],
            )
        )
    return result


def load_source_rows(path: Path) -> List[SourceRow]:
    """Read ``path`` and return its SourceRows.

    Raises:
        EmptySourceError: When no row qualifies.
    """

    source_rows = rows_to_source_rows(read_rows(path))
    if not source_rows:
        raise EmptySourceError(f"No data rows found in {path.name}")
    return source_rows


def preview_rows(path: Path, limit: int = 10) -> List[List[str]]:
    """Return the first ``limit`` rows of a workbook's first sheet."""

    if limit <= 0:
        raise ValueError("limit must be positive")
    return read_rows(path, nrows=limit)


__all__ = ["read_rows", "rows_to_source_rows", "load_source_rows", "preview_rows"]
