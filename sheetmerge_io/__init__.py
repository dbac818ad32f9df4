"""`sheetmerge_io` top-level package exports the spreadsheet IO helpers."""

# Module responsibilities:
# - Re-export the codec, display formatting and source-table readers so consumers have a stable API surface.
# - Provide package version placeholder for future packaging.

from __future__ import annotations

from .codec import decode, detect_file_format, encode
from .formatting import format_cell
from .source_table import load_source_rows, preview_rows, read_rows, rows_to_source_rows

__all__ = [
    "decode",
    "encode",
    "detect_file_format",
    "format_cell",
    "read_rows",
    "rows_to_source_rows",
    "load_source_rows",
    "preview_rows",
]

__version__ = "0.1.0"
