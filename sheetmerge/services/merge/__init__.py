"""Merge engine: format-preserving fill, month substitution and batch merge.

The orchestrator lives in :mod:`sheetmerge.services.merge.api`; it is not
re-exported here because it depends on the codec, which in turn depends on
the models below.
"""

from .addressing import column_letter_of, decode_range, encode_range
from .batch import merge_documents
from .clone import clone_document
from .fill import fill_column, fill_row_data
from .models import Cell, CellAddress, CellRange, Document, OutputFile, Sheet, SourceRow
from .month import DEFAULT_MONTH_COLUMNS, substitute_month

__all__ = [
    "Cell",
    "CellAddress",
    "CellRange",
    "Document",
    "OutputFile",
    "Sheet",
    "SourceRow",
    "DEFAULT_MONTH_COLUMNS",
    "column_letter_of",
    "decode_range",
    "encode_range",
    "clone_document",
    "fill_column",
    "fill_row_data",
    "substitute_month",
    "merge_documents",
]
