"""Data models used by the merge engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, NamedTuple, Optional, Tuple


class CellAddress(NamedTuple):
    """Zero-based ``(row, col)`` coordinate of a cell."""

    row: int
    col: int


@dataclass(frozen=True, slots=True)
class CellRange:
    """Rectangular extent a sheet declares as occupied."""

    start: CellAddress
    end: CellAddress


@dataclass(slots=True)
class Cell:
    """One addressable cell with its value and preserved formatting.

    ``data_type`` uses the openpyxl type codes (``n``, ``s``, ``b``, ``d``,
    ``e``, ``f``, ``inlineStr``). ``style_ref`` holds the container's
    style-table indices and is only meaningful together with the container
    the cell was decoded from.
    """

    value: Any = None
    data_type: str = "n"
    formula: Optional[str] = None
    number_format: str = "General"
    style_ref: Optional[Tuple[int, ...]] = None
    hyperlink: Optional[str] = None
    comment: Optional[str] = None

    def copy(self) -> "Cell":
        """Return an independent copy carrying every attribute."""

        return Cell(
            value=self.value,
            data_type=self.data_type,
            formula=self.formula,
            number_format=self.number_format,
            style_ref=self.style_ref,
            hyperlink=self.hyperlink,
            comment=self.comment,
        )


@dataclass(slots=True)
class Sheet:
    """Sparse cell mapping plus the declared occupied range."""

    name: str
    cells: Dict[CellAddress, Cell] = field(default_factory=dict)
    ref: Optional[str] = None
    meta: Dict[str, Any] = field(default_factory=dict)

    def get(self, row: int, col: int) -> Optional[Cell]:
        return self.cells.get(CellAddress(row, col))

    def set(self, row: int, col: int, cell: Cell) -> None:
        self.cells[CellAddress(row, col)] = cell


@dataclass(slots=True)
class Document:
    """A decoded workbook: ordered sheets plus the container bytes."""

    sheets: List[Sheet] = field(default_factory=list)
    container: bytes = b""
    props: Dict[str, Any] = field(default_factory=dict)

    @property
    def sheet_names(self) -> List[str]:
        return [sheet.name for sheet in self.sheets]

    @property
    def first_sheet(self) -> Optional[Sheet]:
        return self.sheets[0] if self.sheets else None


@dataclass(frozen=True, slots=True)
class SourceRow:
    """One record from the source table driving one generated document."""

    name: str
    column_a: str
    column_b: str = ""
    column_c: str = ""
    column_d: str = ""

    def value_for(self, key: str) -> str:
        """Return the field stored under source column ``key`` (``A``-``D``)."""

        try:
            return {
                "A": self.column_a,
                "B": self.column_b,
                "C": self.column_c,
                "D": self.column_d,
            }[key.upper()]
        except KeyError:
            raise KeyError(f"Unknown source column: {key}") from None


@dataclass(frozen=True, slots=True)
class OutputFile:
    """A generated workbook ready for packaging or download."""

    name: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


__all__ = [
    "Cell",
    "CellAddress",
    "CellRange",
    "Document",
    "OutputFile",
    "Sheet",
    "SourceRow",
]
