"""Run configuration for SheetMerge batches.

Options can be built in code or loaded from a YAML file; both paths go
through the same pydantic validation so a bad month or column letter is
rejected before any row is processed.
"""

from __future__ import annotations

import re
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from sheetmerge.core.errors import ConfigError
from sheetmerge.services.merge.month import DEFAULT_MONTH_COLUMNS


DEFAULT_MERGED_FILE_NAME = "飞行记录合并表.xlsx"
DEFAULT_DATE_FORMAT = "yyyy/m/d"
SOURCE_KEYS = ("A", "B", "C", "D")

_COLUMN_RE = re.compile(r"^[A-Z]{1,3}$")


def _current_month() -> int:
    return date.today().month


def _normalize_column(value: Any) -> str:
    text = str(value).strip().upper()
    if not _COLUMN_RE.match(text):
        raise ValueError(f"not a column letter: {value!r}")
    return text


class ColumnMapping(BaseModel):
    """Destination template column for each source field ``A``-``D``."""

    model_config = ConfigDict(frozen=True)

    A: str = "A"
    B: str = "B"
    C: str = "C"
    D: str = "G"

    @field_validator("A", "B", "C", "D", mode="before")
    @classmethod
    def _letters(cls, value: Any) -> str:
        return _normalize_column(value)

    def as_dict(self) -> Dict[str, str]:
        return {key: getattr(self, key) for key in SOURCE_KEYS}


class MergeOptions(BaseModel):
    """Per-run options constant for the whole batch."""

    model_config = ConfigDict(frozen=True)

    month: int = Field(default_factory=_current_month, ge=1, le=12)
    column_mapping: ColumnMapping = Field(default_factory=ColumnMapping)
    month_columns: List[str] = Field(default_factory=lambda: list(DEFAULT_MONTH_COLUMNS))
    month_token: str = "3"
    merged_file_name: str = DEFAULT_MERGED_FILE_NAME
    date_format: str = DEFAULT_DATE_FORMAT

    @field_validator("month_columns", mode="before")
    @classmethod
    def _month_columns(cls, value: Any) -> List[str]:
        if isinstance(value, str):
            value = [part for part in value.split(",") if part.strip()]
        return [_normalize_column(item) for item in value]

    @field_validator("month_token", mode="before")
    @classmethod
    def _token(cls, value: Any) -> str:
        text = str(value).strip()
        if not text or "/" in text:
            raise ValueError("month_token must be non-empty and contain no '/'")
        return text

    @field_validator("date_format", mode="before")
    @classmethod
    def _date_format(cls, value: Any) -> str:
        text = str(value).strip()
        if not text:
            raise ValueError("date_format must be non-empty")
        return text

    def with_overrides(
        self,
        month: int | None = None,
        mapping: Mapping[str, str] | None = None,
    ) -> "MergeOptions":
        """Return a copy with CLI-style overrides applied and re-validated."""

        payload = self.model_dump()
        if month is not None:
            payload["month"] = month
        if mapping:
            merged = dict(payload["column_mapping"])
            merged.update({key.upper(): value for key, value in mapping.items()})
            unknown = set(merged) - set(SOURCE_KEYS)
            if unknown:
                raise ConfigError(f"Unknown source columns in mapping: {', '.join(sorted(unknown))}")
            payload["column_mapping"] = merged
        try:
            return MergeOptions.model_validate(payload)
        except ValidationError as exc:
            raise ConfigError(f"Invalid merge options: {exc}") from exc


def load_options(path: str | Path) -> MergeOptions:
    """Load merge options from a YAML file.

    Raises:
        ConfigError: When the file is missing, not a mapping, or invalid.
    """

    cfg_path = Path(path)
    if not cfg_path.exists():
        raise ConfigError(f"Config file not found: {cfg_path}")
    with cfg_path.open("r", encoding="utf-8") as fh:
        try:
            data = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {cfg_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError("Invalid config structure (expected mapping)")
    try:
        return MergeOptions.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid merge options in {cfg_path}: {exc}") from exc


def parse_mapping_overrides(items: List[str]) -> Dict[str, str]:
    """Parse ``SRC=DEST`` pairs such as ``D=G``."""

    overrides: Dict[str, str] = {}
    for item in items:
        try:
            source, target = item.split("=")
        except ValueError as exc:
            raise ConfigError(f"Invalid mapping override: {item}") from exc
        overrides[source.strip().upper()] = target.strip().upper()
    return overrides


__all__ = [
    "ColumnMapping",
    "MergeOptions",
    "DEFAULT_DATE_FORMAT",
    "DEFAULT_MERGED_FILE_NAME",
    "DEFAULT_MONTH_COLUMNS",
    "load_options",
    "parse_mapping_overrides",
]
