"""Filesystem helpers for the standard SheetMerge workspace structure."""

# Module responsibilities:
# - Define the default ~/SheetMerge directory layout and create folders on demand.
# - Write a batch of generated files into one output directory, refusing duplicates.

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional

if TYPE_CHECKING:  # pragma: no cover - typing only
    from sheetmerge.services.merge.models import OutputFile

DEFAULT_BASE = Path.home() / "SheetMerge"
HOME_ENV_VAR = "SHEETMERGE_HOME"


def work_dir() -> Path:
    """Return the workspace base, honouring ``SHEETMERGE_HOME`` when set."""

    env = os.getenv(HOME_ENV_VAR)
    if env:
        return Path(env)
    return DEFAULT_BASE


def ensure_default_structure(base: Optional[Path] = None) -> Dict[str, Path]:
    """Ensure the default SheetMerge directory structure exists.

    Args:
        base: Optional override for the SheetMerge base directory.

    Returns:
        Mapping with keys ``base``, ``inbox``, ``out``, ``logs``.
    """

    target_base = base or work_dir()
    paths = {
        "base": target_base,
        "inbox": target_base / "inbox",
        "out": target_base / "out",
        "logs": target_base / "logs",
    }
    for path in paths.values():
        path.mkdir(parents=True, exist_ok=True)
    return paths


def write_outputs(files: Iterable["OutputFile"], out_dir: Path) -> List[Path]:
    """Write generated files into ``out_dir`` and return their paths.

    Raises:
        FileExistsError: When two outputs resolve to the same file name.
    """

    out_dir.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    for item in files:
        target = out_dir / item.name
        if target in written:
            raise FileExistsError(f"Duplicate output name in batch: {item.name}")
        target.write_bytes(item.data)
        written.append(target)
    return written
