"""Logging helpers shared by the sheetmerge and sheetmerge_io packages."""

# Module responsibilities:
# - Own the I/O logger tree (``sheetmerge_io.*``) and its sheetmerge_io.log file.
# - Build the rotating file handler both packages write through.
# - Let the CLI change the level of every SheetMerge logger in one call.

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .paths import work_dir

IO_LOGGER_NAME = "sheetmerge_io"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_LOG_BYTES = 2 * 1024 * 1024
LOG_BACKUPS = 3


def log_directory(log_dir: Optional[Path] = None) -> Path:
    target = Path(log_dir) if log_dir is not None else work_dir() / "logs"
    target.mkdir(parents=True, exist_ok=True)
    return target


def rotating_handler(path: Path) -> RotatingFileHandler:
    """Rotating UTF-8 file handler using the shared SheetMerge line format."""

    handler = RotatingFileHandler(path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8")
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _io_root(log_dir: Optional[Path] = None) -> logging.Logger:
    root = logging.getLogger(IO_LOGGER_NAME)
    if root.handlers:
        return root

    root.addHandler(rotating_handler(log_directory(log_dir) / "sheetmerge_io.log"))
    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    # Console stays quiet for I/O chatter; the file follows the logger level.
    console.setLevel(logging.WARNING)
    root.addHandler(console)
    if root.level == logging.NOTSET:
        root.setLevel(logging.INFO)
    root.propagate = False
    return root


def set_level(level: int) -> None:
    """Apply ``level`` to the I/O logger tree."""

    logging.getLogger(IO_LOGGER_NAME).setLevel(level)


def get_logger(name: str, log_dir: Optional[Path] = None) -> logging.Logger:
    """Return ``sheetmerge_io.<name>``, configuring the tree on first use."""

    _io_root(log_dir)
    return logging.getLogger(f"{IO_LOGGER_NAME}.{name}")
