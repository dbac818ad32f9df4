from __future__ import annotations

import logging
from pathlib import Path
import sys

from sheetmerge_io.utils import log as io_log


APP_LOGGER_NAME = "sheetmerge"
_LOGGER: logging.Logger | None = None


def get_logger(log_dir: Path | None = None) -> logging.Logger:
    """Return the application logger writing to <work>/logs/app.log and stdout.

    Handlers are rebuilt whenever the cached logger is reset, so a logger
    re-created for a new workspace never writes to a stale stream.
    """
    global _LOGGER
    if _LOGGER is not None:
        return _LOGGER

    logger = logging.getLogger(APP_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.INFO)
    logger.propagate = False

    logger.addHandler(io_log.rotating_handler(io_log.log_directory(log_dir) / "app.log"))
    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(logging.Formatter(fmt=io_log.LOG_FORMAT, datefmt=io_log.DATE_FORMAT))
    logger.addHandler(console)

    _LOGGER = logger
    return logger


def set_level(level: int) -> None:
    """Set ``level`` on the application and I/O loggers alike."""

    get_logger().setLevel(level)
    io_log.set_level(level)
