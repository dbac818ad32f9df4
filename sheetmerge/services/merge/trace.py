"""Optional per-cell tracing for the merge engine."""

from __future__ import annotations

import logging
from typing import Any, Protocol

LOGGER = logging.getLogger(__name__)


class TraceSink(Protocol):
    """Receives structured trace events emitted by fill and substitution."""

    def emit(self, event: str, **fields: Any) -> None:  # pragma: no cover - interface definition
        ...


class NullTraceSink:
    """Discards every event."""

    def emit(self, event: str, **fields: Any) -> None:
        return None


class LoggingTraceSink:
    """Forwards trace events to a logger at DEBUG level."""

    def __init__(self, logger: logging.Logger | None = None, level: int = logging.DEBUG) -> None:
        self.logger = logger or LOGGER
        self.level = level

    def emit(self, event: str, **fields: Any) -> None:
        if self.logger.isEnabledFor(self.level):
            self.logger.log(self.level, "%s %s", event, fields, extra={"trace": fields})


class RecordingTraceSink:
    """Keeps events in memory; handy for diagnostics and tests."""

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def emit(self, event: str, **fields: Any) -> None:
        self.events.append((event, dict(fields)))

    def of(self, event: str) -> list[dict[str, Any]]:
        return [fields for name, fields in self.events if name == event]


NULL_SINK = NullTraceSink()

__all__ = ["TraceSink", "NullTraceSink", "LoggingTraceSink", "RecordingTraceSink", "NULL_SINK"]
