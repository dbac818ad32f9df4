"""Custom exceptions used across SheetMerge."""


class SheetMergeError(Exception):
    """Base error for the application."""


class ConfigError(SheetMergeError):
    """Configuration related error."""


class DecodeError(SheetMergeError):
    """Raised when bytes are not a recognised spreadsheet container."""


class EmptySourceError(SheetMergeError):
    """Raised when the source table yields no usable rows."""


class EmptyInputError(SheetMergeError):
    """Raised when a merge is requested over zero documents."""


class InvalidStateError(SheetMergeError):
    """Raised when a run is started from a terminal state without reset."""


class RowProcessingError(SheetMergeError):
    """Raised when one row of the batch fails to clone, fill or serialize."""

    def __init__(self, row_index: int, row_name: str, reason: str) -> None:
        super().__init__(f"Row {row_index} ({row_name}) failed: {reason}")
        self.row_index = row_index
        self.row_name = row_name
        self.reason = reason
