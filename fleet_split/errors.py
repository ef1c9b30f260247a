from __future__ import annotations

from enum import Enum

"""Error taxonomy for the report split pipeline.

Every failure surfaced to a caller is a ``SplitError`` subclass carrying a
single UPPER_SNAKE classification (``error_type``) plus a human-readable
message. The CLI writes both into the JSON Lines error log.
"""

__all__ = [
    "SplitError",
    "ReadErrorKind",
    "ReadError",
    "FilterError",
    "WriteError",
    "ArchiveError",
    "UnknownProcessingError",
]


class SplitError(Exception):
    """Base exception for pipeline failures."""

    error_type = "SPLIT_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ReadErrorKind(Enum):
    EMPTY = "EMPTY"
    MISSING_COLUMN = "MISSING_COLUMN"


class ReadError(SplitError):
    """Raised when the source sheet cannot be used as a report.

    ``kind`` tells apart an empty sheet from a sheet lacking the grouping
    column; ``column`` is set for the latter.
    """

    def __init__(self, kind: ReadErrorKind, message: str, column: str | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.column = column

    @property
    def error_type(self) -> str:  # type: ignore[override]
        return f"READ_{self.kind.value}"

    @classmethod
    def empty(cls) -> ReadError:
        return cls(ReadErrorKind.EMPTY, "Excel file is empty")

    @classmethod
    def missing_column(cls, column: str) -> ReadError:
        return cls(
            ReadErrorKind.MISSING_COLUMN,
            f'Column "{column}" not found. Please ensure the Excel file contains this column',
            column=column,
        )


class FilterError(SplitError):
    """Raised when no row passes the status filter."""

    error_type = "NO_MATCHES"


class WriteError(SplitError):
    """Raised when a group's rows cannot be serialized to a workbook."""

    error_type = "WRITE_ERROR"


class ArchiveError(SplitError):
    """Raised when the ZIP archive cannot be assembled."""

    error_type = "ARCHIVE_ERROR"


class UnknownProcessingError(SplitError):
    """Wraps any other exception raised while processing."""

    error_type = "UNKNOWN_ERROR"
