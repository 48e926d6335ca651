"""Record-store exception types.

Every failure raised by the record layer carries an :class:`ErrorKind`
tag and a human-readable ``detail`` string, so callers can branch on the
kind without parsing messages.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Kinds of record-store failure."""

    MALFORMED_INPUT = "malformed_input"
    UNIQUENESS_VIOLATION = "uniqueness_violation"
    NOT_FOUND = "not_found"
    STORAGE_CORRUPTION = "storage_corruption"
    STORAGE_IO_FAILURE = "storage_io_failure"


class RecordStoreError(Exception):
    """Base exception for record-store errors."""

    kind: ErrorKind

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class MalformedInputError(RecordStoreError):
    """Raised when a field value is non-numeric, out of range, or unstorable."""

    kind = ErrorKind.MALFORMED_INPUT


class UniquenessViolationError(RecordStoreError):
    """Raised when an email is already used by another record."""

    kind = ErrorKind.UNIQUENESS_VIOLATION


class RecordNotFoundError(RecordStoreError):
    """Raised when no record has the requested id."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, record_id: int) -> None:
        super().__init__(f"Record not found: {record_id}")
        self.record_id = record_id


class StorageCorruptionError(RecordStoreError):
    """Raised when a persisted line cannot be parsed back into a record."""

    kind = ErrorKind.STORAGE_CORRUPTION

    def __init__(self, detail: str, *, line_number: int | None = None) -> None:
        super().__init__(detail)
        self.line_number = line_number


class StorageIOError(RecordStoreError):
    """Raised when the backing file cannot be read or written."""

    kind = ErrorKind.STORAGE_IO_FAILURE
