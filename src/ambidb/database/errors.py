"""Database-specific exception types for the SQL wrapper."""

from __future__ import annotations

import sqlite3
from typing import Any


class DatabaseError(Exception):
    """Base exception for database-related errors."""


class IntegrityError(DatabaseError):
    """Raised when a constraint violation occurs (duplicate email, bad FK)."""


class NotFoundError(DatabaseError):
    """Raised when a requested row is missing or a write affects no rows."""


class DatabaseLockedError(DatabaseError):
    """Raised when the database file is held open by another process."""


def from_sqlite_error(error: sqlite3.Error) -> DatabaseError:
    """Map a raw sqlite3 error to a project-level DatabaseError.

    Args:
        error: SQLite exception to convert.

    Returns:
        IntegrityError for constraint violations, DatabaseLockedError for
        "database is locked", DatabaseError otherwise.
    """
    if isinstance(error, sqlite3.IntegrityError):
        return IntegrityError(str(error))
    if isinstance(error, sqlite3.OperationalError) and "locked" in str(error).lower():
        return DatabaseLockedError(str(error))
    return DatabaseError(str(error))


def ensure_found(row: Any, message: str = "Row not found") -> Any:
    """Raise NotFoundError if a row is missing, otherwise return it."""
    if row is None:
        raise NotFoundError(message)
    return row


def ensure_affected(rowcount: int, message: str) -> int:
    """Raise NotFoundError if a write touched no rows, otherwise return rowcount."""
    if rowcount == 0:
        raise NotFoundError(message)
    return rowcount
