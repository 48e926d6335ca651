"""Database connection helpers.

This module provides the small, synchronous API through which the SQL
wrapper reaches the embedded engine: open a configured connection, run a
block inside a transaction, and execute multi-statement scripts.
"""

from __future__ import annotations

import contextlib
import logging
import sqlite3
from collections.abc import Iterator
from pathlib import Path

from .. import global_config as g
from .errors import from_sqlite_error

logger = logging.getLogger(__name__)


def _ensure_parent_dir(db_path: Path) -> None:
    """Ensure the parent directory for a database file exists."""
    db_path.parent.mkdir(parents=True, exist_ok=True)


def _configure_connection(conn: sqlite3.Connection) -> None:
    """Apply standard pragmas and row factory to a new connection.

    - row_factory is sqlite3.Row for dict-like access
    - foreign key constraints are enforced (enrollments cascade on delete)
    """
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")


def get_connection(db_path: Path | None = None) -> sqlite3.Connection:
    """Return a configured SQLite connection.

    Args:
        db_path: Path to SQLite database file. Defaults to
            global_config.DEFAULT_DB_PATH.

    Returns:
        Configured SQLite connection ready for use.

    Raises:
        DatabaseError: If the database cannot be opened.

    Logs:
        - DEBUG: "Opening SQLite database at {path}" when creating connection.

    Side Effects:
        - Creates parent directory and database file if they don't exist.
    """
    resolved = Path(db_path) if db_path is not None else g.DEFAULT_DB_PATH

    _ensure_parent_dir(resolved)
    logger.debug("Opening SQLite database at %s", resolved)
    try:
        conn = sqlite3.connect(str(resolved))
        _configure_connection(conn)
    except sqlite3.Error as exc:
        raise from_sqlite_error(exc) from exc
    return conn


@contextlib.contextmanager
def transaction(
    db_path: Path | None = None,
    existing_connection: sqlite3.Connection | None = None,
) -> Iterator[sqlite3.Connection]:
    """Context manager for a transactional connection block.

    Commits on success and rolls back on error. If an existing connection
    is provided, it is reused and not closed; otherwise a new connection is
    opened and closed on exit.

    Args:
        db_path: Path to database file (only used if existing_connection
            is None). Defaults to global config.
        existing_connection: Existing connection to reuse.

    Yields:
        SQLite connection ready for database operations.

    Logs:
        - DEBUG: "Beginning transaction" / "Transaction committed".
        - ERROR: "Transaction rolled back due to error" with traceback on failure.
    """
    owns_connection = existing_connection is None
    conn = existing_connection or get_connection(db_path=db_path)

    try:
        logger.debug("Beginning transaction")
        yield conn
        conn.commit()
        logger.debug("Transaction committed")
    except Exception:
        logger.exception("Transaction rolled back due to error")
        conn.rollback()
        raise
    finally:
        if owns_connection:
            conn.close()
            logger.debug("Connection closed")


def execute_script(conn: sqlite3.Connection, sql: str, *, description: str) -> None:
    """Execute a multi-statement SQL script with logging.

    Args:
        conn: Database connection to execute script on.
        sql: Multi-statement SQL script to execute.
        description: Human-readable description for logging purposes.

    Raises:
        sqlite3.Error: If script execution fails.

    Logs:
        - INFO: "Executing SQL script: {description}" before execution.
        - ERROR: "Failed while executing SQL script: {description}" on failure.
    """
    logger.info("Executing SQL script: %s", description)
    try:
        conn.executescript(sql)
    except sqlite3.Error:
        logger.exception("Failed while executing SQL script: %s", description)
        raise
