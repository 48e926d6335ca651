"""Basic query execution helpers.

These wrap low-level sqlite3 operations with logging and typed return
shapes used by the higher-level student/course helpers.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any

logger = logging.getLogger(__name__)


def execute_query(
    conn: sqlite3.Connection,
    sql: str,
    params: tuple | dict | None = None,
) -> sqlite3.Cursor:
    """Execute a SQL statement and return the cursor.

    Args:
        conn: Database connection.
        sql: SQL statement with ``?`` or named placeholders.
        params: Statement parameters. Defaults to empty tuple.

    Returns:
        SQLite cursor with the statement results.

    Raises:
        sqlite3.Error: If preparing, binding, or stepping the statement fails.

    Logs:
        - DEBUG: "Executed query: {sql[:80]}" on success.
        - ERROR: "Query execution failed: {sql[:80]}" with traceback on failure.
    """
    try:
        cursor = conn.execute(sql, params or ())
        logger.debug("Executed query: %s", sql[:80])
        return cursor
    except sqlite3.Error:
        logger.exception("Query execution failed: %s", sql[:80])
        raise


def fetch_one(
    conn: sqlite3.Connection,
    sql: str,
    params: tuple | dict | None = None,
) -> dict[str, Any] | None:
    """Execute query and return single row as dict, or None if no results."""
    cursor = execute_query(conn, sql, params)
    row = cursor.fetchone()
    if row is None:
        return None
    return dict(row)


def fetch_all(
    conn: sqlite3.Connection,
    sql: str,
    params: tuple | dict | None = None,
) -> list[dict[str, Any]]:
    """Execute query and return all rows as list of dicts (empty if none)."""
    cursor = execute_query(conn, sql, params)
    return [dict(row) for row in cursor.fetchall()]


def execute_update(
    conn: sqlite3.Connection,
    sql: str,
    params: tuple | dict | None = None,
) -> int:
    """Execute UPDATE/DELETE and return number of affected rows.

    Logs:
        - DEBUG: "Update affected {rowcount} rows" on success.
    """
    cursor = execute_query(conn, sql, params)
    rowcount = cursor.rowcount
    logger.debug("Update affected %s rows", rowcount)
    return rowcount


def execute_insert(
    conn: sqlite3.Connection,
    sql: str,
    params: tuple | dict | None = None,
) -> int:
    """Execute an INSERT and return the rowid of the new row."""
    cursor = execute_query(conn, sql, params)
    row_id = cursor.lastrowid
    logger.debug("Inserted row %s", row_id)
    return int(row_id) if row_id is not None else 0
