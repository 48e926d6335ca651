"""Generic CRUD helpers built on top of the low-level query helpers.

These functions operate on table names and dict-like row data and are
intended to stay low-level and generic. They do *not* open or close
connections; callers are responsible for providing a connection and
managing transaction boundaries.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import UTC, datetime
from typing import Any, Mapping

from . import queries
from .errors import from_sqlite_error

logger = logging.getLogger(__name__)


def now_iso() -> str:
    """Return current UTC time as canonical instant string YYYY-MM-DDTHH:MM:SSZ."""
    return datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


def validate_identifier(name: str) -> None:
    """Validate SQL identifier to prevent injection.

    Accepts ASCII letters, digits and underscores, not starting with a
    digit. This is a basic safeguard, not comprehensive protection.

    Raises:
        ValueError: If identifier is empty or contains unsafe characters.
    """
    valid = (
        bool(name)
        and name.isascii()
        and name.replace("_", "").isalnum()
        and not name[0].isdigit()
    )
    if not valid:
        msg = f"Unsafe SQL identifier: {name!r}"
        raise ValueError(msg)


def _where(filters: Mapping[str, Any]) -> tuple[str, list[Any]]:
    clauses: list[str] = []
    params: list[Any] = []
    for col, value in filters.items():
        validate_identifier(col)
        clauses.append(f"{col} = ?")
        params.append(value)
    return " AND ".join(clauses), params


def insert(
    conn: sqlite3.Connection,
    table: str,
    data: Mapping[str, Any],
    *,
    timestamps: bool = True,
) -> dict[str, Any]:
    """Insert a single record into table and return the inserted data.

    Adds created_at and updated_at timestamps if they are not present in
    data (unless timestamps is False). The returned dict includes the new
    rowid under ``id`` when the caller did not supply one.

    Args:
        conn: Database connection (caller manages transaction).
        table: Table name to insert into.
        data: Column name to value mapping for the new record.
        timestamps: Whether to add created_at/updated_at.

    Returns:
        Dictionary containing the inserted data.

    Raises:
        ValueError: If table or column name is invalid.
        IntegrityError: If constraint violation occurs.
        DatabaseError: If database operation fails.

    Logs:
        - DEBUG: "Inserted record into {table}" on success.
    """
    validate_identifier(table)
    payload = dict(data)
    if timestamps:
        now = now_iso()
        payload.setdefault("created_at", now)
        payload.setdefault("updated_at", now)

    for col in payload:
        validate_identifier(col)
    columns = ", ".join(payload.keys())
    placeholders = ", ".join("?" for _ in payload)
    sql = f"INSERT INTO {table} ({columns}) VALUES ({placeholders})"  # noqa: S608

    try:
        row_id = queries.execute_insert(conn, sql, tuple(payload.values()))
    except sqlite3.Error as exc:
        raise from_sqlite_error(exc) from exc

    payload.setdefault("id", row_id)
    logger.debug("Inserted record into %s", table)
    return payload


def select(
    conn: sqlite3.Connection,
    table: str,
    filters: Mapping[str, Any] | None = None,
    *,
    order_by: str | None = None,
    limit: int | None = None,
) -> list[dict[str, Any]]:
    """Select rows from table using simple equality filters.

    Args:
        conn: Database connection.
        table: Table name to query.
        filters: Column name to value mapping, ANDed together.
        order_by: Column name to sort by (optional).
        limit: Maximum number of rows to return (optional).

    Returns:
        List of dictionaries, one per row.

    Raises:
        ValueError: If table, column names, or order_by are invalid.
        DatabaseError: If database operation fails.
    """
    validate_identifier(table)
    sql = f"SELECT * FROM {table}"  # noqa: S608
    params: list[Any] = []

    if filters:
        where, params = _where(filters)
        sql += " WHERE " + where

    if order_by:
        validate_identifier(order_by)
        sql += f" ORDER BY {order_by}"

    if limit is not None:
        sql += " LIMIT ?"
        params.append(limit)

    try:
        return queries.fetch_all(conn, sql, tuple(params))
    except sqlite3.Error as exc:
        raise from_sqlite_error(exc) from exc


def update(
    conn: sqlite3.Connection,
    table: str,
    filters: Mapping[str, Any],
    values: Mapping[str, Any],
) -> int:
    """Update rows in table matching filters with values.

    Sets updated_at automatically. Requires at least one filter to prevent
    accidental full-table updates.

    Returns:
        Number of rows affected by the update.

    Raises:
        ValueError: If table/column names are invalid or filters is empty.
        IntegrityError: If constraint violation occurs.
        DatabaseError: If database operation fails.
    """
    validate_identifier(table)
    if not filters:
        msg = "Refusing to perform UPDATE with no filters"
        raise ValueError(msg)

    payload = dict(values)
    payload["updated_at"] = now_iso()

    set_clauses: list[str] = []
    params: list[Any] = []
    for col, value in payload.items():
        validate_identifier(col)
        set_clauses.append(f"{col} = ?")
        params.append(value)

    where, where_params = _where(filters)
    sql = f"UPDATE {table} SET {', '.join(set_clauses)} WHERE {where}"  # noqa: S608

    try:
        return queries.execute_update(conn, sql, tuple(params + where_params))
    except sqlite3.Error as exc:
        raise from_sqlite_error(exc) from exc


def delete(
    conn: sqlite3.Connection,
    table: str,
    filters: Mapping[str, Any],
) -> int:
    """Delete rows from table matching filters.

    Requires at least one filter to prevent accidental full-table deletes.

    Returns:
        Number of rows deleted.

    Raises:
        ValueError: If table/column names are invalid or filters is empty.
        DatabaseError: If database operation fails.
    """
    validate_identifier(table)
    if not filters:
        msg = "Refusing to perform DELETE with no filters"
        raise ValueError(msg)

    where, params = _where(filters)
    sql = f"DELETE FROM {table} WHERE {where}"  # noqa: S608

    try:
        return queries.execute_update(conn, sql, tuple(params))
    except sqlite3.Error as exc:
        raise from_sqlite_error(exc) from exc
