"""Database initialization using schema and seed SQL files.

This module creates a fresh database (or brings an existing one up to the
current schema) by executing the packaged `sql/schema.sql` and optionally
`sql/seed_data.sql`, and maintains a minimal `schema_meta` table holding
the `schema_version`. It also creates caller-defined tables.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Sequence
from pathlib import Path

from .. import global_config as g
from .connection import execute_script, get_connection
from .crud import validate_identifier
from .errors import from_sqlite_error
from .queries import fetch_one

logger = logging.getLogger(__name__)

CURRENT_SCHEMA_VERSION = 1


def _schema_path() -> Path:
    return g.SQL_DIR / "schema.sql"


def _seed_path() -> Path:
    return g.SQL_DIR / "seed_data.sql"


def _ensure_schema_meta(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS schema_meta (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        )
        """
    )


def _set_schema_version(conn: sqlite3.Connection, version: int) -> None:
    """Upsert the schema_version entry in schema_meta."""
    _ensure_schema_meta(conn)
    conn.execute(
        """
        INSERT INTO schema_meta (key, value)
        VALUES ('schema_version', ?)
        ON CONFLICT(key) DO UPDATE SET value = excluded.value
        """,
        (str(version),),
    )


def get_schema_version(conn: sqlite3.Connection) -> int | None:
    """Return the recorded schema version, or None for an uninitialized database."""
    _ensure_schema_meta(conn)
    row = fetch_one(conn, "SELECT value FROM schema_meta WHERE key = 'schema_version'")
    return int(row["value"]) if row else None


def initialize_database(
    db_path: Path | None = None,
    *,
    with_seed: bool = False,
) -> None:
    """Initialize the database using `schema.sql` and optional `seed_data.sql`.

    Safe to re-run: the schema is idempotent and the seed uses
    INSERT OR IGNORE.

    Args:
        db_path: Path to SQLite database file. Defaults to global config.
        with_seed: If True, also execute seed_data.sql after schema.sql.

    Raises:
        FileNotFoundError: If a required SQL file is missing.
        DatabaseError: If SQL execution fails.

    Logs:
        - INFO: "Initializing database (with_seed={with_seed})" at start.
        - INFO: "Database initialization complete (schema_version={version})".
    """
    schema_file = _schema_path()
    seed_file = _seed_path()

    if not schema_file.exists():
        msg = f"Schema file not found: {schema_file}"
        raise FileNotFoundError(msg)

    if with_seed and not seed_file.exists():
        msg = f"Seed data file not found: {seed_file}"
        raise FileNotFoundError(msg)

    logger.info("Initializing database (with_seed=%s)", with_seed)

    schema_sql = schema_file.read_text(encoding="utf-8")
    seed_sql = seed_file.read_text(encoding="utf-8") if with_seed else None

    conn = get_connection(db_path=db_path)
    try:
        execute_script(conn, schema_sql, description="schema.sql")
        if seed_sql:
            execute_script(conn, seed_sql, description="seed_data.sql")
        _set_schema_version(conn, CURRENT_SCHEMA_VERSION)
        conn.commit()
        logger.info("Database initialization complete (schema_version=%s)", CURRENT_SCHEMA_VERSION)
    except sqlite3.Error as exc:
        conn.rollback()
        raise from_sqlite_error(exc) from exc
    finally:
        conn.close()


def create_table(
    conn: sqlite3.Connection,
    table: str,
    columns: Sequence[str],
) -> None:
    """Create a caller-defined table if it does not already exist.

    Args:
        conn: Database connection (caller manages transaction).
        table: Table name; must be a plain identifier.
        columns: Column definitions, e.g. ``"id INTEGER PRIMARY KEY"``.

    Raises:
        ValueError: If the table name is unsafe or no columns are given.
        DatabaseError: If the engine rejects the definition.

    Logs:
        - INFO: "Created table {table}" on success.
    """
    validate_identifier(table)
    if not columns:
        msg = "At least one column definition is required"
        raise ValueError(msg)

    sql = f"CREATE TABLE IF NOT EXISTS {table} ({', '.join(columns)})"
    try:
        conn.execute(sql)
    except sqlite3.Error as exc:
        raise from_sqlite_error(exc) from exc
    logger.info("Created table %s", table)
