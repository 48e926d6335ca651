from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from pathlib import Path

import pytest

from ambidb import global_config as g
from ambidb.database import get_connection, initialize_database
from ambidb.records import Record


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Clears path overrides so tests never pick up a developer's real data file
    or database. Automatically applied to all tests.
    """
    monkeypatch.delenv(g.DATA_FILE_ENV_VAR, raising=False)
    monkeypatch.delenv(g.DB_PATH_ENV_VAR, raising=False)


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """
    A dedicated temp root directory for each test.
    All filesystem writes in tests should be under this root (or tmp_path directly).
    """
    root = tmp_path / "proj"
    (root / "data").mkdir(parents=True)
    (root / "db").mkdir(parents=True)
    return root


@pytest.fixture(autouse=True)
def chdir_to_project_root(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Automatically change working directory to project_root for all tests.
    This ensures default relative paths (ambidb_records.txt, db/) land in the temp directory.
    """
    monkeypatch.chdir(project_root)


@pytest.fixture
def data_file(project_root: Path) -> Path:
    """Flat-file record store path under the temp project root (not created)."""
    return project_root / "data" / "records.txt"


@pytest.fixture
def sample_records() -> list[Record]:
    return [
        Record(id=1, name="Ada", age=36, department="CS", email="ada@x.com"),
        Record(id=2, name="Alan", age=41, department="Math", email="alan@x.com"),
        Record(id=3, name="Grace", age=50, department="Navy", email="grace@x.com"),
    ]


@pytest.fixture
def sqlite_path(project_root: Path) -> Path:
    """
    On-disk SQLite DB under the temp project root (more realistic than :memory:).
    """
    return project_root / "db" / "test.sqlite"


@pytest.fixture
def db_conn(sqlite_path: Path, project_root: Path) -> Iterator[sqlite3.Connection]:
    """
    A connection to a freshly initialized (schema only) database, always
    closed after each test.

    Path assertion: DB must be under project_root (prevents touching real DBs).
    """
    try:
        sqlite_path.resolve().relative_to(project_root.resolve())
    except ValueError:
        raise AssertionError(
            f"SQLite path {sqlite_path} is not under project_root {project_root}. "
            "This prevents accidental writes to real databases."
        )

    initialize_database(db_path=sqlite_path)
    conn = get_connection(db_path=sqlite_path)
    try:
        yield conn
    finally:
        conn.close()
