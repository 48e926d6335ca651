"""Tests for the database package behind the SQL wrapper."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from ambidb.database import (
    CURRENT_SCHEMA_VERSION,
    DatabaseError,
    IntegrityError,
    NotFoundError,
    add_student,
    create_table,
    delete_student,
    enroll,
    get_connection,
    get_schema_version,
    initialize_database,
    list_enrollments,
    list_students,
    run_query,
    select,
    transaction,
    update_student_email,
)
from ambidb.database.crud import validate_identifier


class TestInitialize:
    """Tests for schema initialization and seeding."""

    @pytest.mark.integration
    def test_records_schema_version(self, db_conn: sqlite3.Connection) -> None:
        assert get_schema_version(db_conn) == CURRENT_SCHEMA_VERSION

    @pytest.mark.integration
    def test_seed_is_idempotent(self, sqlite_path: Path) -> None:
        initialize_database(db_path=sqlite_path, with_seed=True)
        initialize_database(db_path=sqlite_path, with_seed=True)

        conn = get_connection(db_path=sqlite_path)
        try:
            students = list_students(conn)
            courses = select(conn, "courses", order_by="code")
        finally:
            conn.close()

        assert [s["email"] for s in students] == [
            "ada@example.edu",
            "alan@example.edu",
            "grace@example.edu",
        ]
        assert [c["code"] for c in courses] == ["CS101", "CS201", "MA101"]

    @pytest.mark.integration
    def test_fresh_database_has_no_version(self, sqlite_path: Path) -> None:
        conn = get_connection(db_path=sqlite_path)
        try:
            assert get_schema_version(conn) is None
        finally:
            conn.close()


class TestStudents:
    """Tests for student CRUD helpers."""

    @pytest.mark.integration
    def test_add_student_returns_id(self, db_conn: sqlite3.Connection) -> None:
        first = add_student(db_conn, "Ada", "ada@x.com")
        second = add_student(db_conn, "Alan", "alan@x.com")

        assert (first["id"], second["id"]) == (1, 2)
        assert first["created_at"].endswith("Z")

    @pytest.mark.integration
    def test_duplicate_email_is_integrity_error(self, db_conn: sqlite3.Connection) -> None:
        add_student(db_conn, "Ada", "ada@x.com")
        with pytest.raises(IntegrityError):
            add_student(db_conn, "Other", "ada@x.com")

    @pytest.mark.integration
    def test_update_email(self, db_conn: sqlite3.Connection) -> None:
        row = add_student(db_conn, "Ada", "ada@x.com")

        assert update_student_email(db_conn, row["id"], "lovelace@x.com") == 1
        assert list_students(db_conn)[0]["email"] == "lovelace@x.com"

    @pytest.mark.integration
    def test_update_missing_student_is_not_found(self, db_conn: sqlite3.Connection) -> None:
        with pytest.raises(NotFoundError):
            update_student_email(db_conn, 99, "x@x.com")

    @pytest.mark.integration
    def test_update_to_taken_email_is_integrity_error(self, db_conn: sqlite3.Connection) -> None:
        add_student(db_conn, "Ada", "ada@x.com")
        alan = add_student(db_conn, "Alan", "alan@x.com")
        with pytest.raises(IntegrityError):
            update_student_email(db_conn, alan["id"], "ada@x.com")

    @pytest.mark.integration
    def test_delete_missing_student_is_not_found(self, db_conn: sqlite3.Connection) -> None:
        with pytest.raises(NotFoundError):
            delete_student(db_conn, 99)


class TestEnrollments:
    """Tests for enroll / list_enrollments."""

    @pytest.fixture
    def seeded_conn(self, sqlite_path: Path):
        initialize_database(db_path=sqlite_path, with_seed=True)
        conn = get_connection(db_path=sqlite_path)
        try:
            yield conn
        finally:
            conn.close()

    @pytest.mark.integration
    def test_enroll_and_list(self, seeded_conn: sqlite3.Connection) -> None:
        enroll(seeded_conn, 1, "CS101")
        enroll(seeded_conn, 1, "MA101")
        enroll(seeded_conn, 2, "CS101")

        all_rows = list_enrollments(seeded_conn)
        ada_rows = list_enrollments(seeded_conn, student_id=1)

        assert [(r["student_id"], r["course_code"]) for r in all_rows] == [
            (1, "CS101"),
            (1, "MA101"),
            (2, "CS101"),
        ]
        assert [r["course_title"] for r in ada_rows] == [
            "Introduction to Databases",
            "Discrete Mathematics",
        ]

    @pytest.mark.integration
    def test_enroll_unknown_course(self, seeded_conn: sqlite3.Connection) -> None:
        with pytest.raises(NotFoundError, match="NOPE"):
            enroll(seeded_conn, 1, "NOPE")

    @pytest.mark.integration
    def test_enroll_unknown_student(self, seeded_conn: sqlite3.Connection) -> None:
        with pytest.raises(NotFoundError):
            enroll(seeded_conn, 99, "CS101")

    @pytest.mark.integration
    def test_enroll_twice_is_integrity_error(self, seeded_conn: sqlite3.Connection) -> None:
        enroll(seeded_conn, 1, "CS101")
        with pytest.raises(IntegrityError):
            enroll(seeded_conn, 1, "CS101")

    @pytest.mark.integration
    def test_deleting_student_cascades(self, seeded_conn: sqlite3.Connection) -> None:
        enroll(seeded_conn, 1, "CS101")
        enroll(seeded_conn, 2, "CS101")

        delete_student(seeded_conn, 1)

        assert [r["student_id"] for r in list_enrollments(seeded_conn)] == [2]


class TestQueryAndTables:
    """Tests for run_query, create_table and transaction."""

    @pytest.mark.integration
    def test_select_returns_columns_and_rows(self, db_conn: sqlite3.Connection) -> None:
        add_student(db_conn, "Ada", "ada@x.com")

        result = run_query(db_conn, "SELECT id, name FROM students")

        assert result.returns_rows
        assert result.columns == ["id", "name"]
        assert result.rows == [(1, "Ada")]

    @pytest.mark.integration
    def test_write_returns_rowcount(self, db_conn: sqlite3.Connection) -> None:
        add_student(db_conn, "Ada", "ada@x.com")
        add_student(db_conn, "Alan", "alan@x.com")

        result = run_query(db_conn, "UPDATE students SET name = upper(name)")

        assert not result.returns_rows
        assert result.rowcount == 2

    @pytest.mark.integration
    def test_bad_sql_is_database_error(self, db_conn: sqlite3.Connection) -> None:
        with pytest.raises(DatabaseError):
            run_query(db_conn, "SELEC nonsense")

    @pytest.mark.unit
    def test_empty_query_rejected(self, db_conn: sqlite3.Connection) -> None:
        with pytest.raises(ValueError):
            run_query(db_conn, "   ")

    @pytest.mark.integration
    def test_create_table(self, db_conn: sqlite3.Connection) -> None:
        create_table(db_conn, "notes", ["id INTEGER PRIMARY KEY", "body TEXT NOT NULL"])
        run_query(db_conn, "INSERT INTO notes (body) VALUES ('hello')")

        assert run_query(db_conn, "SELECT body FROM notes").rows == [("hello",)]

    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["", "1abc", "bad-name", "x; DROP TABLE students", "tablé"])
    def test_unsafe_identifiers_rejected(self, name: str) -> None:
        with pytest.raises(ValueError, match="Unsafe SQL identifier"):
            validate_identifier(name)

    @pytest.mark.integration
    def test_create_table_requires_columns(self, db_conn: sqlite3.Connection) -> None:
        with pytest.raises(ValueError):
            create_table(db_conn, "empty", [])

    @pytest.mark.integration
    def test_transaction_rolls_back_on_error(self, db_conn: sqlite3.Connection, sqlite_path: Path) -> None:
        with pytest.raises(IntegrityError):
            with transaction(db_path=sqlite_path) as conn:
                add_student(conn, "Ada", "ada@x.com")
                add_student(conn, "Dup", "ada@x.com")

        assert list_students(db_conn) == []
