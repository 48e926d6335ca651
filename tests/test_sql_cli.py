"""Tests for the SQL wrapper subcommands (`ambidb sql ...`)."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from ambidb.cli.commands.sql import app as sql_app
from ambidb.cli.main import app
from ambidb.database import get_connection, list_enrollments, list_students

runner = CliRunner()


def _sql(db_path: Path, *args: str):
    return runner.invoke(app, ["sql", "--db-path", str(db_path), *args])


@pytest.fixture
def seeded_db(sqlite_path: Path) -> Path:
    result = _sql(sqlite_path, "seed")
    assert result.exit_code == 0, result.output
    return sqlite_path


def _students(db_path: Path) -> list[dict]:
    conn = get_connection(db_path=db_path)
    try:
        return list_students(conn)
    finally:
        conn.close()


@pytest.mark.integration
def test_init_creates_database(sqlite_path: Path) -> None:
    result = _sql(sqlite_path, "init")

    assert result.exit_code == 0, result.output
    assert "Database initialized" in result.output
    assert sqlite_path.exists()
    assert _students(sqlite_path) == []


@pytest.mark.integration
def test_seed_twice_keeps_three_students(seeded_db: Path) -> None:
    result = _sql(seeded_db, "seed")

    assert result.exit_code == 0, result.output
    assert len(_students(seeded_db)) == 3


@pytest.mark.integration
def test_add_student_prints_id(seeded_db: Path) -> None:
    result = _sql(seeded_db, "add-student", "Barbara Liskov", "barbara@example.edu")

    assert result.exit_code == 0, result.output
    assert "Student added with ID 4" in result.output


@pytest.mark.integration
def test_add_student_duplicate_email_fails(seeded_db: Path) -> None:
    result = _sql(seeded_db, "add-student", "Someone", "ada@example.edu")

    assert result.exit_code == 1
    assert "add-student failed" in result.output
    assert len(_students(seeded_db)) == 3


@pytest.mark.integration
def test_update_student_email(seeded_db: Path) -> None:
    result = _sql(seeded_db, "update-student-email", "2", "turing@example.edu")

    assert result.exit_code == 0, result.output
    assert _students(seeded_db)[1]["email"] == "turing@example.edu"


@pytest.mark.integration
def test_update_missing_student_fails(seeded_db: Path) -> None:
    result = _sql(seeded_db, "update-student-email", "99", "nobody@example.edu")

    assert result.exit_code == 1
    assert "Student 99 not found" in result.output


@pytest.mark.integration
def test_delete_student(seeded_db: Path) -> None:
    result = _sql(seeded_db, "delete-student", "1")

    assert result.exit_code == 0, result.output
    assert [s["id"] for s in _students(seeded_db)] == [2, 3]


@pytest.mark.integration
def test_delete_missing_student_fails(seeded_db: Path) -> None:
    result = _sql(seeded_db, "delete-student", "99")

    assert result.exit_code == 1
    assert len(_students(seeded_db)) == 3


@pytest.mark.integration
def test_list_students(seeded_db: Path) -> None:
    result = _sql(seeded_db, "list-students")

    assert result.exit_code == 0, result.output
    assert "Ada Lovelace" in result.output
    assert "grace@example.edu" in result.output


@pytest.mark.integration
def test_list_students_empty(sqlite_path: Path) -> None:
    _sql(sqlite_path, "init")

    result = _sql(sqlite_path, "list-students")

    assert result.exit_code == 0, result.output
    assert "No students found." in result.output


@pytest.mark.integration
def test_list_students_without_schema_fails(sqlite_path: Path) -> None:
    result = _sql(sqlite_path, "list-students")

    assert result.exit_code == 1
    assert "no such table" in result.output


@pytest.mark.integration
def test_enroll_and_list_enrollments(seeded_db: Path) -> None:
    assert _sql(seeded_db, "enroll", "1", "CS101").exit_code == 0
    assert _sql(seeded_db, "enroll", "2", "MA101").exit_code == 0

    result = _sql(seeded_db, "list-enrollments", "--student-id", "1")

    assert result.exit_code == 0, result.output
    assert "CS101" in result.output
    assert "MA101" not in result.output

    conn = get_connection(db_path=seeded_db)
    try:
        assert len(list_enrollments(conn)) == 2
    finally:
        conn.close()


@pytest.mark.integration
def test_enroll_unknown_course_fails(seeded_db: Path) -> None:
    result = _sql(seeded_db, "enroll", "1", "NOPE")

    assert result.exit_code == 1
    assert "Course NOPE not found" in result.output


@pytest.mark.integration
def test_list_enrollments_empty(seeded_db: Path) -> None:
    result = _sql(seeded_db, "list-enrollments")

    assert result.exit_code == 0, result.output
    assert "No enrollments found." in result.output


@pytest.mark.integration
def test_query_select(seeded_db: Path) -> None:
    result = _sql(seeded_db, "query", "SELECT name FROM students WHERE id = 1")

    assert result.exit_code == 0, result.output
    assert "Ada Lovelace" in result.output
    assert "1 row(s) returned" in result.output


@pytest.mark.integration
def test_query_write_reports_rowcount(seeded_db: Path) -> None:
    result = _sql(seeded_db, "query", "DELETE FROM courses WHERE code LIKE 'CS%'")

    assert result.exit_code == 0, result.output
    assert "2 row(s) affected" in result.output


@pytest.mark.integration
def test_query_invalid_sql_fails(seeded_db: Path) -> None:
    result = _sql(seeded_db, "query", "SELEC * FROM students")

    assert result.exit_code == 1
    assert "query failed" in result.output


@pytest.mark.integration
def test_create_table_then_insert(sqlite_path: Path) -> None:
    result = _sql(sqlite_path, "create-table", "notes", "id INTEGER PRIMARY KEY", "body TEXT")
    assert result.exit_code == 0, result.output

    result = _sql(sqlite_path, "query", "INSERT INTO notes (body) VALUES ('hi')")

    assert result.exit_code == 0, result.output
    assert "1 row(s) affected" in result.output


@pytest.mark.integration
def test_create_table_rejects_unsafe_name(sqlite_path: Path) -> None:
    result = _sql(sqlite_path, "create-table", "bad-name", "id INTEGER")

    assert result.exit_code == 1
    assert "Unsafe SQL identifier" in result.output


@pytest.mark.integration
def test_db_path_from_environment(project_root: Path) -> None:
    target = project_root / "db" / "env.sqlite"

    result = runner.invoke(
        app,
        ["sql", "init"],
        env={"AMBIDB_DB_PATH": str(target)},
    )

    assert result.exit_code == 0, result.output
    assert target.exists()


@pytest.mark.integration
def test_standalone_sql_app(sqlite_path: Path) -> None:
    result = runner.invoke(sql_app, ["--db-path", str(sqlite_path), "seed"])

    assert result.exit_code == 0, result.output
    assert len(_students(sqlite_path)) == 3
