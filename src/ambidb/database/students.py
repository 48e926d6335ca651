"""Student, course and enrollment operations behind the SQL wrapper.

Each function takes an open connection and leaves transaction boundaries
to the caller (see :func:`ambidb.database.connection.transaction`).
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass, field
from typing import Any

from . import crud, queries
from .errors import ensure_affected, ensure_found, from_sqlite_error

logger = logging.getLogger(__name__)


@dataclass
class QueryResult:
    """Outcome of an arbitrary statement run through :func:`run_query`."""

    columns: list[str] = field(default_factory=list)
    rows: list[tuple[Any, ...]] = field(default_factory=list)
    rowcount: int = -1

    @property
    def returns_rows(self) -> bool:
        """True when the statement produced a result set (even an empty one)."""
        return bool(self.columns)


def add_student(conn: sqlite3.Connection, name: str, email: str) -> dict[str, Any]:
    """Insert a student and return the stored row data including its id.

    Raises:
        IntegrityError: If the email is already registered.
    """
    row = crud.insert(conn, "students", {"name": name, "email": email})
    logger.info("Added student %s (%s)", row["id"], email)
    return row


def update_student_email(conn: sqlite3.Connection, student_id: int, email: str) -> int:
    """Change a student's email.

    Raises:
        NotFoundError: If no student has student_id.
        IntegrityError: If another student already has email.
    """
    rowcount = crud.update(conn, "students", {"id": student_id}, {"email": email})
    return ensure_affected(rowcount, f"Student {student_id} not found")


def delete_student(conn: sqlite3.Connection, student_id: int) -> int:
    """Delete a student; enrollments go with it via ON DELETE CASCADE.

    Raises:
        NotFoundError: If no student has student_id.
    """
    rowcount = crud.delete(conn, "students", {"id": student_id})
    return ensure_affected(rowcount, f"Student {student_id} not found")


def list_students(conn: sqlite3.Connection) -> list[dict[str, Any]]:
    """Return all students ordered by id."""
    return crud.select(conn, "students", order_by="id")


def get_student(conn: sqlite3.Connection, student_id: int) -> dict[str, Any]:
    """Return the student with student_id.

    Raises:
        NotFoundError: If no student has student_id.
    """
    rows = crud.select(conn, "students", {"id": student_id}, limit=1)
    return ensure_found(rows[0] if rows else None, f"Student {student_id} not found")


def get_course(conn: sqlite3.Connection, code: str) -> dict[str, Any]:
    """Return the course identified by code.

    Raises:
        NotFoundError: If no course has that code.
    """
    rows = crud.select(conn, "courses", {"code": code}, limit=1)
    return ensure_found(rows[0] if rows else None, f"Course {code} not found")


def enroll(conn: sqlite3.Connection, student_id: int, course_code: str) -> dict[str, Any]:
    """Enroll a student in the course identified by its code.

    Raises:
        NotFoundError: If the student or the course does not exist.
        IntegrityError: If the student is already enrolled in the course.
    """
    get_student(conn, student_id)
    course = get_course(conn, course_code)
    row = crud.insert(
        conn,
        "enrollments",
        {
            "student_id": student_id,
            "course_id": course["id"],
            "enrolled_at": crud.now_iso(),
        },
        timestamps=False,
    )
    logger.info("Enrolled student %s in %s", student_id, course_code)
    return row


def list_enrollments(
    conn: sqlite3.Connection,
    student_id: int | None = None,
) -> list[dict[str, Any]]:
    """Return enrollments joined with student and course details.

    Args:
        conn: Database connection.
        student_id: Restrict to one student (optional).
    """
    sql = """
        SELECT s.id AS student_id, s.name AS student_name,
               c.code AS course_code, c.title AS course_title,
               e.enrolled_at
        FROM enrollments e
        JOIN students s ON s.id = e.student_id
        JOIN courses c ON c.id = e.course_id
    """
    params: tuple = ()
    if student_id is not None:
        sql += " WHERE e.student_id = ?"
        params = (student_id,)
    sql += " ORDER BY s.id, c.code"

    try:
        return queries.fetch_all(conn, sql, params)
    except sqlite3.Error as exc:
        raise from_sqlite_error(exc) from exc


def run_query(conn: sqlite3.Connection, sql: str, params: tuple = ()) -> QueryResult:
    """Execute caller-supplied SQL and collect whatever it produces.

    Raises:
        DatabaseError: If the statement cannot be prepared or executed.
    """
    if not sql.strip():
        msg = "Query is empty"
        raise ValueError(msg)
    try:
        cursor = queries.execute_query(conn, sql, params)
        if cursor.description is None:
            return QueryResult(rowcount=cursor.rowcount)
        columns = [col[0] for col in cursor.description]
        rows = [tuple(row) for row in cursor.fetchall()]
    except sqlite3.Error as exc:
        raise from_sqlite_error(exc) from exc
    return QueryResult(columns=columns, rows=rows, rowcount=len(rows))
