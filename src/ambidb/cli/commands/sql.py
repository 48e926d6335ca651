"""CLI commands forwarding to the embedded SQL database.

Every subcommand opens one connection, runs inside a transaction, and
exits with code 1 on any failure, including updates or deletes that
match no rows.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from ... import global_config as g
from ...database import (
    add_student,
    create_table,
    delete_student,
    enroll,
    initialize_database,
    list_enrollments,
    list_students,
    run_query,
    transaction,
    update_student_email,
)
from ..base import BaseCLI, configure_logging

app = typer.Typer(
    help="SQL wrapper over the embedded SQLite database.",
    context_settings={"help_option_names": ["-h", "--help"]},
    no_args_is_help=True,
)


class SqlCLI(BaseCLI):
    """CLI helpers for the SQL wrapper."""

    def __init__(self) -> None:
        super().__init__("sql")
        self.console = Console(highlight=False)

    def run_in_transaction(
        self,
        *,
        operation: str,
        db_path: Path,
        op: Callable[[sqlite3.Connection], Any],
        show_result: bool = True,
    ) -> Any:
        """Run op against a fresh connection inside handle_cli_operation.

        Args:
            operation: Human-readable operation name.
            db_path: Database file to open.
            op: Callable receiving the open connection.
            show_result: Whether to echo the formatted result.

        Returns:
            Whatever op returns.
        """

        def _call() -> Any:
            with transaction(db_path=db_path) as conn:
                return op(conn)

        return self.handle_cli_operation(
            operation=operation,
            op_callable=_call,
            show_result=show_result,
        )

    def print_rows(self, rows: Sequence[dict[str, Any]], columns: Sequence[str], empty: str) -> None:
        """Print rows as a table of columns, or the empty message when there are none."""
        if not rows:
            typer.echo(empty)
            return
        self.print_table(columns, [[row[col] for col in columns] for row in rows])

    def print_table(self, columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> None:
        """Render rows under columns as a rich table; NULL stands for None."""
        table = Table()
        for column in columns:
            table.add_column(column)
        for row in rows:
            table.add_row(*(Text("NULL" if value is None else str(value)) for value in row))
        self.console.print(table)


cli = SqlCLI()


def _db_path(ctx: typer.Context) -> Path:
    return ctx.obj["db_path"]


@app.callback()
def sql_callback(
    ctx: typer.Context,
    db_path: Annotated[
        Path,
        typer.Option(
            "--db-path",
            envvar=g.DB_PATH_ENV_VAR,
            help="Path to SQLite database file",
        ),
    ] = g.DEFAULT_DB_PATH,
) -> None:
    """Run statements against the student/course database."""
    ctx.obj = {"db_path": db_path}


@app.command("init")
def init_command(ctx: typer.Context) -> None:
    """Create the schema (students, courses, enrollments) if missing."""
    db_path = _db_path(ctx)
    cli.handle_cli_operation(
        operation="init",
        op_callable=lambda: _init(db_path, with_seed=False),
        pre_message=f"Initializing database at {db_path}...",
    )


@app.command("seed")
def seed_command(ctx: typer.Context) -> None:
    """Create the schema and insert sample students and courses."""
    db_path = _db_path(ctx)
    cli.handle_cli_operation(
        operation="seed",
        op_callable=lambda: _init(db_path, with_seed=True),
        pre_message=f"Seeding database at {db_path}...",
    )


def _init(db_path: Path, *, with_seed: bool) -> dict[str, Any]:
    initialize_database(db_path=db_path, with_seed=with_seed)
    message = "Database seeded" if with_seed else "Database initialized"
    return {"success": True, "message": message}


@app.command("create-table")
def create_table_command(
    ctx: typer.Context,
    table: Annotated[str, typer.Argument(help="Table name")],
    columns: Annotated[
        list[str],
        typer.Argument(help="Column definitions, e.g. 'id INTEGER PRIMARY KEY'"),
    ],
) -> None:
    """Create a table from caller-supplied column definitions."""

    def _op(conn: sqlite3.Connection) -> dict[str, Any]:
        create_table(conn, table, columns)
        return {"success": True, "message": f"Table {table} ready"}

    cli.run_in_transaction(operation="create-table", db_path=_db_path(ctx), op=_op)


@app.command("add-student")
def add_student_command(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Student name")],
    email: Annotated[str, typer.Argument(help="Unique student email")],
) -> None:
    """Insert a student and print the new id."""

    def _op(conn: sqlite3.Connection) -> dict[str, Any]:
        row = add_student(conn, name, email)
        return {"success": True, "message": f"Student added with ID {row['id']}"}

    cli.run_in_transaction(operation="add-student", db_path=_db_path(ctx), op=_op)


@app.command("update-student-email")
def update_student_email_command(
    ctx: typer.Context,
    student_id: Annotated[int, typer.Argument(help="Student ID")],
    email: Annotated[str, typer.Argument(help="New unique email")],
) -> None:
    """Change a student's email. Fails if the student does not exist."""

    def _op(conn: sqlite3.Connection) -> dict[str, Any]:
        update_student_email(conn, student_id, email)
        return {"success": True, "message": f"Student {student_id} email updated"}

    cli.run_in_transaction(operation="update-student-email", db_path=_db_path(ctx), op=_op)


@app.command("delete-student")
def delete_student_command(
    ctx: typer.Context,
    student_id: Annotated[int, typer.Argument(help="Student ID")],
) -> None:
    """Delete a student and their enrollments. Fails if the student does not exist."""

    def _op(conn: sqlite3.Connection) -> dict[str, Any]:
        delete_student(conn, student_id)
        return {"success": True, "message": f"Student {student_id} deleted"}

    cli.run_in_transaction(operation="delete-student", db_path=_db_path(ctx), op=_op)


@app.command("list-students")
def list_students_command(ctx: typer.Context) -> None:
    """List all students ordered by id."""
    rows = cli.run_in_transaction(
        operation="list-students",
        db_path=_db_path(ctx),
        op=list_students,
        show_result=False,
    )
    cli.print_rows(rows, ["id", "name", "email", "created_at"], "No students found.")


@app.command("enroll")
def enroll_command(
    ctx: typer.Context,
    student_id: Annotated[int, typer.Argument(help="Student ID")],
    course_code: Annotated[str, typer.Argument(help="Course code, e.g. CS101")],
) -> None:
    """Enroll a student in a course."""

    def _op(conn: sqlite3.Connection) -> dict[str, Any]:
        enroll(conn, student_id, course_code)
        return {"success": True, "message": f"Student {student_id} enrolled in {course_code}"}

    cli.run_in_transaction(operation="enroll", db_path=_db_path(ctx), op=_op)


@app.command("list-enrollments")
def list_enrollments_command(
    ctx: typer.Context,
    student_id: Annotated[
        int | None,
        typer.Option("--student-id", help="Only show this student's enrollments"),
    ] = None,
) -> None:
    """List enrollments with student and course details."""
    rows = cli.run_in_transaction(
        operation="list-enrollments",
        db_path=_db_path(ctx),
        op=lambda conn: list_enrollments(conn, student_id=student_id),
        show_result=False,
    )
    cli.print_rows(
        rows,
        ["student_id", "student_name", "course_code", "course_title", "enrolled_at"],
        "No enrollments found.",
    )


@app.command("query")
def query_command(
    ctx: typer.Context,
    sql: Annotated[str, typer.Argument(help="SQL statement to execute")],
) -> None:
    """Execute an arbitrary SQL statement and print its rows."""
    result = cli.run_in_transaction(
        operation="query",
        db_path=_db_path(ctx),
        op=lambda conn: run_query(conn, sql),
        show_result=False,
    )
    if result.returns_rows:
        if result.rows:
            cli.print_table(result.columns, result.rows)
        typer.echo(f"{len(result.rows)} row(s) returned")
    else:
        typer.echo(f"{max(result.rowcount, 0)} row(s) affected")


def main() -> None:
    """Entry point for the standalone `ambidb-sql` program."""
    configure_logging()
    app()


if __name__ == "__main__":
    main()
