"""Public interface for the database package.

This module exposes the primitives the SQL wrapper needs: connection
helpers, initialization entrypoints, generic CRUD utilities and the
student/course/enrollment operations.
"""

from .connection import get_connection, transaction
from .crud import delete, insert, select, update
from .errors import (
    DatabaseError,
    DatabaseLockedError,
    IntegrityError,
    NotFoundError,
)
from .init import (
    CURRENT_SCHEMA_VERSION,
    create_table,
    get_schema_version,
    initialize_database,
)
from .students import (
    QueryResult,
    add_student,
    delete_student,
    enroll,
    list_enrollments,
    list_students,
    run_query,
    update_student_email,
)

__all__ = [
    "get_connection",
    "transaction",
    "initialize_database",
    "create_table",
    "get_schema_version",
    "CURRENT_SCHEMA_VERSION",
    "DatabaseError",
    "DatabaseLockedError",
    "IntegrityError",
    "NotFoundError",
    "insert",
    "select",
    "update",
    "delete",
    "QueryResult",
    "add_student",
    "update_student_email",
    "delete_student",
    "list_students",
    "enroll",
    "list_enrollments",
    "run_query",
]
