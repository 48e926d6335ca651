"""Line codec for the flat-file record format.

Each record is stored as a single line of five ``|``-separated fields::

    id|name|age|department|email

Text fields escape a literal backslash as ``\\\\`` and a literal pipe as
``\\|``. There is no header and no trailing delimiter.
"""

from __future__ import annotations

import re

from .errors import StorageCorruptionError
from .models import Record

DELIMITER = "|"
ESCAPE = "\\"
FIELD_COUNT = 5

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")


def escape_field(value: str) -> str:
    """Escape delimiter and escape characters in a text field.

    Args:
        value: Raw field text.

    Returns:
        Text safe to join with ``|``.
    """
    out: list[str] = []
    for ch in value:
        if ch in (DELIMITER, ESCAPE):
            out.append(ESCAPE)
        out.append(ch)
    return "".join(out)


def split_fields(line: str) -> list[str]:
    """Split a stored line on unescaped delimiters, decoding escapes.

    Decoding walks the line one character at a time. A backslash makes the
    next character literal, whatever it is.

    Args:
        line: One stored row, without its line terminator.

    Returns:
        Decoded field values in order.

    Raises:
        StorageCorruptionError: If the line ends with a lone backslash.
    """
    fields: list[str] = []
    current: list[str] = []
    escaped = False
    for ch in line:
        if escaped:
            current.append(ch)
            escaped = False
        elif ch == ESCAPE:
            escaped = True
        elif ch == DELIMITER:
            fields.append("".join(current))
            current = []
        else:
            current.append(ch)

    if escaped:
        raise StorageCorruptionError("Trailing escape character")

    fields.append("".join(current))
    return fields


def _parse_int(value: str, field: str) -> int:
    if not _INTEGER_PATTERN.fullmatch(value):
        msg = f"Invalid integer for {field}: {value!r}"
        raise StorageCorruptionError(msg)
    return int(value)


def serialize_record(record: Record) -> str:
    """Serialize a record into a single stored line (no terminator)."""
    return DELIMITER.join(
        [
            str(record.id),
            escape_field(record.name),
            str(record.age),
            escape_field(record.department),
            escape_field(record.email),
        ]
    )


def parse_record(line: str) -> Record:
    """Parse a stored line back into a Record.

    Args:
        line: One stored row, without its line terminator.

    Returns:
        Parsed Record.

    Raises:
        StorageCorruptionError: If escaping is broken, the field count is
            not five, or id/age are not integers.
    """
    fields = split_fields(line)
    if len(fields) != FIELD_COUNT:
        msg = f"Expected {FIELD_COUNT} fields, found {len(fields)}"
        raise StorageCorruptionError(msg)

    raw_id, name, raw_age, department, email = fields
    return Record(
        id=_parse_int(raw_id, "id"),
        name=name,
        age=_parse_int(raw_age, "age"),
        department=department,
        email=email,
    )
