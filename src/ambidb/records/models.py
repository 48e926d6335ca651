"""Record model and field validation."""

from __future__ import annotations

from dataclasses import dataclass

MIN_AGE = 16
MAX_AGE = 80

_LINE_BREAKS = ("\n", "\r")


@dataclass(frozen=True)
class Record:
    """One row of the flat-file store. Immutable; RecordStore.update swaps in a copy."""

    id: int
    name: str
    age: int
    department: str
    email: str


def is_valid_age(age: int) -> bool:
    """Return True if age lies in the inclusive [MIN_AGE, MAX_AGE] range."""
    return MIN_AGE <= age <= MAX_AGE


def has_line_break(value: str) -> bool:
    """Return True if value would split a stored row across lines."""
    return any(ch in value for ch in _LINE_BREAKS)
