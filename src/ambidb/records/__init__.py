"""Public interface for the flat-file record store.

Exposes the record model, the line codec, and the :class:`RecordStore`
that owns the in-memory records between load and save.
"""

from .codec import escape_field, parse_record, serialize_record, split_fields
from .errors import (
    ErrorKind,
    MalformedInputError,
    RecordNotFoundError,
    RecordStoreError,
    StorageCorruptionError,
    StorageIOError,
    UniquenessViolationError,
)
from .models import MAX_AGE, MIN_AGE, Record, is_valid_age
from .store import (
    RecordStore,
    email_exists,
    find_index,
    load_records,
    next_id,
    save_records,
)

__all__ = [
    "Record",
    "MIN_AGE",
    "MAX_AGE",
    "is_valid_age",
    "escape_field",
    "split_fields",
    "serialize_record",
    "parse_record",
    "RecordStore",
    "load_records",
    "save_records",
    "next_id",
    "find_index",
    "email_exists",
    "ErrorKind",
    "RecordStoreError",
    "MalformedInputError",
    "UniquenessViolationError",
    "RecordNotFoundError",
    "StorageCorruptionError",
    "StorageIOError",
]
