"""In-memory record store backed by a flat text file.

The whole file is read once by :meth:`RecordStore.load` and rewritten in
full by :meth:`RecordStore.save`. Nothing touches the disk in between, so
changes made after the last save are lost if the process dies.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import replace
from pathlib import Path

from .codec import parse_record, serialize_record
from .errors import (
    MalformedInputError,
    RecordNotFoundError,
    StorageCorruptionError,
    StorageIOError,
    UniquenessViolationError,
)
from .models import MAX_AGE, MIN_AGE, Record, has_line_break, is_valid_age

logger = logging.getLogger(__name__)


def load_records(path: Path) -> list[Record]:
    """Read every record from the backing file.

    A missing file is a first run and yields an empty list. Blank lines are
    skipped. The first line that fails to parse aborts the whole load.

    Args:
        path: Backing file path.

    Returns:
        Records in file order.

    Raises:
        StorageCorruptionError: If a line cannot be parsed or the file is
            not valid UTF-8.
        StorageIOError: If the file exists but cannot be read.

    Logs:
        - INFO: "Loaded {n} records from {path}" on success.
        - INFO: "No data file at {path}; starting empty" on first run.
    """
    if not path.exists():
        logger.info("No data file at %s; starting empty", path)
        return []

    records: list[Record] = []
    try:
        with path.open("rb") as fh:
            # rows end at "\n" only; a lone "\r" is field data
            for line_no, raw in enumerate(fh, start=1):
                try:
                    line = raw.rstrip(b"\n").decode("utf-8")
                except UnicodeDecodeError as exc:
                    msg = f"Corrupted data at line {line_no}: invalid UTF-8"
                    raise StorageCorruptionError(msg, line_number=line_no) from exc
                if not line:
                    continue
                try:
                    records.append(parse_record(line))
                except StorageCorruptionError as exc:
                    msg = f"Corrupted data at line {line_no}"
                    logger.debug("%s: %s", msg, exc.detail)
                    raise StorageCorruptionError(msg, line_number=line_no) from exc
    except OSError as exc:
        msg = f"Failed to read data file: {exc}"
        raise StorageIOError(msg) from exc

    logger.info("Loaded %d records from %s", len(records), path)
    return records


def save_records(path: Path, records: Sequence[Record]) -> None:
    """Truncate and rewrite the backing file from records.

    Args:
        path: Backing file path.
        records: Records to persist, in order.

    Raises:
        StorageIOError: If the file cannot be opened or written.

    Logs:
        - INFO: "Saved {n} records to {path}" on success.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="\n") as fh:
            for record in records:
                fh.write(serialize_record(record) + "\n")
    except OSError as exc:
        logger.error("Failed to write %s: %s", path, exc)
        raise StorageIOError("Failed to write to data file.") from exc

    logger.info("Saved %d records to %s", len(records), path)


def next_id(records: Sequence[Record]) -> int:
    """Return one more than the largest id in records (1 when empty)."""
    return max((rec.id for rec in records), default=0) + 1


def find_index(records: Sequence[Record], record_id: int) -> int | None:
    """Return the position of the record with record_id, or None."""
    for index, rec in enumerate(records):
        if rec.id == record_id:
            return index
    return None


def email_exists(
    records: Sequence[Record],
    email: str,
    exclude_id: int | None = None,
) -> bool:
    """Return True if another record already uses email.

    Args:
        records: Records to scan.
        email: Email to look for (exact match).
        exclude_id: Record id to ignore, so a record can keep its own email.
    """
    return any(rec.email == email and rec.id != exclude_id for rec in records)


def _check_text(field: str, value: str) -> None:
    if has_line_break(value):
        msg = f"{field} cannot contain line breaks"
        raise MalformedInputError(msg)


class RecordStore:
    """Ordered in-memory records with a unique-email constraint.

    The store is the single owner of its record list. Callers mutate it
    only through the methods below and persist it with :meth:`save`.
    """

    def __init__(self, path: Path, records: Sequence[Record] | None = None) -> None:
        self.path = Path(path)
        self._records: list[Record] = list(records or [])

    @classmethod
    def load(cls, path: Path) -> RecordStore:
        """Create a store from the backing file at path."""
        path = Path(path)
        return cls(path, load_records(path))

    def save(self) -> None:
        """Rewrite the backing file from the current records."""
        save_records(self.path, self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self._records)

    def list(self) -> list[Record]:
        """Return the records in current order."""
        return list(self._records)

    def next_id(self) -> int:
        """Return the id the next inserted record will get."""
        return next_id(self._records)

    def email_exists(self, email: str, exclude_id: int | None = None) -> bool:
        """Return True if a record other than exclude_id already uses email."""
        return email_exists(self._records, email, exclude_id)

    def get(self, record_id: int) -> Record:
        """Return the record with record_id.

        Raises:
            RecordNotFoundError: If no record has that id.
        """
        index = find_index(self._records, record_id)
        if index is None:
            raise RecordNotFoundError(record_id)
        return self._records[index]

    def insert(self, name: str, age: int, department: str, email: str) -> Record:
        """Append a new record and return it.

        Args:
            name: Record name.
            age: Age, must lie in [MIN_AGE, MAX_AGE].
            department: Department name.
            email: Email, must not be used by any other record.

        Returns:
            The inserted record with its assigned id.

        Raises:
            MalformedInputError: If age is out of range or a text field
                contains a line break.
            UniquenessViolationError: If email is already in use.

        Logs:
            - DEBUG: "Inserted record {id}" on success.
        """
        if not is_valid_age(age):
            msg = f"Age must be between {MIN_AGE} and {MAX_AGE}"
            raise MalformedInputError(msg)
        for field, value in (("name", name), ("department", department), ("email", email)):
            _check_text(field, value)
        if self.email_exists(email):
            msg = f"Email already exists: {email}"
            raise UniquenessViolationError(msg)

        record = Record(
            id=self.next_id(),
            name=name,
            age=age,
            department=department,
            email=email,
        )
        self._records.append(record)
        logger.debug("Inserted record %d", record.id)
        return record

    def update(
        self,
        record_id: int,
        *,
        name: str | None = None,
        age: int | None = None,
        department: str | None = None,
        email: str | None = None,
    ) -> Record:
        """Replace the record with a copy carrying the supplied fields.

        ``None`` leaves a field unchanged. An out-of-range age is discarded
        and the previous age kept. Email and text checks run before any
        field is changed, so a rejected update leaves the record as it was.

        Args:
            record_id: Id of the record to update.
            name: New name, or None.
            age: New age, or None.
            department: New department, or None.
            email: New email, or None.

        Returns:
            The updated record.

        Raises:
            RecordNotFoundError: If no record has record_id.
            MalformedInputError: If a text field contains a line break.
            UniquenessViolationError: If email belongs to another record.

        Logs:
            - WARNING: "Ignoring out-of-range age ..." when age is discarded.
            - DEBUG: "Updated record {id}" on success.
        """
        index = find_index(self._records, record_id)
        if index is None:
            raise RecordNotFoundError(record_id)
        record = self._records[index]

        for field, value in (("name", name), ("department", department), ("email", email)):
            if value is not None:
                _check_text(field, value)
        if email is not None and self.email_exists(email, exclude_id=record_id):
            msg = f"Email already exists: {email}"
            raise UniquenessViolationError(msg)

        changes: dict[str, object] = {}
        if name is not None:
            changes["name"] = name
        if age is not None:
            if is_valid_age(age):
                changes["age"] = age
            else:
                logger.warning(
                    "Ignoring out-of-range age %d for record %d; keeping %d",
                    age,
                    record_id,
                    record.age,
                )
        if department is not None:
            changes["department"] = department
        if email is not None:
            changes["email"] = email

        updated = replace(record, **changes)
        self._records[index] = updated
        logger.debug("Updated record %d", record_id)
        return updated

    def delete(self, record_id: int) -> Record:
        """Remove the record with record_id and return it.

        Raises:
            RecordNotFoundError: If no record has record_id.
        """
        index = find_index(self._records, record_id)
        if index is None:
            raise RecordNotFoundError(record_id)
        record = self._records.pop(index)
        logger.debug("Deleted record %d", record_id)
        return record
