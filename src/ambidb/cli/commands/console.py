"""Interactive numbered-menu console for the flat-file record store."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from ...records import (
    MAX_AGE,
    MIN_AGE,
    Record,
    RecordNotFoundError,
    RecordStore,
    RecordStoreError,
    UniquenessViolationError,
    is_valid_age,
)
from ..base import BaseCLI

MENU_TITLE = "AmbiDB - Console DBMS"
MENU_CHOICES = (
    "Insert record",
    "Display all records",
    "Search record",
    "Update record",
    "Delete record",
    "Save and Exit",
)
MAX_ID_INPUT = 1_000_000


def _read_int(label: str, min_value: int, max_value: int) -> int:
    # typer.prompt reprompts on non-numeric input; the range is checked here
    while True:
        value = typer.prompt(label, type=int)
        if min_value <= value <= max_value:
            return value
        typer.echo(f"Error: {value} is not in the range {min_value}<=x<={max_value}.")


def _read_text(label: str, *, required: bool = True) -> str:
    while True:
        value = typer.prompt(label, default="", show_default=False)
        if value or not required:
            return value
        typer.echo("Input cannot be empty.")


class RecordConsole(BaseCLI):
    """Menu loop driving a single RecordStore until save-and-exit."""

    def __init__(self, store: RecordStore, console: Console | None = None) -> None:
        super().__init__("records")
        self.store = store
        self.console = console or Console(highlight=False)

    def run(self) -> None:
        """Show the menu until the user saves.

        Raises:
            typer.Exit: With code 1 if the final save fails.
        """
        actions = {
            1: self.insert_record,
            2: self.display_records,
            3: self.search_record,
            4: self.update_record,
            5: self.delete_record,
        }
        while True:
            self.print_menu()
            choice = _read_int("Enter choice", 1, len(MENU_CHOICES))
            if choice == len(MENU_CHOICES):
                self.save_and_exit()
                return
            actions[choice]()

    def print_menu(self) -> None:
        """Print the title and the numbered menu choices."""
        typer.echo(f"\n{MENU_TITLE}")
        for number, label in enumerate(MENU_CHOICES, start=1):
            typer.echo(f"{number}. {label}")

    def insert_record(self) -> Record:
        name = _read_text("Enter name")
        age = _read_int(f"Enter age ({MIN_AGE}-{MAX_AGE})", MIN_AGE, MAX_AGE)
        department = _read_text("Enter department")
        while True:
            email = _read_text("Enter email")
            try:
                record = self.store.insert(name, age, department, email)
                break
            except UniquenessViolationError:
                typer.echo("Email already exists. Use a unique email.")
        typer.echo(f"Record inserted with ID {record.id}.")
        return record

    def display_records(self) -> None:
        records = self.store.list()
        if not records:
            typer.echo("No records found.")
            return
        self._print_table(records)

    def search_record(self) -> Record | None:
        record_id = _read_int("Enter record ID to search", 1, MAX_ID_INPUT)
        try:
            record = self.store.get(record_id)
        except RecordNotFoundError:
            typer.echo("Record not found.")
            return None
        typer.echo("Record found:")
        self._print_table([record])
        return record

    def update_record(self) -> Record | None:
        """Prompt for each field; empty input keeps the current value."""
        record_id = _read_int("Enter record ID to update", 1, MAX_ID_INPUT)
        try:
            record = self.store.get(record_id)
        except RecordNotFoundError:
            typer.echo("Record not found.")
            return None

        typer.echo("Updating record (leave empty to keep existing value).")
        name = _read_text(f"Enter name [{record.name}]", required=False) or None
        age = self._read_age_update(record.age)
        department = _read_text(f"Enter department [{record.department}]", required=False) or None

        while True:
            email = _read_text(f"Enter email [{record.email}]", required=False) or None
            try:
                record = self.store.update(
                    record_id,
                    name=name,
                    age=age,
                    department=department,
                    email=email,
                )
                break
            except UniquenessViolationError:
                typer.echo("Email already exists. Use a unique email.")

        typer.echo("Record updated.")
        return record

    def _read_age_update(self, current: int) -> int | None:
        raw = _read_text(f"Enter age [{current}]", required=False)
        if not raw:
            return None
        try:
            age = int(raw)
        except ValueError:
            typer.echo("Invalid age, keeping previous value.")
            return None
        if not is_valid_age(age):
            typer.echo("Age out of range, keeping previous value.")
            return None
        return age

    def delete_record(self) -> Record | None:
        record_id = _read_int("Enter record ID to delete", 1, MAX_ID_INPUT)
        try:
            record = self.store.delete(record_id)
        except RecordNotFoundError:
            typer.echo("Record not found.")
            return None
        typer.echo("Record deleted.")
        return record

    def save_and_exit(self) -> None:
        try:
            self.store.save()
        except RecordStoreError as exc:
            self.logger.error("Save failed: %s", exc.detail)
            typer.secho(f"Error saving data: {exc.detail}", fg=typer.colors.RED, err=True)
            raise typer.Exit(1) from exc
        typer.echo(f"Data saved to {self.store.path}. Goodbye.")

    def _print_table(self, records: Iterable[Record]) -> None:
        table = Table(show_lines=False)
        for column in ("ID", "Name", "Age", "Department", "Email"):
            table.add_column(column)
        for rec in records:
            table.add_row(
                str(rec.id),
                Text(rec.name),
                str(rec.age),
                Text(rec.department),
                Text(rec.email),
            )
        self.console.print(table)


def run_console(data_file: Path) -> None:
    """Load the store at data_file and run the interactive menu.

    Exits with code 1 if the data file cannot be loaded or saved.

    User Output:
        - "Error loading data: {detail}" in red when the load fails.
    """
    try:
        store = RecordStore.load(data_file)
    except RecordStoreError as exc:
        typer.secho(f"Error loading data: {exc.detail}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from exc

    RecordConsole(store).run()
