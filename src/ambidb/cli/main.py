from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer

from .. import global_config as g
from .base import configure_logging
from .commands.console import run_console
from .commands.sql import app as sql_app

app = typer.Typer(
    help="AmbiDB: flat-file record console and SQL wrapper",
    context_settings={"help_option_names": ["-h", "--help"]},
    no_args_is_help=True,
)

app.add_typer(sql_app, name="sql")


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("-v", "--verbose", help="Log debug messages"),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("-q", "--quiet", help="Only log warnings and errors"),
    ] = False,
) -> None:
    """Configure logging before any subcommand runs."""
    if verbose:
        configure_logging(logging.DEBUG)
    elif quiet:
        configure_logging(logging.WARNING)
    else:
        configure_logging()


@app.command("console")
def console(
    data_file: Annotated[
        Path,
        typer.Option(
            "--data-file",
            "-f",
            envvar=g.DATA_FILE_ENV_VAR,
            help="Flat-file record store to load and save",
        ),
    ] = g.DEFAULT_DATA_FILE,
) -> None:
    """Run the interactive record menu.

    Loads every record from the data file, then loops over the numbered
    menu (insert, display, search, update, delete) until "Save and Exit"
    rewrites the file. Changes are kept in memory only until then.

    Exits with code 1 if the data file is corrupted or cannot be written.
    """
    run_console(data_file)


def main() -> None:
    """Main entry point for package CLI.

    Side Effects:
        - Processes CLI arguments and executes commands.
        - May exit with non-zero code on errors.
    """
    app()


if __name__ == "__main__":
    main()
