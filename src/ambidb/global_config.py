"""Global, project-wide configuration constants.

This module intentionally contains **no business logic** – only simple,
shared filesystem anchors and cross-cutting defaults that many modules
can import.

Runtime overrides (data file, database path) are supplied through CLI
options, which fall back to the environment variables named here.
"""

from pathlib import Path

# Core roots
PACKAGE_ROOT: Path = Path(__file__).resolve().parent

# Core Names
PROJECT_NAME = "ambidb"

# Flat-file record store
DEFAULT_DATA_FILE: Path = Path("ambidb_records.txt")
DATA_FILE_ENV_VAR = "AMBIDB_DATA_FILE"

# Database directories
DB_DIR: Path = Path("db")
DEFAULT_DB_PATH: Path = DB_DIR / f"{PROJECT_NAME}.sqlite"
DB_PATH_ENV_VAR = "AMBIDB_DB_PATH"

# SQL directory (shipped as package data)
SQL_DIR: Path = PACKAGE_ROOT / "sql"
