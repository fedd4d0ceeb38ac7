"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from settleup.database.sqlalchemy_db import SQLAlchemyDatabase

DB_PATH_ENVVAR = "SETTLEUP_DB_PATH"


def default_database_path() -> Path:
    """Return ~/.settleup/settleup.db, creating the directory if needed."""
    db_dir = Path.home() / ".settleup"
    db_dir.mkdir(exist_ok=True)
    return db_dir / "settleup.db"


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks SETTLEUP_DB_PATH
            environment variable, then defaults to ~/.settleup/settleup.db.

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get(DB_PATH_ENVVAR)

    if database_path is None:
        database_path = str(default_database_path())

    return SQLAlchemyDatabase(f"sqlite:///{database_path}")
