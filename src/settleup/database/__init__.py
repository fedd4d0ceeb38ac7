"""Database layer for settleup application."""

from settleup.database.base import Database
from settleup.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
