"""Database layer for cleanops application."""

from cleanops.database.base import Database
from cleanops.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
