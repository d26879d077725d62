"""Database layer for debtsync application."""

from debtsync.database.base import Database
from debtsync.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
