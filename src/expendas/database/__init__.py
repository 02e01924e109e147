"""Database layer for expendas application."""

from expendas.database.base import Database
from expendas.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
