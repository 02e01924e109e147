"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from expendas.database.sqlalchemy_db import SQLAlchemyDatabase

DB_PATH_ENV_VAR = "EXPENDAS_DB_PATH"


def default_database_path() -> Path:
    """Return ~/.expendas/expendas.db, creating the directory if needed."""
    db_dir = Path.home() / ".expendas"
    db_dir.mkdir(exist_ok=True)
    return db_dir / "expendas.db"


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks EXPENDAS_DB_PATH
            environment variable, then defaults to ~/.expendas/expendas.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get(DB_PATH_ENV_VAR)

    if database_path is None:
        database_path = str(default_database_path())

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(database_url)
