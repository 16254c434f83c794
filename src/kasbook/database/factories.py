"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from kasbook.database.sqlalchemy_db import SQLAlchemyDatabase

DB_PATH_ENV = "KASBOOK_DB_PATH"

# Seconds a device waits for another device's write lock before SQLite
# reports "database is locked", which the atomic unit then retries.
DEFAULT_BUSY_TIMEOUT = 15.0


def default_database_path() -> Path:
    """Location of the shared ledger when no path is configured."""
    return Path.home() / ".kasbook" / "kasbook.db"


def create_sqlite_database(
    database_path: Optional[str] = None, busy_timeout: float = DEFAULT_BUSY_TIMEOUT
) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks KASBOOK_DB_PATH
            environment variable, then defaults to ~/.kasbook/kasbook.db
        busy_timeout: Seconds to wait on a lock held by another device

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get(DB_PATH_ENV)

    if database_path is None:
        path = default_database_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        database_path = str(path)

    return SQLAlchemyDatabase(
        f"sqlite:///{database_path}", connect_args={"timeout": busy_timeout}
    )
