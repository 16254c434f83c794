"""Database layer for kasbook application."""

# Domain services import base.py from this package. Loading the domain
# first means base.py is complete by the time they ask for it.
import kasbook.domain  # noqa: F401
from kasbook.database.base import Database, LedgerUnit
from kasbook.database.factories import create_sqlite_database

__all__ = ["Database", "LedgerUnit", "create_sqlite_database"]
