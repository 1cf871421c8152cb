"""Database layer for ledgerpilot."""

from ledgerpilot.database.base import Database
from ledgerpilot.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
