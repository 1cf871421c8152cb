"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from ledgerpilot.database.sqlalchemy_db import SQLAlchemyDatabase


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks LEDGERPILOT_DB_PATH
            environment variable, then defaults to ~/.ledgerpilot/ledgerpilot.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get("LEDGERPILOT_DB_PATH")

    if database_path is None:
        db_dir = Path.home() / ".ledgerpilot"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "ledgerpilot.db")

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(database_url)
