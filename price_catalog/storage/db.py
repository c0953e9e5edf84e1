"""
Database connection management.

Provides SQLite connections for the catalog store.
"""

import sqlite3
from pathlib import Path

DEFAULT_DB_PATH = "price_catalog.db"


def get_connection(db_path: str = DEFAULT_DB_PATH, timeout: float = 5.0) -> sqlite3.Connection:
    """Create and return a SQLite connection for the catalog store.

    Args:
        db_path: Path to SQLite database file
        timeout: Seconds to wait on a locked database

    Returns:
        SQLite connection
    """
    path = Path(db_path)
    return sqlite3.connect(str(path), timeout=timeout)
