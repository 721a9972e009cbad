"""
SQLite connection management.

One connection per process, opened by the application lifespan and shared
by the repositories.
"""

import sqlite3
from pathlib import Path

from workkrd.shared.logging import get_logger

logger = get_logger(__name__)

_db: sqlite3.Connection | None = None


def init_db(db_path: Path | str) -> sqlite3.Connection:
    """Open (or replace) the process-wide connection."""
    global _db
    if _db is not None:
        _db.close()

    if str(db_path) != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    _db = conn
    return conn


def get_db() -> sqlite3.Connection:
    if _db is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _db


def close_db() -> None:
    global _db
    if _db is not None:
        _db.close()
        _db = None
