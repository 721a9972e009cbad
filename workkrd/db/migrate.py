"""Forward-only schema migrations."""

import sqlite3

from workkrd.shared.logging import get_logger

logger = get_logger(__name__)

MIGRATIONS: list[tuple[str, str]] = [
    (
        "0001_admin_audit_log",
        """
        CREATE TABLE IF NOT EXISTS admin_audit_log (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            admin_id TEXT NOT NULL,
            action TEXT NOT NULL,
            target TEXT NOT NULL,
            details_json TEXT,
            created_at TEXT NOT NULL
        );
        CREATE INDEX IF NOT EXISTS idx_audit_created ON admin_audit_log (created_at);
        """,
    ),
]


def run_migrations(db: sqlite3.Connection) -> list[str]:
    """Apply pending migrations. Returns the names applied in this call."""
    db.execute(
        """CREATE TABLE IF NOT EXISTS schema_migrations (
            name TEXT PRIMARY KEY,
            applied_at TEXT DEFAULT CURRENT_TIMESTAMP
        )"""
    )
    done = {row["name"] for row in db.execute("SELECT name FROM schema_migrations")}

    applied = []
    for name, sql in MIGRATIONS:
        if name in done:
            continue
        logger.info(f"Applying migration {name}")
        db.executescript(sql)
        db.execute("INSERT INTO schema_migrations (name) VALUES (?)", (name,))
        applied.append(name)

    db.commit()
    return applied
