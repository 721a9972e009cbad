"""Repository for the admin audit trail."""

import json
from typing import Any

from workkrd.db import get_db
from workkrd.shared.time import utcnow_iso


class AuditLogRepository:
    """Append-only store of privileged admin actions."""

    def append(
        self,
        admin_id: str,
        action: str,
        target: str,
        details: dict[str, Any] | None = None,
    ) -> int:
        """Insert one entry. Returns the new row id."""
        db = get_db()
        cursor = db.execute(
            """INSERT INTO admin_audit_log
                (admin_id, action, target, details_json, created_at)
            VALUES (?, ?, ?, ?, ?)""",
            (
                admin_id,
                action,
                target,
                json.dumps(details, default=str) if details is not None else None,
                utcnow_iso(),
            ),
        )
        db.commit()
        return cursor.lastrowid

    def _row_to_entry(self, row: Any) -> dict:
        entry = dict(row)
        raw = entry.pop("details_json", None)
        entry["details"] = json.loads(raw) if raw else None
        return entry

    def list_recent(self, limit: int = 20) -> list[dict]:
        """Newest first."""
        db = get_db()
        cursor = db.execute(
            "SELECT * FROM admin_audit_log ORDER BY created_at DESC, id DESC LIMIT ?",
            (limit,),
        )
        return [self._row_to_entry(row) for row in cursor.fetchall()]
