"""Audit trail for privileged admin actions."""

from typing import Any

from workkrd.db.repos import AuditLogRepository
from workkrd.shared.logging import get_logger

logger = get_logger(__name__)


class AuditLogService:
    def __init__(self, repo: AuditLogRepository | None = None) -> None:
        self.repo = repo or AuditLogRepository()

    def record(
        self,
        admin_id: str,
        action: str,
        target: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Append one entry.

        A failed write is logged and swallowed: the action it describes has
        already happened and must not be reported as failed.
        """
        try:
            self.repo.append(admin_id, action, target, details)
        except Exception as e:
            logger.error(f"Failed to write audit log entry {action} by {admin_id}: {e}")

    def recent(self, limit: int = 20) -> list[dict[str, Any]]:
        return self.repo.list_recent(limit)
