"""Database repositories."""

from .audit_log_repo import AuditLogRepository

__all__ = ["AuditLogRepository"]
