"""Guard module - CSRF tokens, rate limiting and the admin audit trail."""

from .audit import AuditLogService
from .csrf import CSRF_HEADER, CsrfTokenStore
from .dependencies import (
    get_audit_service,
    get_csrf_store,
    get_rate_limiter,
    rate_limit,
    require_csrf,
    reset_guards,
)
from .rate_limit import RateLimitResult, SlidingWindowRateLimiter, build_key, get_client_ip

__all__ = [
    "CSRF_HEADER",
    "AuditLogService",
    "CsrfTokenStore",
    "RateLimitResult",
    "SlidingWindowRateLimiter",
    "build_key",
    "get_audit_service",
    "get_client_ip",
    "get_csrf_store",
    "get_rate_limiter",
    "rate_limit",
    "require_csrf",
    "reset_guards",
]
