"""FastAPI dependencies wiring the guardrails into routes."""

from collections.abc import Awaitable, Callable

from fastapi import Depends, Header, Request

from workkrd.config import get_settings
from workkrd.modules.auth import USER_ID_HEADER, CurrentUser, require_admin
from workkrd.shared.errors import CsrfError, RateLimitedError
from workkrd.shared.logging import get_logger

from .audit import AuditLogService
from .csrf import CSRF_HEADER, CsrfTokenStore
from .rate_limit import SlidingWindowRateLimiter, build_key, get_client_ip

logger = get_logger(__name__)

# Singletons
_csrf_store: CsrfTokenStore | None = None
_rate_limiter: SlidingWindowRateLimiter | None = None
_audit_service: AuditLogService | None = None


def get_csrf_store() -> CsrfTokenStore:
    global _csrf_store
    if _csrf_store is None:
        _csrf_store = CsrfTokenStore(ttl=get_settings().csrf_token_ttl)
    return _csrf_store


def get_rate_limiter() -> SlidingWindowRateLimiter:
    global _rate_limiter
    if _rate_limiter is None:
        _rate_limiter = SlidingWindowRateLimiter()
    return _rate_limiter


def get_audit_service() -> AuditLogService:
    global _audit_service
    if _audit_service is None:
        _audit_service = AuditLogService()
    return _audit_service


def reset_guards() -> None:
    """Drop all guard state (tests, settings reload)."""
    global _csrf_store, _rate_limiter, _audit_service
    _csrf_store = None
    _rate_limiter = None
    _audit_service = None


# =============================================================================
# DEPENDENCIES
# =============================================================================

def rate_limit(
    identifier: str,
    max_requests: int,
    window_seconds: float = 60,
) -> Callable[..., Awaitable[None]]:
    """Build a dependency enforcing ``max_requests`` per window for one route."""

    async def dependency(
        request: Request,
        limiter: SlidingWindowRateLimiter = Depends(get_rate_limiter),
    ) -> None:
        ip = get_client_ip(request, get_settings().trusted_proxy_hops)
        key = build_key(identifier, ip, request.headers.get(USER_ID_HEADER))
        result = limiter.hit(key, max_requests, window_seconds)
        if not result.allowed:
            logger.warning(f"Rate limit hit for {identifier} ({key})")
            raise RateLimitedError(result.reset_in)

    return dependency


async def require_csrf(
    admin: CurrentUser = Depends(require_admin),
    token: str | None = Header(default=None, alias=CSRF_HEADER),
    store: CsrfTokenStore = Depends(get_csrf_store),
) -> CurrentUser:
    if not store.validate(admin.user_id, token):
        raise CsrfError()
    return admin
