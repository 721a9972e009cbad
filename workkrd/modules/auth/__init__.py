"""Auth module - caller identity and template entitlements."""

from .entitlement import (
    Entitlement,
    EntitlementService,
    get_entitlement_service,
    reset_entitlement_service,
)
from .identity import USER_ID_HEADER, CurrentUser, get_current_user, require_admin

__all__ = [
    "USER_ID_HEADER",
    "CurrentUser",
    "Entitlement",
    "EntitlementService",
    "get_current_user",
    "get_entitlement_service",
    "require_admin",
    "reset_entitlement_service",
]
