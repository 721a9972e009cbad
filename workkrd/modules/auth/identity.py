"""
Caller identity.

Authentication happens upstream; the gateway forwards the verified user id
in ``X-User-ID``. This module only turns that header into a ``CurrentUser``
and decides admin rights from configuration.
"""

from dataclasses import dataclass

from fastapi import Depends, Header

from workkrd.config import Settings, get_settings
from workkrd.shared.errors import ForbiddenError, UnauthorizedError

USER_ID_HEADER = "X-User-ID"


@dataclass(frozen=True)
class CurrentUser:
    user_id: str
    is_admin: bool = False


async def get_current_user(
    x_user_id: str | None = Header(default=None, alias=USER_ID_HEADER),
    settings: Settings = Depends(get_settings),
) -> CurrentUser:
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise UnauthorizedError()
    return CurrentUser(user_id=user_id, is_admin=user_id in settings.admin_user_ids)


async def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.is_admin:
        raise ForbiddenError("Admin access required")
    return user
