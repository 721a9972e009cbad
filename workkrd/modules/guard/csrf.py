"""
Per-admin CSRF tokens.

Each admin holds at most one live token. Issuing a new one replaces the
previous token; tokens stay valid until they expire and are not consumed
by validation, so an admin tab can submit several actions with the token
it received on its last GET.
"""

import hmac
import time
from collections.abc import Callable
from dataclasses import dataclass

from workkrd.shared.ids import generate_csrf_token

DEFAULT_TTL_SECONDS = 600

CSRF_HEADER = "X-CSRF-Token"


@dataclass
class _IssuedToken:
    token: str
    expires_at: float


class CsrfTokenStore:
    """In-memory token store keyed by admin id."""

    def __init__(
        self,
        ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl = ttl
        self._clock = clock
        self._tokens: dict[str, _IssuedToken] = {}

    def issue(self, admin_id: str) -> str:
        """Mint a fresh token for ``admin_id``, replacing any earlier one."""
        self._prune()
        token = generate_csrf_token()
        self._tokens[admin_id] = _IssuedToken(token, self._clock() + self.ttl)
        return token

    def validate(self, admin_id: str, token: str | None) -> bool:
        if not token:
            return False
        issued = self._tokens.get(admin_id)
        if issued is None:
            return False
        if issued.expires_at <= self._clock():
            del self._tokens[admin_id]
            return False
        return hmac.compare_digest(issued.token.encode(), token.encode())

    def revoke(self, admin_id: str) -> None:
        self._tokens.pop(admin_id, None)

    def _prune(self) -> None:
        now = self._clock()
        expired = [key for key, issued in self._tokens.items() if issued.expires_at <= now]
        for key in expired:
            del self._tokens[key]

    def __len__(self) -> int:
        return len(self._tokens)
