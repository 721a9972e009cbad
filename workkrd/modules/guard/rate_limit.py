"""
Sliding-window rate limiting.

Each key keeps the timestamps of its accepted hits inside the current
window. A hit is accepted while fewer than ``max_requests`` remain in the
window; rejected hits are not recorded, so a client that keeps hammering
is let back in as soon as its oldest accepted hit ages out.
"""

import ipaddress
import math
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass

from fastapi import Request

# prune idle keys at most this often
PRUNE_INTERVAL_SECONDS = 60.0


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    remaining: int
    reset_in: int  # seconds until the oldest counted hit leaves the window


def _looks_like_ip(value: str) -> bool:
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def get_client_ip(request: Request, trusted_proxies: int = 0) -> str:
    """
    Client address as seen by the outermost trusted proxy.

    With ``trusted_proxies`` at 0 the forwarding headers are ignored and the
    socket peer is used. Otherwise the entry ``trusted_proxies`` places from
    the right of ``X-Forwarded-For`` is taken, since every entry to its left
    was supplied by the client. ``X-Real-IP`` is a fallback for proxies that
    set only that header.
    """
    if trusted_proxies > 0:
        forwarded = [
            entry.strip()
            for entry in request.headers.get("x-forwarded-for", "").split(",")
            if entry.strip()
        ]
        if len(forwarded) >= trusted_proxies:
            candidate = forwarded[-trusted_proxies]
            if _looks_like_ip(candidate):
                return candidate

        real_ip = request.headers.get("x-real-ip", "").strip()
        if real_ip and _looks_like_ip(real_ip):
            return real_ip

    if request.client and request.client.host:
        return request.client.host
    return "127.0.0.1"


def build_key(identifier: str, ip: str, user_id: str | None = None) -> str:
    key = f"{identifier}:{ip}"
    if user_id:
        key = f"{key}:{user_id}"
    return key


class SlidingWindowRateLimiter:
    """Per-key log of hit timestamps."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._windows: dict[str, float] = {}
        self._last_prune = clock()

    def hit(self, key: str, max_requests: int, window_seconds: float) -> RateLimitResult:
        now = self._clock()
        self._maybe_prune(now)

        hits = self._hits.setdefault(key, deque())
        self._windows[key] = window_seconds
        cutoff = now - window_seconds
        while hits and hits[0] <= cutoff:
            hits.popleft()

        if len(hits) >= max_requests:
            reset_in = max(1, math.ceil(hits[0] + window_seconds - now))
            return RateLimitResult(allowed=False, remaining=0, reset_in=reset_in)

        hits.append(now)
        reset_in = max(1, math.ceil(hits[0] + window_seconds - now))
        return RateLimitResult(
            allowed=True,
            remaining=max_requests - len(hits),
            reset_in=reset_in,
        )

    def reset(self, key: str | None = None) -> None:
        if key is None:
            self._hits.clear()
            self._windows.clear()
        else:
            self._hits.pop(key, None)
            self._windows.pop(key, None)

    def _maybe_prune(self, now: float) -> None:
        if now - self._last_prune < PRUNE_INTERVAL_SECONDS:
            return
        self._last_prune = now
        stale = [
            key
            for key, hits in self._hits.items()
            if not hits or hits[-1] <= now - self._windows.get(key, 0)
        ]
        for key in stale:
            del self._hits[key]
            self._windows.pop(key, None)

    def __len__(self) -> int:
        return len(self._hits)
