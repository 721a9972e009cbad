"""
Logging setup with per-request context.

Request id and actor are kept in context variables and stamped onto every
log record, so messages from the render pool can be traced back to the
HTTP request that queued them.
"""

import logging
import sys
from contextvars import ContextVar

from .types import RequestContext

_request_context: ContextVar[RequestContext | None] = ContextVar(
    "workkrd_request_context", default=None
)

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(request_id)s] %(name)s: %(message)s"


class RequestContextFilter(logging.Filter):
    """Inject request context fields into log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        ctx = _request_context.get()
        record.request_id = ctx.request_id if ctx else "-"
        record.actor = ctx.actor if ctx else "-"
        return True


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger once. Safe to call repeatedly."""
    root = logging.getLogger()
    root.setLevel(level.upper())

    for handler in root.handlers:
        if getattr(handler, "_workkrd", False):
            return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(RequestContextFilter())
    handler._workkrd = True  # type: ignore[attr-defined]
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def set_request_context(ctx: RequestContext) -> None:
    _request_context.set(ctx)


def get_request_context() -> RequestContext | None:
    return _request_context.get()


def clear_request_context() -> None:
    _request_context.set(None)
