"""Shared value types."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class RequestContext:
    """Per-request tracing context."""
    request_id: str
    actor: str = "anonymous"
    client_ip: str | None = None


class RenderAction(str, Enum):
    PREVIEW = "preview"
    DOWNLOAD = "download"


class AuditAction(str, Enum):
    PREVIEW_PDF = "PREVIEW_PDF"
    RECYCLE_BROWSER = "RECYCLE_BROWSER"
