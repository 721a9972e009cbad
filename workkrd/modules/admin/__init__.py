"""Admin module - preview rendering, audit trail and pool control."""

from .router import router

__all__ = ["router"]
