"""Health check route."""

from fastapi import APIRouter, Depends

from workkrd import __version__
from workkrd.db import get_db
from workkrd.modules.render import PdfRenderService, get_render_service
from workkrd.shared.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(service: PdfRenderService = Depends(get_render_service)) -> dict:
    """Service status plus a snapshot of the render pool."""
    db_ok = True
    try:
        get_db().execute("SELECT 1").fetchone()
    except Exception as e:
        logger.warning(f"Health check: database unavailable: {e}")
        db_ok = False

    return {
        "status": "ok" if db_ok else "degraded",
        "version": __version__,
        "database": "ok" if db_ok else "unavailable",
        "fonts_loaded": {family: service.fonts.is_loaded(family) for family in service.fonts.families},
        "pool": service.pool.stats().to_dict(),
    }
