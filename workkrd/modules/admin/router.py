"""
Admin routes.

Every route requires an admin caller. Reads hand out a fresh CSRF token in
the ``X-CSRF-Token`` response header; mutations require it back.
"""

from fastapi import APIRouter, Depends, Query, Response

from workkrd.modules.auth import CurrentUser, require_admin
from workkrd.modules.guard import (
    CSRF_HEADER,
    AuditLogService,
    CsrfTokenStore,
    get_audit_service,
    get_csrf_store,
    rate_limit,
    require_csrf,
)
from workkrd.modules.render import PdfRenderService, get_render_service
from workkrd.shared.errors import ValidationError
from workkrd.shared.logging import get_logger
from workkrd.shared.types import AuditAction

from .schemas import (
    AuditLogEntry,
    AuditLogResponse,
    PoolStatsResponse,
    PreviewPdfRequest,
    RecycleResponse,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])

NO_STORE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
    "X-Frame-Options": "SAMEORIGIN",
}


# =============================================================================
# PREVIEW
# =============================================================================

@router.post(
    "/preview-pdf",
    responses={200: {"content": {"application/pdf": {}}}},
)
async def preview_pdf(
    request: PreviewPdfRequest,
    admin: CurrentUser = Depends(require_csrf),
    _: None = Depends(rate_limit("admin-preview-pdf", max_requests=20, window_seconds=60)),
    service: PdfRenderService = Depends(get_render_service),
    audit: AuditLogService = Depends(get_audit_service),
) -> Response:
    """Render any template for an admin, never watermarked."""
    if not service.templates.exists(request.template):
        raise ValidationError("Invalid template ID", details={"template": request.template})

    pdf = await service.render_resume(request.resume_data, request.template, watermark=False)
    audit.record(
        admin.user_id,
        AuditAction.PREVIEW_PDF.value,
        request.template,
        {"bytes": len(pdf)},
    )

    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": "inline", **NO_STORE_HEADERS},
    )


# =============================================================================
# AUDIT LOG
# =============================================================================

@router.get("/audit-log", response_model=AuditLogResponse)
async def audit_log(
    response: Response,
    limit: int = Query(default=20, ge=1, le=100),
    admin: CurrentUser = Depends(require_admin),
    _: None = Depends(rate_limit("admin-audit-log", max_requests=30, window_seconds=60)),
    audit: AuditLogService = Depends(get_audit_service),
    csrf: CsrfTokenStore = Depends(get_csrf_store),
) -> AuditLogResponse:
    response.headers[CSRF_HEADER] = csrf.issue(admin.user_id)
    return AuditLogResponse(logs=[AuditLogEntry(**entry) for entry in audit.recent(limit)])


# =============================================================================
# RENDER POOL
# =============================================================================

@router.get("/render/pool", response_model=PoolStatsResponse)
async def pool_stats(
    response: Response,
    admin: CurrentUser = Depends(require_admin),
    service: PdfRenderService = Depends(get_render_service),
    csrf: CsrfTokenStore = Depends(get_csrf_store),
) -> PoolStatsResponse:
    response.headers[CSRF_HEADER] = csrf.issue(admin.user_id)
    return PoolStatsResponse(**service.pool.stats().to_dict())


@router.post("/render/pool/recycle", response_model=RecycleResponse)
async def recycle_pool(
    admin: CurrentUser = Depends(require_csrf),
    _: None = Depends(rate_limit("admin-pool", max_requests=10, window_seconds=60)),
    service: PdfRenderService = Depends(get_render_service),
    audit: AuditLogService = Depends(get_audit_service),
) -> RecycleResponse:
    """
    Close the shared browser so the next render launches a fresh one.

    Refused with 409 while pages are rendering.
    """
    recycled = await service.pool.recycle()
    stats = service.pool.stats()
    audit.record(
        admin.user_id,
        AuditAction.RECYCLE_BROWSER.value,
        "browser-pool",
        {"recycled": recycled, "launches": stats.launches},
    )
    logger.info(f"Browser pool recycled by {admin.user_id} (closed={recycled})")
    return RecycleResponse(recycled=recycled, stats=PoolStatsResponse(**stats.to_dict()))
