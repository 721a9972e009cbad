"""PDF generation route."""

import base64

from fastapi import APIRouter, Depends, Response

from workkrd.modules.auth import (
    CurrentUser,
    EntitlementService,
    get_current_user,
    get_entitlement_service,
)
from workkrd.modules.guard import rate_limit
from workkrd.shared.errors import ForbiddenError, RenderError, WorkKrdError
from workkrd.shared.logging import get_logger
from workkrd.shared.types import RenderAction

from .schemas import Base64PdfResponse, GeneratePdfRequest
from .service import PdfRenderService, get_render_service

logger = get_logger(__name__)

router = APIRouter(prefix="/api/pdf", tags=["pdf"])


# =============================================================================
# ROUTES
# =============================================================================

@router.post(
    "/generate",
    dependencies=[Depends(rate_limit("pdf", max_requests=20, window_seconds=60))],
    responses={200: {"content": {"application/pdf": {}}}},
)
async def generate_pdf(
    request: GeneratePdfRequest,
    user: CurrentUser = Depends(get_current_user),
    service: PdfRenderService = Depends(get_render_service),
    entitlements: EntitlementService = Depends(get_entitlement_service),
) -> Response:
    """
    Render a résumé with one of the registered templates.

    Previews of templates the user has no access to come back watermarked;
    downloads of them are refused.
    """
    template = service.templates.get(request.template)
    entitlement = entitlements.check(user.user_id, template.id)

    if request.action == RenderAction.DOWNLOAD:
        if not entitlement.has_access:
            raise ForbiddenError(
                "Upgrade required to download this template. Please upgrade your plan."
            )
        if not entitlement.can_export:
            raise ForbiddenError(
                "Export limit reached. Please upgrade your plan to download more resumes."
            )

    watermarked = not entitlement.has_access

    try:
        pdf = await service.render_resume(request.resume_data, template.id, watermark=watermarked)
    except WorkKrdError:
        raise
    except Exception as e:
        logger.exception(f"PDF generation failed for template {template.id}")
        raise RenderError(f"Failed to generate PDF: {e}") from e

    logger.info(
        f"Generated {request.action.value} for {user.user_id} "
        f"(template={template.id}, watermarked={watermarked}, {len(pdf)} bytes)"
    )

    if request.encoding == "base64":
        body = Base64PdfResponse(
            pdf=base64.b64encode(pdf).decode("ascii"),
            template=template.id,
            watermarked=watermarked,
        )
        return Response(content=body.model_dump_json(), media_type="application/json")

    disposition = (
        'attachment; filename="resume.pdf"'
        if request.action == RenderAction.DOWNLOAD
        else "inline"
    )
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={
            "Content-Disposition": disposition,
            "X-Template": template.id,
            "X-Has-Access": str(entitlement.has_access).lower(),
            "X-Watermarked": str(watermarked).lower(),
        },
    )
