"""
Application factory - builds the FastAPI app with middleware, error
handling and routes.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from workkrd import __version__
from workkrd.config import Settings, get_settings, init_settings
from workkrd.db import close_db, init_db
from workkrd.db.migrate import run_migrations
from workkrd.modules.admin.router import router as admin_router
from workkrd.modules.auth import USER_ID_HEADER
from workkrd.modules.guard import get_client_ip
from workkrd.modules.health.router import router as health_router
from workkrd.modules.render import shutdown_render_service
from workkrd.modules.render.router import router as pdf_router
from workkrd.shared.errors import RateLimitedError, ValidationError, WorkKrdError
from workkrd.shared.ids import generate_request_id
from workkrd.shared.logging import (
    clear_request_context,
    get_logger,
    get_request_context,
    set_request_context,
    setup_logging,
)
from workkrd.shared.types import RequestContext

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()

    setup_logging(settings.log_level)
    logger.info("Starting Work.krd render service...")

    db = init_db(settings.db_path)
    logger.info(f"Database: {settings.db_path}")

    applied = run_migrations(db)
    if applied:
        logger.info(f"Applied {len(applied)} migrations")

    logger.info(
        f"Render pool: {settings.max_concurrent_pages} pages, "
        f"{settings.browser_idle_timeout:g}s idle timeout, "
        f"{'production' if settings.production else 'development'} browser resolution"
    )

    yield

    logger.info("Shutting down Work.krd render service...")
    await shutdown_render_service()
    close_db()
    logger.info("Work.krd render service stopped")


def _error_response(
    exc: WorkKrdError,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    ctx = get_request_context()
    content = exc.to_dict()
    content["request_id"] = ctx.request_id if ctx else None
    return JSONResponse(status_code=exc.http_status, content=content, headers=headers)


def build_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Optional settings override (useful for testing)

    Returns:
        Configured FastAPI application
    """
    if settings is None:
        settings = get_settings()
    else:
        init_settings(settings)

    app = FastAPI(
        title="Work.krd Render Service",
        description="Résumé PDF rendering over a shared headless browser",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[
            "Content-Disposition",
            "X-CSRF-Token",
            "X-Has-Access",
            "X-Request-ID",
            "X-Template",
            "X-Watermarked",
        ],
    )

    # Request context middleware
    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next: Any) -> Response:
        """Attach request context for logging and tracing."""
        ctx = RequestContext(
            request_id=request.headers.get("X-Request-ID") or generate_request_id(),
            actor=request.headers.get(USER_ID_HEADER) or "anonymous",
            client_ip=get_client_ip(request, settings.trusted_proxy_hops),
        )
        set_request_context(ctx)

        try:
            try:
                response = await call_next(request)
            except Exception:
                # handled here so the body still carries this request's id
                logger.exception(f"Unhandled error on {request.method} {request.url.path}")
                response = _error_response(WorkKrdError("Internal server error"))
            response.headers["X-Request-ID"] = ctx.request_id
            return response
        finally:
            clear_request_context()

    # =========================================================================
    # ERROR HANDLERS
    # =========================================================================

    @app.exception_handler(WorkKrdError)
    async def workkrd_error_handler(request: Request, exc: WorkKrdError) -> JSONResponse:
        if exc.http_status >= 500:
            logger.error(f"{request.method} {request.url.path} failed: [{exc.code}] {exc.message}")
        else:
            logger.info(f"{request.method} {request.url.path} -> {exc.http_status} {exc.code}")

        headers = None
        if isinstance(exc, RateLimitedError):
            headers = {"Retry-After": str(exc.retry_after)}
        return _error_response(exc, headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = [
            {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")}
            for error in exc.errors()
        ]
        return _error_response(ValidationError("Invalid request body", details={"errors": errors}))

    # Register routers
    app.include_router(health_router)
    app.include_router(pdf_router)
    app.include_router(admin_router)

    @app.get("/")
    async def root() -> dict[str, str]:
        return {"service": "Work.krd Render Service", "version": __version__}

    return app
