"""Render service - résumé HTML to validated PDF bytes through the shared pool."""

import asyncio
import time

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from workkrd.config import Settings, get_settings
from workkrd.modules.fonts import FontBundle, FontCache
from workkrd.modules.templates import ResumeData, TemplateRegistry, is_resume_rtl
from workkrd.shared.errors import (
    InvalidPdfError,
    RenderError,
    RenderTimeoutError,
    WorkKrdError,
)
from workkrd.shared.logging import get_logger

from .executable import build_resolver
from .html import render_to_html
from .pool import BrowserPool, PlaywrightLauncher

logger = get_logger(__name__)


PDF_SIGNATURE = b"%PDF-"

PDF_OPTIONS = {
    "format": "A4",
    "print_background": True,
    "margin": {"top": "40px", "bottom": "40px", "left": "0", "right": "0"},
}

LATIN_FAMILY = "Inter"
ARABIC_FAMILY = "Noto Sans Arabic"


def validate_pdf(data: bytes) -> bytes:
    """Reject anything that does not start with the PDF signature."""
    if not data or data[: len(PDF_SIGNATURE)] != PDF_SIGNATURE:
        raise InvalidPdfError(data[:8] if data else b"")
    return data


class PdfRenderService:
    """Single entry point for turning HTML into PDF bytes."""

    def __init__(
        self,
        pool: BrowserPool,
        fonts: FontCache,
        templates: TemplateRegistry,
        content_timeout: float = 30.0,
        font_ready_timeout: float = 10.0,
        pdf_timeout: float = 30.0,
    ) -> None:
        self.pool = pool
        self.fonts = fonts
        self.templates = templates
        self.content_timeout = content_timeout
        self.font_ready_timeout = font_ready_timeout
        self.pdf_timeout = pdf_timeout

    async def render_pdf(self, html: str) -> bytes:
        """
        Render a complete HTML document to PDF.

        Each call gets exactly one attempt. The page and its slot are always
        given back, whether the render succeeds, times out or fails.

        Raises:
            RenderTimeoutError: content load or print exceeded its bound
            InvalidPdfError: output lacks the %PDF- signature
            RenderError: any other browser failure
            RenderQueueFullError: queue bound configured and reached
        """
        started = time.monotonic()
        try:
            async with self.pool.page() as page:
                await self._load_content(page, html)
                await self._wait_for_fonts(page)
                data = validate_pdf(await self._print(page))
        except WorkKrdError:
            raise
        except PlaywrightTimeoutError as e:
            raise RenderTimeoutError(f"Browser operation timed out: {e}") from e
        except PlaywrightError as e:
            raise RenderError(f"Browser failed to render PDF: {e}") from e
        except Exception as e:
            raise RenderError(f"PDF rendering failed: {e}") from e

        elapsed_ms = (time.monotonic() - started) * 1000
        logger.info(f"Rendered PDF: {len(data)} bytes in {elapsed_ms:.0f}ms")
        return data

    async def _load_content(self, page: Page, html: str) -> None:
        try:
            await asyncio.wait_for(
                page.set_content(
                    html,
                    wait_until="networkidle",
                    timeout=self.content_timeout * 1000,
                ),
                timeout=self.content_timeout,
            )
        except TimeoutError as e:
            raise RenderTimeoutError(
                f"Content did not finish loading within {self.content_timeout:g}s"
            ) from e

    async def _wait_for_fonts(self, page: Page) -> None:
        # Fonts are inlined, so this rarely waits; never block on it.
        try:
            await asyncio.wait_for(
                page.evaluate("document.fonts.ready.then(() => true)"),
                timeout=self.font_ready_timeout,
            )
        except TimeoutError:
            logger.warning(
                f"Fonts not ready after {self.font_ready_timeout:g}s; printing anyway"
            )

    async def _print(self, page: Page) -> bytes:
        try:
            return await asyncio.wait_for(page.pdf(**PDF_OPTIONS), timeout=self.pdf_timeout)
        except TimeoutError as e:
            raise RenderTimeoutError(
                f"PDF print did not finish within {self.pdf_timeout:g}s"
            ) from e

    # =========================================================================
    # RESUME PIPELINE
    # =========================================================================

    def _fonts_for(self, is_rtl: bool) -> list[FontBundle]:
        order = [ARABIC_FAMILY, LATIN_FAMILY] if is_rtl else [LATIN_FAMILY, ARABIC_FAMILY]
        return [self.fonts.get_family(family) for family in order]

    def build_html(self, resume: ResumeData, template_id: str, watermark: bool = False) -> str:
        """Résumé + template id -> complete HTML document."""
        is_rtl = is_resume_rtl(resume)
        markup = self.templates.render_markup(template_id, resume, watermark=watermark)
        return render_to_html(markup, is_rtl, self._fonts_for(is_rtl))

    async def render_resume(
        self,
        resume: ResumeData,
        template_id: str,
        watermark: bool = False,
    ) -> bytes:
        html = self.build_html(resume, template_id, watermark=watermark)
        return await self.render_pdf(html)


# =============================================================================
# PROCESS-WIDE INSTANCE
# =============================================================================

_service: PdfRenderService | None = None


def build_render_service(settings: Settings) -> PdfRenderService:
    pool = BrowserPool(
        PlaywrightLauncher(build_resolver(settings)),
        max_concurrent=settings.max_concurrent_pages,
        idle_timeout=settings.browser_idle_timeout,
        max_queue=settings.max_render_queue,
    )
    return PdfRenderService(
        pool,
        FontCache(settings.fonts_dir),
        TemplateRegistry(),
        content_timeout=settings.content_timeout,
        font_ready_timeout=settings.font_ready_timeout,
        pdf_timeout=settings.pdf_timeout,
    )


def get_render_service() -> PdfRenderService:
    global _service
    if _service is None:
        _service = build_render_service(get_settings())
    return _service


async def shutdown_render_service() -> None:
    """Close the shared browser, if one was ever started."""
    global _service
    if _service is not None:
        await _service.pool.shutdown()
        _service = None
