"""Render module - shared browser pool and HTML to PDF rendering."""

from .executable import ChainResolver, LocalChromeResolver, PackagedChromiumResolver, build_resolver
from .html import render_to_html
from .pool import BrowserPool, PlaywrightLauncher, PoolStats
from .service import PdfRenderService, get_render_service, shutdown_render_service, validate_pdf

__all__ = [
    "BrowserPool",
    "ChainResolver",
    "LocalChromeResolver",
    "PackagedChromiumResolver",
    "PdfRenderService",
    "PlaywrightLauncher",
    "PoolStats",
    "build_resolver",
    "get_render_service",
    "render_to_html",
    "shutdown_render_service",
    "validate_pdf",
]
