"""
Shared fixtures.

The browser is replaced by in-process doubles: ``FakeLauncher`` hands out
``FakeBrowser`` objects whose pages return canned PDF bytes, so the pool
and render service run their real logic without Chromium.
"""

import asyncio
import shutil
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

from workkrd.app import build_app
from workkrd.config import Settings, init_settings, reset_settings
from workkrd.db import close_db, init_db
from workkrd.db.migrate import run_migrations
from workkrd.modules.auth import reset_entitlement_service
from workkrd.modules.fonts import FONT_FAMILIES, FontCache
from workkrd.modules.guard import reset_guards
from workkrd.modules.render import BrowserPool, PdfRenderService
from workkrd.modules.render import service as render_service_module
from workkrd.modules.templates import TemplateRegistry

PDF_BYTES = b"%PDF-1.7\n% fake document\n%%EOF\n"

ADMIN_ID = "admin-1"
PREMIUM_ID = "premium-1"
FREE_ID = "free-1"


# =============================================================================
# BROWSER DOUBLES
# =============================================================================

class FakePage:
    def __init__(self, browser: "FakeBrowser") -> None:
        self.browser = browser
        self.content: str | None = None
        self.pdf_options: dict[str, Any] | None = None
        self.closed = False

    async def set_content(self, html: str, wait_until: str = "load", timeout: float = 0) -> None:
        if self.browser.on_set_content is not None:
            await self.browser.on_set_content(self)
        self.content = html

    async def evaluate(self, expression: str) -> Any:
        if self.browser.on_evaluate is not None:
            return await self.browser.on_evaluate(self)
        return True

    async def pdf(self, **options: Any) -> bytes:
        self.pdf_options = options
        if self.browser.on_pdf is not None:
            return await self.browser.on_pdf(self)
        await asyncio.sleep(0)
        return self.browser.pdf_bytes

    async def close(self) -> None:
        if not self.closed:
            self.browser.open_pages -= 1
        self.closed = True


class FakeBrowser:
    def __init__(self, pdf_bytes: bytes = PDF_BYTES) -> None:
        self.pdf_bytes = pdf_bytes
        self.pages: list[FakePage] = []
        self.open_pages = 0
        self.peak_pages = 0
        self.connected = True
        self.closed = False
        self.on_set_content: Callable[[FakePage], Any] | None = None
        self.on_evaluate: Callable[[FakePage], Any] | None = None
        self.on_new_page: Callable[[], Any] | None = None
        self.on_pdf: Callable[[FakePage], Any] | None = None
        self._handlers: dict[str, list[Callable[[Any], None]]] = {}

    def on(self, event: str, handler: Callable[[Any], None]) -> None:
        self._handlers.setdefault(event, []).append(handler)

    def is_connected(self) -> bool:
        return self.connected

    async def new_page(self) -> FakePage:
        if self.on_new_page is not None:
            await self.on_new_page()
        page = FakePage(self)
        self.pages.append(page)
        self.open_pages += 1
        self.peak_pages = max(self.peak_pages, self.open_pages)
        return page

    def crash(self) -> None:
        """Simulate the browser process dying."""
        self.connected = False
        self.emit_disconnected()

    def emit_disconnected(self) -> None:
        for handler in self._handlers.get("disconnected", []):
            handler(self)

    async def close(self) -> None:
        self.closed = True
        if self.connected:
            self.connected = False
            self.emit_disconnected()


class FakeLauncher:
    def __init__(
        self,
        delay: float = 0.0,
        failures: int = 0,
        configure: Callable[[FakeBrowser], None] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.delay = delay
        self.failures = failures
        self.error = error
        self.configure = configure
        self.browsers: list[FakeBrowser] = []
        self.launch_calls = 0
        self.stopped = False

    async def launch(self) -> FakeBrowser:
        self.launch_calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.failures > 0:
            self.failures -= 1
            raise self.error or RuntimeError("browser failed to start")
        browser = FakeBrowser()
        if self.configure is not None:
            self.configure(browser)
        self.browsers.append(browser)
        return browser

    async def stop(self) -> None:
        self.stopped = True


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Temporary directory removed after the test."""
    path = Path(tempfile.mkdtemp(prefix="workkrd-test-"))
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def fonts_dir(temp_dir: Path) -> Path:
    """Directory holding a stand-in file for every bundled font."""
    directory = temp_dir / "fonts"
    directory.mkdir()
    for regular, bold in FONT_FAMILIES.values():
        (directory / regular).write_bytes(f"regular:{regular}".encode())
        (directory / bold).write_bytes(f"bold:{bold}".encode())
    return directory


@pytest.fixture
def settings(temp_dir: Path, fonts_dir: Path) -> Generator[Settings, None, None]:
    reset_settings()
    test_settings = Settings(
        _env_file=None,
        db_path=temp_dir / "test.db",
        fonts_dir=fonts_dir,
        admin_user_ids=[ADMIN_ID],
        premium_user_ids=[PREMIUM_ID],
    )
    init_settings(test_settings)
    yield test_settings
    reset_settings()


@pytest.fixture
def test_db(temp_dir: Path) -> Generator[Any, None, None]:
    """Migrated SQLite database in the temp directory."""
    db = init_db(temp_dir / "test.db")
    run_migrations(db)
    yield db
    close_db()


@pytest.fixture
def fake_launcher() -> FakeLauncher:
    return FakeLauncher()


@pytest.fixture
def render_service(fake_launcher: FakeLauncher, fonts_dir: Path) -> PdfRenderService:
    pool = BrowserPool(fake_launcher, max_concurrent=3, idle_timeout=30.0)
    return PdfRenderService(
        pool,
        FontCache(fonts_dir),
        TemplateRegistry(),
        content_timeout=2.0,
        font_ready_timeout=0.5,
        pdf_timeout=2.0,
    )


@pytest.fixture
def client(
    settings: Settings,
    render_service: PdfRenderService,
    monkeypatch: pytest.MonkeyPatch,
) -> Generator[TestClient, None, None]:
    """API client backed by the fake browser."""
    reset_guards()
    reset_entitlement_service()
    monkeypatch.setattr(render_service_module, "_service", render_service)

    app = build_app(settings)
    with TestClient(app) as test_client:
        yield test_client

    reset_guards()
    reset_entitlement_service()
