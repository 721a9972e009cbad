"""
Shared headless browser pool.

One Chromium process serves every PDF render. The pool:

- launches the browser lazily and hands the same in-flight launch to every
  caller that arrives during a cold start;
- bounds the number of simultaneously open pages with slots, queueing the
  excess in strict arrival order;
- closes the browser after a period with no active pages;
- forgets a crashed browser so the next caller relaunches.

All state lives on the instance and is only touched from the event loop
thread, so mutations between awaits are atomic.
"""

import asyncio
from collections import deque
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict, dataclass
from typing import Any, Protocol

from playwright.async_api import Browser, Page, Playwright, async_playwright

from workkrd.shared.errors import ConflictError, RenderQueueFullError
from workkrd.shared.logging import get_logger

from .executable import ChainResolver

logger = get_logger(__name__)


DEFAULT_MAX_CONCURRENT = 3
DEFAULT_IDLE_TIMEOUT = 30.0


class BrowserLauncher(Protocol):
    async def launch(self) -> Browser: ...

    async def stop(self) -> None: ...


class PlaywrightLauncher:
    """Start Chromium through a long-lived Playwright driver."""

    def __init__(self, resolver: ChainResolver, headless: bool = True) -> None:
        self.resolver = resolver
        self.headless = headless
        self._playwright: Playwright | None = None

    async def launch(self) -> Browser:
        resolved = await self.resolver.resolve()
        if self._playwright is None:
            self._playwright = await async_playwright().start()

        logger.info(f"Launching Chromium from {resolved.path}")
        return await self._playwright.chromium.launch(
            executable_path=str(resolved.path),
            headless=self.headless,
            args=resolved.args,
        )

    async def stop(self) -> None:
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None


@dataclass
class PoolStats:
    browser_connected: bool
    launching: bool
    active_pages: int
    queued: int
    max_concurrent: int
    idle_timer_armed: bool
    launches: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class BrowserPool:
    """Single shared browser with a FIFO page-slot gate and idle shutdown."""

    def __init__(
        self,
        launcher: BrowserLauncher,
        max_concurrent: int = DEFAULT_MAX_CONCURRENT,
        idle_timeout: float = DEFAULT_IDLE_TIMEOUT,
        max_queue: int | None = None,
    ) -> None:
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")
        self.launcher = launcher
        self.max_concurrent = max_concurrent
        self.idle_timeout = idle_timeout
        self.max_queue = max_queue

        self._browser: Browser | None = None
        self._launch_task: asyncio.Task | None = None
        self._active = 0
        self._waiters: deque[asyncio.Future] = deque()
        self._idle_handle: asyncio.TimerHandle | None = None
        self._close_tasks: set[asyncio.Task] = set()
        self.launches = 0

    @property
    def active_pages(self) -> int:
        return self._active

    @property
    def queued(self) -> int:
        return sum(1 for waiter in self._waiters if not waiter.done())

    # =========================================================================
    # SLOTS
    # =========================================================================

    async def acquire_slot(self) -> None:
        """
        Take a page slot, waiting in line when all are busy.

        Waiters are served strictly in arrival order. A free slot is never
        taken ahead of someone already queued.
        """
        self._cancel_idle_timer()

        if self._active < self.max_concurrent and not self._waiters:
            self._active += 1
            return

        if self.max_queue is not None and self.queued >= self.max_queue:
            raise RenderQueueFullError(self.max_queue)

        waiter = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        logger.debug(f"Render queued ({len(self._waiters)} waiting)")

        try:
            await waiter
        except asyncio.CancelledError:
            if waiter.done() and not waiter.cancelled():
                # slot was already handed over
                self.release_slot()
            elif waiter in self._waiters:
                self._waiters.remove(waiter)
            raise

    def release_slot(self) -> None:
        """Give a slot back, handing it straight to the oldest waiter if any."""
        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                waiter.set_result(None)
                return

        if self._active <= 0:
            raise RuntimeError("release_slot() called without a held slot")
        self._active -= 1

        if self._active == 0:
            self._arm_idle_timer()

    # =========================================================================
    # BROWSER LIFECYCLE
    # =========================================================================

    async def acquire_browser(self) -> Browser:
        """Return the live browser, launching it once for all concurrent callers."""
        browser = self._browser
        if browser is not None and browser.is_connected():
            return browser

        if self._launch_task is None or self._launch_task.done():
            self._launch_task = asyncio.ensure_future(self._launch())

        task = self._launch_task
        try:
            return await asyncio.shield(task)
        except Exception:
            if self._launch_task is task:
                self._launch_task = None
            raise

    async def _launch(self) -> Browser:
        browser = await self.launcher.launch()
        self.launches += 1
        browser.on("disconnected", lambda _: self._on_disconnected(browser))
        self._browser = browser
        logger.info(f"Browser ready (launch #{self.launches})")

        if self._active == 0:
            self._arm_idle_timer()
        return browser

    def _on_disconnected(self, browser: Browser) -> None:
        # A newer browser may already have replaced this one.
        if self._browser is not browser:
            return
        logger.warning("Browser disconnected; next render will relaunch")
        self._detach_browser()

    def _detach_browser(self) -> Browser | None:
        browser = self._browser
        self._browser = None
        if self._launch_task is not None and self._launch_task.done():
            self._launch_task = None
        return browser

    def _arm_idle_timer(self) -> None:
        self._cancel_idle_timer()
        loop = asyncio.get_running_loop()
        self._idle_handle = loop.call_later(self.idle_timeout, self._on_idle)

    def _cancel_idle_timer(self) -> None:
        if self._idle_handle is not None:
            self._idle_handle.cancel()
            self._idle_handle = None

    def _on_idle(self) -> None:
        self._idle_handle = None
        if self._active > 0 or self._browser is None:
            return

        logger.info(f"Closing browser after {self.idle_timeout:g}s idle")
        browser = self._detach_browser()
        task = asyncio.ensure_future(self._close_browser(browser))
        self._close_tasks.add(task)
        task.add_done_callback(self._close_tasks.discard)

    async def _close_browser(self, browser: Browser | None) -> None:
        if browser is None:
            return
        try:
            await browser.close()
        except Exception as e:
            logger.warning(f"Error while closing browser: {e}")

    # =========================================================================
    # PAGES
    # =========================================================================

    @asynccontextmanager
    async def page(self) -> AsyncIterator[Page]:
        """
        Hold a slot and a fresh page for the duration of the block.

        The page is closed and the slot released on every exit path.
        """
        await self.acquire_slot()
        try:
            browser = await self.acquire_browser()
            page = await browser.new_page()
            try:
                yield page
            finally:
                await self._close_page(page)
        finally:
            self.release_slot()

    async def _close_page(self, page: Page) -> None:
        try:
            await page.close()
        except Exception as e:
            logger.warning(f"Failed to close page: {e}")

    # =========================================================================
    # ADMIN / SHUTDOWN
    # =========================================================================

    def stats(self) -> PoolStats:
        browser = self._browser
        return PoolStats(
            browser_connected=browser is not None and browser.is_connected(),
            launching=self._launch_task is not None and not self._launch_task.done(),
            active_pages=self._active,
            queued=self.queued,
            max_concurrent=self.max_concurrent,
            idle_timer_armed=self._idle_handle is not None,
            launches=self.launches,
        )

    async def recycle(self) -> bool:
        """
        Close the current browser so the next render starts a fresh one.

        Returns False when there was no browser to close.

        Raises:
            ConflictError: pages are still rendering
        """
        if self._active > 0:
            raise ConflictError(
                "Browser is busy rendering; try again when idle",
                details={"active_pages": self._active},
            )
        self._cancel_idle_timer()
        browser = self._detach_browser()
        if browser is None:
            return False
        await self._close_browser(browser)
        return True

    async def shutdown(self) -> None:
        """Close everything. Used on application exit."""
        self._cancel_idle_timer()

        if self._launch_task is not None and not self._launch_task.done():
            self._launch_task.cancel()
            try:
                await self._launch_task
            except (asyncio.CancelledError, Exception) as e:
                logger.debug(f"Abandoned browser launch: {e!r}")
        self._launch_task = None

        browser = self._browser
        self._browser = None
        await self._close_browser(browser)

        if self._close_tasks:
            await asyncio.gather(*self._close_tasks, return_exceptions=True)
        await self.launcher.stop()
