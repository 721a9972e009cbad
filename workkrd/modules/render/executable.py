"""
Chrome/Chromium executable resolution.

Two providers sit behind ``ExecutableResolver``:

- ``LocalChromeResolver`` probes an explicit override, then a fixed list of
  OS install locations.
- ``PackagedChromiumResolver`` downloads a packaged Chromium archive from a
  configured URL once and unpacks it into a cache directory.

``build_resolver`` picks the order from the ``production`` flag.
"""

import asyncio
import os
import stat
import tarfile
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import httpx

from workkrd.config import Settings
from workkrd.shared.errors import NoBrowserFoundError
from workkrd.shared.logging import get_logger

logger = get_logger(__name__)


def default_chrome_paths() -> list[str]:
    paths = [
        # Windows
        r"C:\Program Files\Google\Chrome\Application\chrome.exe",
        r"C:\Program Files (x86)\Google\Chrome\Application\chrome.exe",
    ]
    local_app_data = os.environ.get("LOCALAPPDATA")
    if local_app_data:
        paths.append(rf"{local_app_data}\Google\Chrome\Application\chrome.exe")
    paths += [
        # macOS
        "/Applications/Google Chrome.app/Contents/MacOS/Google Chrome",
        # Linux
        "/usr/bin/google-chrome",
        "/usr/bin/chromium-browser",
        "/usr/bin/chromium",
    ]
    return paths


LOCAL_BROWSER_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]

PACKAGED_BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--no-zygote",
    "--single-process",
    "--font-render-hinting=none",
]

_EXECUTABLE_NAMES = ("chromium", "chrome", "headless_shell")


@dataclass(frozen=True)
class ResolvedBrowser:
    path: Path
    args: list[str]


class ExecutableResolver(Protocol):
    """Resolve a browser binary, or return None when this provider has none."""

    browser_args: list[str]

    async def resolve(self) -> Path | None: ...


class LocalChromeResolver:
    """Probe the filesystem for an installed Chrome/Chromium."""

    browser_args = LOCAL_BROWSER_ARGS

    def __init__(self, override: str | None = None, candidates: list[str] | None = None) -> None:
        self.override = override
        self.candidates = candidates if candidates is not None else default_chrome_paths()

    def _paths(self) -> list[str]:
        paths = [self.override] if self.override else []
        return paths + self.candidates

    async def resolve(self) -> Path | None:
        for candidate in self._paths():
            path = Path(candidate)
            if path.is_file():
                logger.debug(f"Using local browser at {path}")
                return path
        return None


class PackagedChromiumResolver:
    """Fetch a Chromium build shipped as a tar archive."""

    browser_args = PACKAGED_BROWSER_ARGS

    def __init__(
        self,
        pack_url: str | None,
        cache_dir: Path,
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.pack_url = pack_url
        self.cache_dir = Path(cache_dir)
        self.timeout = timeout
        self.transport = transport

    def _find_executable(self) -> Path | None:
        if not self.cache_dir.exists():
            return None
        for path in sorted(self.cache_dir.rglob("*")):
            if path.is_file() and path.name in _EXECUTABLE_NAMES:
                return path
        return None

    async def _download(self, archive: Path) -> None:
        logger.info(f"Downloading packaged Chromium from {self.pack_url}")
        async with httpx.AsyncClient(
            timeout=self.timeout, follow_redirects=True, transport=self.transport
        ) as client:
            async with client.stream("GET", self.pack_url) as response:
                response.raise_for_status()
                # file I/O stays off the event loop
                f = await asyncio.to_thread(open, archive, "wb")
                try:
                    async for chunk in response.aiter_bytes():
                        await asyncio.to_thread(f.write, chunk)
                finally:
                    await asyncio.to_thread(f.close)

    def _extract(self, archive: Path) -> None:
        with tarfile.open(archive) as tar:
            tar.extractall(self.cache_dir, filter="data")

    async def resolve(self) -> Path | None:
        if not self.pack_url:
            return None

        executable = await asyncio.to_thread(self._find_executable)
        if executable is None:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            archive = self.cache_dir / "chromium-pack.tar"
            try:
                await self._download(archive)
                await asyncio.to_thread(self._extract, archive)
            except (httpx.HTTPError, tarfile.TarError, OSError) as e:
                logger.error(f"Packaged Chromium unavailable: {e}")
                return None
            finally:
                archive.unlink(missing_ok=True)
            executable = await asyncio.to_thread(self._find_executable)

        if executable is None:
            logger.error(f"No Chromium binary found in pack from {self.pack_url}")
            return None

        mode = executable.stat().st_mode
        executable.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return executable


class ChainResolver:
    """Try providers in order; first hit wins."""

    def __init__(self, resolvers: list[ExecutableResolver]) -> None:
        self.resolvers = resolvers

    async def resolve(self) -> ResolvedBrowser:
        for resolver in self.resolvers:
            path = await resolver.resolve()
            if path is not None:
                return ResolvedBrowser(path=path, args=list(resolver.browser_args))
        raise NoBrowserFoundError()


def build_resolver(settings: Settings) -> ChainResolver:
    """
    Select resolver order for the environment.

    Non-production prefers a local install to avoid version mismatches;
    production prefers the packaged build and falls back to a local one.
    """
    local = LocalChromeResolver(override=settings.chrome_path)
    packaged = PackagedChromiumResolver(settings.chromium_pack_url, settings.chromium_cache_dir)

    if settings.production:
        return ChainResolver([packaged, local])
    return ChainResolver([local, packaged])
