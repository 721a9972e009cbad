"""
Font cache - load bundled fonts once and hand out base64 payloads.

Generated HTML embeds fonts as data URIs because the rendering browser has
no network access. Files are read on first use and kept for the life of
the process; there is no invalidation path since the assets ship with the
build.
"""

import base64
from dataclasses import dataclass
from pathlib import Path

from workkrd.shared.errors import FontLoadError
from workkrd.shared.logging import get_logger

logger = get_logger(__name__)


DEFAULT_FAMILY = "Noto Sans Arabic"

# family -> (regular file, bold file)
FONT_FAMILIES: dict[str, tuple[str, str]] = {
    "Noto Sans Arabic": ("noto-sans-arabic-regular.woff2", "noto-sans-arabic-bold.woff2"),
    "Inter": ("inter-regular.woff2", "inter-bold.woff2"),
}


@dataclass(frozen=True)
class FontBundle:
    """Base64 payloads for one font family."""
    family: str
    regular_base64: str
    bold_base64: str


def _read_font(path: Path) -> bytes:
    return path.read_bytes()


class FontCache:
    """Process-wide cache of embedded font payloads."""

    def __init__(
        self,
        fonts_dir: Path,
        families: dict[str, tuple[str, str]] | None = None,
    ) -> None:
        self.fonts_dir = Path(fonts_dir)
        self.families = families if families is not None else dict(FONT_FAMILIES)
        self._bundles: dict[str, FontBundle] = {}

    def _load_file(self, filename: str) -> str:
        path = self.fonts_dir / filename
        try:
            data = _read_font(path)
        except OSError as e:
            raise FontLoadError(filename, str(path)) from e
        return base64.b64encode(data).decode("ascii")

    def get_family(self, family: str) -> FontBundle:
        """
        Return the bundle for a configured family.

        Raises:
            KeyError: family is not configured
            FontLoadError: a font file could not be read
        """
        bundle = self._bundles.get(family)
        if bundle is not None:
            return bundle

        regular_file, bold_file = self.families[family]
        bundle = FontBundle(
            family=family,
            regular_base64=self._load_file(regular_file),
            bold_base64=self._load_file(bold_file),
        )
        self._bundles[family] = bundle
        logger.info(f"Loaded font family '{family}' from {self.fonts_dir}")
        return bundle

    def get_fonts(self) -> FontBundle:
        """Bundle for the default (Arabic/Kurdish-capable) family."""
        return self.get_family(DEFAULT_FAMILY)

    def get_all(self) -> list[FontBundle]:
        return [self.get_family(family) for family in self.families]

    def is_loaded(self, family: str) -> bool:
        return family in self._bundles
