"""Fonts module - cached base64 font payloads for PDF rendering."""

from .service import DEFAULT_FAMILY, FONT_FAMILIES, FontBundle, FontCache

__all__ = ["DEFAULT_FAMILY", "FONT_FAMILIES", "FontBundle", "FontCache"]
