"""
Input hygiene for user-authored résumé content.

Rich-text fields from the editor are inserted into the page unescaped, and
that page is loaded by the server's headless browser. They go through an
allowlist cleaner (bleach); anything not listed is stripped. Every other
field is plain text and is autoescaped by the templates.
"""

from typing import Any

import bleach
from bleach.css_sanitizer import CSSSanitizer

# Allowlist for editor rich text
ALLOWED_TAGS = [
    "p", "br", "strong", "b", "em", "i", "u", "s",
    "ul", "ol", "li", "blockquote",
    "h3", "h4", "h5", "h6",
    "span", "div", "a", "img",
    "table", "thead", "tbody", "tr", "th", "td",
]

ALLOWED_PROTOCOLS = ["http", "https", "mailto", "data"]

ALLOWED_CSS_PROPERTIES = [
    "color", "background-color", "font-size", "font-weight", "font-style",
    "text-align", "text-decoration", "margin", "padding", "line-height",
]

# Keys whose string values are rich text, in both JSON and attribute spelling
RICH_TEXT_FIELDS = frozenset({"description", "achievements"})

_COMMON_ATTRIBUTES = ("class", "style")

_LINK_SCHEMES = ("http://", "https://", "mailto:")
_IMAGE_SCHEMES = ("http://", "https://", "data:image/")

_css_sanitizer = CSSSanitizer(allowed_css_properties=ALLOWED_CSS_PROPERTIES)

_ARABIC_INDIC_DIGITS = str.maketrans("٠١٢٣٤٥٦٧٨٩", "0123456789")


def is_safe_link(url: str) -> bool:
    return url.strip().lower().startswith(_LINK_SCHEMES)


def is_safe_image_url(url: str) -> bool:
    """http(s) or an inline ``data:image/...`` URI."""
    return url.strip().lower().startswith(_IMAGE_SCHEMES)


def _allow_link_attribute(tag: str, name: str, value: str) -> bool:
    if name == "href":
        return is_safe_link(value)
    return name in ("title", "target", "rel", *_COMMON_ATTRIBUTES)


def _allow_image_attribute(tag: str, name: str, value: str) -> bool:
    if name == "src":
        return is_safe_image_url(value)
    return name in ("alt", "title", "width", "height", *_COMMON_ATTRIBUTES)


ALLOWED_ATTRIBUTES = {
    "*": list(_COMMON_ATTRIBUTES),
    "a": _allow_link_attribute,
    "img": _allow_image_attribute,
}


def sanitize_html(html: str) -> str:
    """Reduce editor HTML to the allowlisted tags, attributes and styles."""
    if not html:
        return ""
    return bleach.clean(
        html,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        protocols=ALLOWED_PROTOCOLS,
        css_sanitizer=_css_sanitizer,
        strip=True,
        strip_comments=True,
    )


def sanitize_resume_data(obj: Any, rich_fields: frozenset[str] = RICH_TEXT_FIELDS) -> Any:
    """
    Recursively clean the rich-text values of a JSON-like structure.

    Strings under a key in ``rich_fields`` are passed through
    ``sanitize_html``; everything else is returned unchanged.
    """
    if isinstance(obj, list):
        return [sanitize_resume_data(item, rich_fields) for item in obj]
    if isinstance(obj, dict):
        cleaned = {}
        for key, value in obj.items():
            if key in rich_fields and isinstance(value, str):
                cleaned[key] = sanitize_html(value)
            else:
                cleaned[key] = sanitize_resume_data(value, rich_fields)
        return cleaned
    return obj


def normalize_phone_number(phone: str | None) -> str:
    """Map Arabic-Indic numerals (٠-٩) to Western digits."""
    if not phone:
        return ""
    return phone.translate(_ARABIC_INDIC_DIGITS)
