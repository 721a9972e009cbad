"""Templates module - résumé model, sanitizing, direction detection, markup."""

from .registry import DEFAULT_TEMPLATES, TemplateEntry, TemplateRegistry
from .rtl import is_resume_rtl, is_rtl_text
from .sanitize import (
    is_safe_image_url,
    is_safe_link,
    normalize_phone_number,
    sanitize_html,
    sanitize_resume_data,
)
from .schemas import ResumeData

__all__ = [
    "DEFAULT_TEMPLATES",
    "ResumeData",
    "TemplateEntry",
    "TemplateRegistry",
    "is_resume_rtl",
    "is_rtl_text",
    "is_safe_image_url",
    "is_safe_link",
    "normalize_phone_number",
    "sanitize_html",
    "sanitize_resume_data",
]
