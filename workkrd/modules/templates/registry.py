"""Résumé template registry - template id + résumé -> body markup (Jinja2)."""

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from jinja2 import Environment, FileSystemLoader, select_autoescape

from workkrd.shared.errors import TemplateNotFoundError

from .rtl import is_resume_rtl
from .schemas import ResumeData

TEMPLATES_DIR = Path(__file__).parent / "html"

# Section labels per script direction
SECTION_LABELS = {
    "en": {
        "summary": "Summary",
        "experience": "Experience",
        "education": "Education",
        "skills": "Skills",
        "languages": "Languages",
        "certifications": "Certifications",
        "projects": "Projects",
        "present": "Present",
        "contact": "Contact",
    },
    "ckb": {
        "summary": "پوختە",
        "experience": "ئەزموونی کار",
        "education": "خوێندن",
        "skills": "تواناکان",
        "languages": "زمانەکان",
        "certifications": "بڕوانامەکان",
        "projects": "پڕۆژەکان",
        "present": "ئێستا",
        "contact": "پەیوەندی",
    },
}


@dataclass(frozen=True)
class TemplateEntry:
    id: str
    name: str
    tier: Literal["free", "premium"]
    filename: str


DEFAULT_TEMPLATES: tuple[TemplateEntry, ...] = (
    TemplateEntry("modern", "Modern", "free", "modern.html"),
    TemplateEntry("classic", "Classic", "free", "classic.html"),
    TemplateEntry("kurdish-modern", "Kurdish Modern", "premium", "kurdish_modern.html"),
)


class TemplateRegistry:
    """Lookup and rendering of the available résumé templates."""

    def __init__(
        self,
        entries: tuple[TemplateEntry, ...] = DEFAULT_TEMPLATES,
        templates_dir: Path = TEMPLATES_DIR,
    ) -> None:
        self._entries = {entry.id: entry for entry in entries}
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(["html"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def get(self, template_id: str) -> TemplateEntry:
        entry = self._entries.get(template_id)
        if entry is None:
            raise TemplateNotFoundError(template_id)
        return entry

    def exists(self, template_id: str) -> bool:
        return template_id in self._entries

    def list(self) -> list[TemplateEntry]:
        return list(self._entries.values())

    def free_template_ids(self) -> set[str]:
        return {entry.id for entry in self._entries.values() if entry.tier == "free"}

    def render_markup(
        self,
        template_id: str,
        resume: ResumeData,
        watermark: bool = False,
    ) -> str:
        """
        Render the body markup for one résumé.

        Text fields are autoescaped. Description and achievement fields carry
        editor rich text that was reduced to the allowlist when the résumé
        was parsed, so they are inserted as markup.
        """
        entry = self.get(template_id)
        is_rtl = is_resume_rtl(resume)
        template = self.env.get_template(entry.filename)

        return template.render(
            resume=resume,
            personal=resume.personal,
            labels=SECTION_LABELS["ckb" if is_rtl else "en"],
            is_rtl=is_rtl,
            watermark=watermark,
        )
