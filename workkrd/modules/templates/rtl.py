"""
Script-direction heuristics.

Arabic-script ranges cover Arabic, Arabic Supplement and both
presentation-form blocks, which together include Sorani Kurdish.
"""

import re

from .schemas import ResumeData

ARABIC_SCRIPT = re.compile("[\u0600-\u06FF\u0750-\u077F\uFB50-\uFDFF\uFE70-\uFEFF]")


def is_rtl_text(text: str | None) -> bool:
    if not text:
        return False
    return ARABIC_SCRIPT.search(text) is not None


def is_resume_rtl(resume: ResumeData) -> bool:
    """True when most of the headline fields are written right-to-left."""
    samples = [
        resume.personal.full_name,
        resume.personal.title,
        resume.summary,
        resume.experience[0].job_title if resume.experience else "",
    ]
    samples = [sample for sample in samples if sample]
    if not samples:
        return False

    rtl_count = sum(1 for sample in samples if is_rtl_text(sample))
    return rtl_count > len(samples) / 2
