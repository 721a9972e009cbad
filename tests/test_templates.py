"""Tests for résumé parsing, sanitizing, direction detection and templates."""

import pytest

from workkrd.modules.templates import (
    TemplateRegistry,
    ResumeData,
    is_resume_rtl,
    is_rtl_text,
    normalize_phone_number,
    sanitize_html,
    sanitize_resume_data,
)
from workkrd.shared.errors import TemplateNotFoundError


class TestSanitize:
    @pytest.mark.parametrize(
        "dirty",
        [
            "<script>alert(1)</script>",
            "<SCRIPT type='text/javascript'>steal()</SCRIPT>",
            "<script>fetch('http://169.254.169.254/')</script >",
            "<scr<script></script>ipt>alert(1)</script>",
            "<iframe src='https://evil.example'></iframe>",
            "<style>body{display:none}</style>",
            "<object data='x.swf'></object><embed src='x.swf'>",
        ],
    )
    def test_active_content_is_removed(self, dirty):
        cleaned = sanitize_html(f"<p>ok</p>{dirty}")
        assert cleaned.startswith("<p>ok</p>")
        assert "<script" not in cleaned.lower()
        assert "<iframe" not in cleaned
        assert "<style" not in cleaned
        assert "<object" not in cleaned
        assert "<embed" not in cleaned

    def test_event_handlers_are_removed(self):
        cleaned = sanitize_html('<img src="https://cdn.example/x.png" onerror="alert(1)">')
        assert "onerror" not in cleaned
        assert 'src="https://cdn.example/x.png"' in cleaned

    @pytest.mark.parametrize(
        "link",
        [
            '<a href="javascript:alert(1)">x</a>',
            "<a href=javascript:alert(1)>x</a>",
            '<a href="  JaVaScRiPt:alert(1)">x</a>',
            '<a href="vbscript:msgbox(1)">x</a>',
            '<a href="data:text/html;base64,PHNjcmlwdD4=">x</a>',
        ],
    )
    def test_unsafe_links_lose_their_href(self, link):
        cleaned = sanitize_html(link)
        assert "href" not in cleaned
        assert ">x</a>" in cleaned

    def test_safe_links_survive(self):
        cleaned = sanitize_html('<a href="https://work.krd" title="site">site</a>')
        assert 'href="https://work.krd"' in cleaned
        assert 'title="site"' in cleaned

    def test_image_data_uris_survive(self):
        cleaned = sanitize_html('<img src="data:image/png;base64,AAAA">')
        assert 'src="data:image/png;base64,AAAA"' in cleaned

    def test_non_image_sources_are_dropped(self):
        cleaned = sanitize_html('<img src="javascript:alert(1)"><img src="data:text/html,x">')
        assert "javascript:" not in cleaned
        assert "data:text/html" not in cleaned

    def test_disallowed_styles_are_dropped(self):
        cleaned = sanitize_html('<span style="color: red; position: fixed">x</span>')
        assert "color: red" in cleaned
        assert "position" not in cleaned

    def test_rich_text_formatting_is_kept(self):
        value = "<ul><li><strong>Led</strong> a team of <em>five</em></li></ul>"
        assert sanitize_html(value) == value

    def test_recursive_over_rich_fields_only(self):
        data = {
            "summary": "R&D <lead>",
            "experience": [{"description": "<b onclick='x()'>Lead</b><script>x()</script>"}],
            "projects": [{"name": "<i>kept as text</i>", "description": "<p>ok</p>"}],
            "years": 3,
        }
        cleaned = sanitize_resume_data(data)
        assert cleaned["summary"] == "R&D <lead>"
        description = cleaned["experience"][0]["description"]
        assert description.startswith("<b>Lead</b>")
        assert "onclick" not in description
        assert "<script" not in description
        assert cleaned["projects"][0]["name"] == "<i>kept as text</i>"
        assert cleaned["projects"][0]["description"] == "<p>ok</p>"
        assert cleaned["years"] == 3

    def test_empty(self):
        assert sanitize_html("") == ""


class TestRenderedMarkupIsInert:
    """Hostile rich text must not reach the browser as live markup."""

    @pytest.mark.parametrize(
        "payload",
        [
            "<script>fetch('http://169.254.169.254/')</script >",
            "<a href=javascript:alert(1)>x</a>",
            "<scr<script></script>ipt>alert(1)</script>",
            "<img src=x onerror=alert(1)>",
        ],
    )
    @pytest.mark.parametrize("template_id", ["modern", "classic", "kurdish-modern"])
    def test_payload_in_description(self, payload, template_id):
        resume = ResumeData.model_validate({
            "experience": [{"jobTitle": "Dev", "description": payload}],
            "education": [{"degree": "BSc", "achievements": payload}],
            "projects": [{"name": "P", "description": payload}],
        })

        markup = TemplateRegistry().render_markup(template_id, resume)

        assert "<script" not in markup.lower()
        assert "javascript:" not in markup.lower()
        assert "onerror" not in markup.lower()

    def test_plain_fields_are_escaped_not_executed(self):
        resume = ResumeData.model_validate({
            "personal": {"fullName": "<script>alert(1)</script>"},
            "summary": "<img src=x onerror=alert(1)>",
        })

        markup = TemplateRegistry().render_markup("modern", resume)

        assert "<script" not in markup
        assert "&lt;script&gt;" in markup
        assert "&lt;img src=x onerror=alert(1)&gt;" in markup

    def test_profile_image_must_be_an_image_url(self):
        resume = ResumeData.model_validate({
            "personal": {"fullName": "ئاراس", "profileImage": "javascript:alert(1)"},
        })
        assert resume.personal.profile_image == ""

        resume = ResumeData.model_validate({
            "personal": {"fullName": "ئاراس", "profileImage": "data:image/jpeg;base64,AAAA"},
        })
        markup = TemplateRegistry().render_markup("kurdish-modern", resume)
        assert 'src="data:image/jpeg;base64,AAAA"' in markup


class TestPhoneNumbers:
    def test_arabic_indic_digits(self):
        assert normalize_phone_number("٠٧٥٠١٢٣٤٥٦٧") == "07501234567"

    def test_empty(self):
        assert normalize_phone_number(None) == ""
        assert normalize_phone_number("") == ""


class TestDirection:
    def test_rtl_text(self):
        assert is_rtl_text("سڵاو")
        assert not is_rtl_text("Hello")
        assert not is_rtl_text("")
        assert not is_rtl_text(None)

    def test_majority_decides(self):
        resume = ResumeData.model_validate({
            "personal": {"fullName": "ئاراس", "title": "Engineer"},
            "summary": "ئەندازیاری نەرمەکاڵا",
        })
        assert is_resume_rtl(resume)

    def test_tie_is_ltr(self):
        resume = ResumeData.model_validate({
            "personal": {"fullName": "ئاراس", "title": "Engineer"},
        })
        assert not is_resume_rtl(resume)

    def test_empty_resume_is_ltr(self):
        assert not is_resume_rtl(ResumeData())


class TestResumeData:
    def test_parses_camel_case_and_fills_defaults(self):
        resume = ResumeData.model_validate({
            "personal": {"fullName": "Jane Doe", "phone": "٠٧٧٠", "profileImage": None},
            "experience": [{"jobTitle": "Dev", "company": "Acme", "current": True}],
            "unknownField": "ignored",
        })

        assert resume.personal.full_name == "Jane Doe"
        assert resume.personal.phone == "0770"
        assert resume.personal.profile_image == ""
        assert resume.experience[0].job_title == "Dev"
        assert resume.experience[0].current is True
        assert resume.education == []

    def test_missing_personal_section(self):
        resume = ResumeData.model_validate({"summary": "Hi", "personal": None})
        assert resume.personal.full_name == ""

    def test_numbers_become_strings(self):
        resume = ResumeData.model_validate({"education": [{"gpa": 3.8, "school": "UoK"}]})
        assert resume.education[0].gpa == "3.8"

    def test_rich_text_is_sanitized_on_parse(self):
        resume = ResumeData.model_validate({
            "summary": "R&D <b>lead</b>",
            "experience": [{"description": "<script>x()</script><p>Shipped</p>"}],
        })
        assert resume.summary == "R&D <b>lead</b>"
        assert "<script" not in resume.experience[0].description
        assert "<p>Shipped</p>" in resume.experience[0].description


class TestTemplateRegistry:
    def test_lists_shipped_templates(self):
        registry = TemplateRegistry()
        assert {entry.id for entry in registry.list()} == {"modern", "classic", "kurdish-modern"}
        assert registry.free_template_ids() == {"modern", "classic"}
        assert registry.get("kurdish-modern").tier == "premium"

    def test_unknown_template(self):
        with pytest.raises(TemplateNotFoundError):
            TemplateRegistry().get("nope")

    @pytest.mark.parametrize("template_id", ["modern", "classic", "kurdish-modern"])
    def test_every_template_renders(self, template_id):
        resume = ResumeData.model_validate({
            "personal": {"fullName": "Jane Doe", "email": "jane@example.com", "title": "Engineer"},
            "summary": "Builds things.",
            "experience": [{"jobTitle": "Dev", "company": "Acme", "startDate": "2020", "current": True}],
            "education": [{"degree": "BSc", "school": "UoK"}],
            "skills": [{"name": "Python", "level": "Expert"}],
            "languages": [{"name": "Kurdish", "proficiency": "Native"}],
        })

        markup = TemplateRegistry().render_markup(template_id, resume)

        assert "Jane Doe" in markup
        assert "jane@example.com" in markup
        assert "Acme" in markup
        assert "Present" in markup
        assert "Python" in markup

    def test_plain_fields_are_escaped(self):
        resume = ResumeData(summary="", personal={"full_name": "<b>Jane</b>"})

        markup = TemplateRegistry().render_markup("modern", resume)

        assert "&lt;b&gt;Jane&lt;/b&gt;" in markup

    def test_description_keeps_rich_text(self):
        resume = ResumeData.model_validate({
            "experience": [{"jobTitle": "Dev", "description": "<ul><li>Shipped</li></ul>"}],
        })

        markup = TemplateRegistry().render_markup("classic", resume)

        assert "<ul><li>Shipped</li></ul>" in markup

    def test_kurdish_labels_for_rtl_resume(self):
        resume = ResumeData.model_validate({
            "personal": {"fullName": "ئاراس محەمەد", "title": "ئەندازیار"},
            "experience": [{"jobTitle": "ئەندازیار", "current": True}],
        })

        markup = TemplateRegistry().render_markup("modern", resume)

        assert "ئەزموونی کار" in markup
        assert "ئێستا" in markup

    def test_watermark_overlay(self):
        markup = TemplateRegistry().render_markup("modern", ResumeData(), watermark=True)
        assert "wk-watermark" in markup
        assert "Upgrade to remove watermark" in markup
