"""Tests for the HTML document wrapper."""

from workkrd.modules.fonts import FontBundle
from workkrd.modules.render import render_to_html

ARABIC = FontBundle("Noto Sans Arabic", "QVJBQklDLVJFRw==", "QVJBQklDLUJPTEQ=")
LATIN = FontBundle("Inter", "TEFUSU4tUkVH", "TEFUSU4tQk9MRA==")


def test_rtl_document_root():
    html = render_to_html("<p>سڵاو</p>", True, [ARABIC])

    assert '<html dir="rtl">' in html
    assert "<body><p>سڵاو</p></body>" in html


def test_ltr_document_root():
    html = render_to_html("<p>Hello</p>", False, [LATIN])

    assert '<html dir="ltr">' in html


def test_fonts_are_inlined_as_data_uris():
    html = render_to_html("", False, [LATIN, ARABIC])

    assert "url(data:font/woff2;base64,TEFUSU4tUkVH)" in html
    assert "url(data:font/woff2;base64,QVJBQklDLUJPTEQ=)" in html
    assert html.count("@font-face") == 4
    assert "font-weight: 700" in html
    assert "http://" not in html and "https://" not in html


def test_page_setup():
    html = render_to_html("", False, [LATIN])

    assert "@page { size: A4; margin: 0; }" in html
    assert "* { margin: 0; padding: 0;" in html
    assert "font-family: 'Inter', sans-serif" in html


def test_pure_function():
    assert render_to_html("<b>x</b>", True, [ARABIC]) == render_to_html("<b>x</b>", True, [ARABIC])
