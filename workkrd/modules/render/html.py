"""Wrap résumé markup into a self-contained, print-ready HTML document."""

from collections.abc import Sequence

from workkrd.modules.fonts import FontBundle

_FONT_FACE = """    @font-face {{
      font-family: '{family}';
      font-weight: {weight};
      src: url(data:font/woff2;base64,{payload}) format('woff2');
    }}"""


def _font_faces(fonts: Sequence[FontBundle]) -> str:
    rules = []
    for bundle in fonts:
        rules.append(_FONT_FACE.format(family=bundle.family, weight=400, payload=bundle.regular_base64))
        rules.append(_FONT_FACE.format(family=bundle.family, weight=700, payload=bundle.bold_base64))
    return "\n".join(rules)


def render_to_html(markup: str, is_rtl: bool, fonts: Sequence[FontBundle]) -> str:
    """
    Build the full HTML document handed to the browser.

    Fonts are inlined as data URIs so the page never touches the network.
    Page margins are zero here; the PDF print options apply them instead.
    """
    direction = "rtl" if is_rtl else "ltr"
    families = ", ".join(f"'{bundle.family}'" for bundle in fonts) or "sans-serif"

    return f"""<!DOCTYPE html>
<html dir="{direction}">
<head>
  <meta charset="UTF-8">
  <style>
{_font_faces(fonts)}
    * {{ margin: 0; padding: 0; box-sizing: border-box; }}
    @page {{ size: A4; margin: 0; }}
    html, body {{ margin: 0; padding: 0; font-family: {families}, sans-serif; }}
  </style>
</head>
<body>{markup}</body>
</html>"""
