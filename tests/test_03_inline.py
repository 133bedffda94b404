#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Tests for inline rules: formatting, links, media, typography, emoticons."""
# -----------------------------------------------------------------------------

from __future__ import annotations

import pytest

from pydoku import Parser, ParserConfig, parse
from pydoku.models import ParseContext, Strong, Text
from pydoku.services.inline import InlineEngine


def _inline(markup: str, **options) -> str:
    cfg = ParserConfig(**options)
    return InlineEngine(cfg).render(markup, ParseContext(config=cfg))


# =============================================================================
# Formatting
# =============================================================================

@pytest.mark.parametrize("markup,expected", [
    ("**bold**",          "<strong>bold</strong>"),
    ("//italic//",        "<em>italic</em>"),
    ("__under__",         "<u>under</u>"),
    ("''mono''",          "<code>mono</code>"),
    ("H<sub>2</sub>O",    "H<sub>2</sub>O"),
    ("E=mc<sup>2</sup>",  "E=mc<sup>2</sup>"),
    ("<del>gone</del>",   "<del>gone</del>"),
])
def test_formatting(markup, expected):
    assert _inline(markup) == expected


def test_formatting_nests_different_types():
    assert _inline("**bold //both//**") == "<strong>bold <em>both</em></strong>"


def test_unclosed_marker_is_literal():
    assert _inline("a ** b") == "a ** b"


def test_empty_span_is_literal():
    assert _inline("****") == "****"


def test_formatting_wraps_a_link():
    html = _inline("**see [[page]] now**")
    assert html.startswith("<strong>see <a ")
    assert html.endswith("</a> now</strong>")


def test_apply_returns_nodes():
    cfg = ParserConfig()
    nodes = InlineEngine(cfg).apply("a **b**", ParseContext(config=cfg))
    assert nodes == [Text("a "), Strong(children=[Text("b")])]


def test_forced_line_break():
    assert _inline("one\\\\ two") == "one<br/> two"


def test_backslashes_inside_word_are_not_a_break():
    assert "<br/>" not in _inline("C:\\\\path")


# =============================================================================
# Links
# =============================================================================

def test_internal_link_resolved_in_namespace():
    html = _inline("[[syntax]]", current_namespace="wiki")
    assert html == (
        '<a href="/wiki/syntax" class="wikilink1" title="wiki:syntax" '
        'data-wiki-id="wiki:syntax">syntax</a>'
    )


def test_internal_link_with_text():
    html = _inline("[[:start|Home]]", current_namespace="wiki")
    assert 'href="/start"' in html
    assert ">Home</a>" in html


def test_internal_link_with_section():
    assert 'href="/page#some_section"' in _inline("[[page#Some Section]]")


def test_link_to_section_of_current_page():
    html = _inline("[[#intro]]")
    assert 'href="#intro"' in html
    assert "data-wiki-id" not in html


def test_external_link_with_text():
    html = _inline("[[https://example.com/a|Example]]")
    assert html == (
        '<a href="https://example.com/a" class="urlextern" '
        'title="https://example.com/a" rel="nofollow">Example</a>'
    )


def test_bare_url_autolinked():
    html = _inline("visit https://www.example.com/ today")
    assert '<a href="https://www.example.com/" class="urlextern"' in html
    assert ">example.com</a> today" in html


def test_bare_url_excludes_trailing_punctuation():
    html = _inline("Visit http://example.com.")
    assert 'href="http://example.com"' in html
    assert html.endswith("</a>.")


def test_slashes_in_url_are_not_italics():
    html = _inline("see http://example.com/a//b//c here")
    assert "<em>" not in html
    assert 'href="http://example.com/a//b//c"' in html


def test_www_url_autolinked():
    html = _inline("www.example.com")
    assert 'href="http://www.example.com"' in html
    assert ">example.com</a>" in html


def test_email_autolink():
    html = _inline("<joe@example.com>")
    assert 'href="mailto:joe@example.com"' in html
    assert 'class="mail"' in html


def test_email_link_with_text():
    html = _inline("[[joe@example.com|Joe]]")
    assert 'href="mailto:joe@example.com"' in html
    assert ">Joe</a>" in html


def test_interwiki_link():
    html = _inline("[[wp>Python]]")
    assert 'href="https://en.wikipedia.org/wiki/Python"' in html
    assert 'class="interwiki iw_wp"' in html


def test_interwiki_name_template():
    html = _inline("[[gh>a b]]", interwiki_map={"gh": "https://github.com/{NAME}/issues"})
    assert 'href="https://github.com/a%20b/issues"' in html


def test_unknown_interwiki_is_literal_and_warns():
    result = Parser().render("[[zz>Page]]")
    assert "[[zz&gt;Page]]" in result.html
    assert "<a " not in result.html
    assert any("zz" in w for w in result.warnings)


def test_windows_share_is_literal():
    html = _inline("[[\\\\server\\share]]")
    assert html == "\\\\server\\share"


# =============================================================================
# Media
# =============================================================================

def test_image_centered_by_default():
    html = _inline("{{wiki:img.png}}")
    assert html == '<img src="/media/wiki/img.png" class="mediacenter" alt="" loading="lazy" />'


@pytest.mark.parametrize("markup,align", [
    ("{{ img.png}}",  "mediaright"),
    ("{{img.png }}",  "medialeft"),
    ("{{ img.png }}", "mediacenter"),
])
def test_image_alignment_from_whitespace(markup, align):
    assert f'class="{align}"' in _inline(markup)


def test_image_size_and_caption():
    html = _inline("{{img.png?200x100|A cat}}")
    assert 'width="200"' in html
    assert 'height="100"' in html
    assert 'alt="A cat" title="A cat"' in html


def test_image_width_only():
    html = _inline("{{img.png?300}}")
    assert 'width="300"' in html
    assert "height=" not in html


def test_image_namespace_resolved():
    assert 'src="/media/wiki/img.png"' in _inline("{{img.png}}", current_namespace="wiki")


def test_external_image_passes_through():
    assert 'src="https://example.com/x.png"' in _inline("{{https://example.com/x.png}}")


def test_linkonly_renders_anchor():
    html = _inline("{{img.png?linkonly}}")
    assert html == '<a href="/media/img.png" class="media" title="img.png">img.png</a>'


def test_non_image_media_is_file_link():
    html = _inline("{{docs:manual.pdf|Manual}}")
    assert 'class="media mediafile mf_pdf"' in html
    assert ">Manual</a>" in html


def test_media_extension_stays_inside_class_attribute():
    html = parse('{{http://x.org/a.x"onmouseover="alert(1)}}', ParserConfig(html_embed_allowed=False))
    assert 'class="media mediafile mf_xonmouseoveralert1" title="a.x&quot;onmouseover=&quot;alert(1)"' in html


def test_image_inside_link_text():
    html = _inline("[[page|{{img.png}}]]")
    assert html.startswith('<a href="/page"')
    assert "<img " in html
    assert html.endswith("</a>")


# =============================================================================
# Typography
# =============================================================================

@pytest.mark.parametrize("markup,entity", [
    ("a -> b",     "&rarr;"),
    ("a <- b",     "&larr;"),
    ("a <-> b",    "&harr;"),
    ("a => b",     "&rArr;"),
    ("a -- b",     "&ndash;"),
    ("a --- b",    "&mdash;"),
    ("(c) 2024",   "&copy;"),
    ("Brand(tm)",  "&trade;"),
    ("(R)",        "&reg;"),
    ("wait...",    "&hellip;"),
])
def test_typography(markup, entity):
    assert entity in _inline(markup)


def test_dimension_multiplication_sign():
    assert _inline("640x480") == "640&times;480"


def test_typography_disabled():
    assert _inline("a -> b (c)", typography_enabled=False) == "a -&gt; b (c)"


# =============================================================================
# Emoticons
# =============================================================================

def test_emoticon_glyph():
    assert _inline("hi :-)") == "hi 🙂"


def test_longest_emoticon_wins():
    assert _inline(":-D") == "😄"


def test_emoticon_needs_word_boundary():
    assert _inline("x:-)") == "x:-)"


def test_emoticon_image():
    html = _inline("FIXME", use_emoji=False)
    assert html == '<img src="/lib/images/smileys/fixme.svg" class="icon smiley" alt="FIXME" />'


# =============================================================================
# Inline HTML / PHP
# =============================================================================

def test_inline_html_passthrough():
    assert _inline("a <html><b>x</b></html> b") == "a <b>x</b> b"


def test_inline_html_disallowed_is_code():
    html = _inline("a <html><b>x</b></html>", html_embed_allowed=False)
    assert '<code class="code html">&lt;b&gt;x&lt;/b&gt;</code>' in html


def test_inline_php_is_always_code():
    assert '<code class="code php">echo 1;</code>' in _inline("run <php>echo 1;</php>")


# -----------------------------------------------------------------------------
