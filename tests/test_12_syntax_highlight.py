#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Tests for syntax highlighting of <code> and <file> blocks.

Pygments is a hard dependency, so the highlighted path (span elements with
class names) is always exercised.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import pytest

from pydoku import ParserConfig, parse
from pydoku.services.highlight import highlight_code, pygments_css


# ── highlight_code ───────────────────────────────────────────────────────────

def test_known_language_produces_spans():
    assert '<span class="' in highlight_code("x = 1", "python")


def test_highlight_has_no_wrapper_or_trailing_newline():
    html = highlight_code("x = 1", "python")
    assert not html.startswith("<div")
    assert not html.endswith("\n")


def test_unknown_language_is_escaped():
    assert highlight_code("<b>", "zzznotalang") == "&lt;b&gt;"


def test_no_language_is_escaped():
    assert highlight_code("a & b") == "a &amp; b"


def test_highlighted_output_escapes_markup():
    html = highlight_code('print("<b>")', "python")
    assert "<b>" not in html


# ── blocks ───────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("lang", ["python", "javascript", "sql", "c"])
def test_code_block_languages(lang):
    html = parse(f"<code {lang}>\nfoo(1)\n</code>")
    assert f'<pre class="code {lang}">' in html
    assert "<span" in html


def test_file_block_highlighted():
    html = parse("<file python demo.py>\nimport os\n</file>")
    assert '<dl class="file"><dt>demo.py</dt>' in html
    assert '<pre class="file python">' in html
    assert "<span" in html


def test_highlighting_can_be_disabled():
    html = parse("<code python>\nx = 1\n</code>", ParserConfig(highlight_code=False))
    assert '<pre class="code python">x = 1</pre>' in html


# ── stylesheet ───────────────────────────────────────────────────────────────

def test_css_scoped_to_code_blocks():
    css = pygments_css()
    assert "pre.code" in css
    assert "pre.file" in css
    assert ".highlight" not in css


# -----------------------------------------------------------------------------
