#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Syntax highlighting for ``<code lang>`` / ``<file lang>`` blocks via Pygments.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from pydoku.services.escaping import escape_entities

log = logging.getLogger(__name__)

CSS_SCOPE = ("pre.code", "pre.file")


# -----------------------------------------------------------------------------

def highlight_code(code: str, lang: str = "") -> str:
    """Return the inner HTML of a ``<pre>`` for *code*.

    Highlighted spans when *lang* names a known Pygments lexer, plain escaped
    text otherwise.
    """
    lang = lang.strip()
    if not lang:
        return escape_entities(code)
    try:
        lexer = get_lexer_by_name(lang, stripnl=False)
    except ClassNotFound:
        log.debug("no lexer for %r, leaving code unhighlighted", lang)
        return escape_entities(code)
    formatter = HtmlFormatter(nowrap=True)
    return highlight(code, lexer, formatter).rstrip("\n")


def pygments_css(style: str = "friendly") -> str:
    """Stylesheet for highlighted blocks, scoped to ``pre.code`` and ``pre.file``."""
    return HtmlFormatter(style=style).get_style_defs(CSS_SCOPE)


# -----------------------------------------------------------------------------
