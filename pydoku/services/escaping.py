#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Entity escaping for literal content.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import html as _html


# -----------------------------------------------------------------------------

def escape_entities(content: str) -> str:
    """Escape the five HTML-significant characters ``& < > " '``.

    Used for literal spans, code blocks and attribute values.
    """
    return _html.escape(content, quote=True).replace("&#x27;", "&#039;")


def escape_text(content: str) -> str:
    """Escape ``& < >`` only — for ordinary text between tags."""
    return _html.escape(content, quote=False)


# -----------------------------------------------------------------------------
