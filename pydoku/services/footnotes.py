#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Footnote section renderer.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from pydoku.models import FootnoteRegistry


# -----------------------------------------------------------------------------

def render_footnotes(registry: FootnoteRegistry) -> str:
    """Render one definition per unique footnote, preceded by its back-references.

    A footnote cited from several places gets one back-reference per citation;
    only the first carries the ``fn__N`` anchor the inline markers point at.
    """
    if not len(registry):
        return ""
    parts = ['<div class="footnotes">']
    for note in registry.notes:
        backrefs = []
        for n, marker in enumerate(note.markers):
            anchor = f' id="fn__{note.index}"' if n == 0 else ""
            backrefs.append(
                f'<sup><a href="#{marker}"{anchor} class="fn_bot">{note.index})</a></sup>'
            )
        parts.append(
            f'<div class="fn">{", ".join(backrefs)} '
            f'<div class="content">{note.html}</div></div>'
        )
    parts.append("</div>")
    return "\n".join(parts)


# -----------------------------------------------------------------------------
