#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
DokuWiki renderer
=================
Converts DokuWiki markup to an HTML fragment.

Supported block syntax
----------------------
====== H1 ====== … == H5 ==          — headings, each opening a section div
  * item  /    * nested               — unordered lists (two spaces per level)
  - item                              — ordered lists
^ head ^ head ^  /  | cell | cell |   — tables (see :mod:`pydoku.services.tables`)
> quote  /  >> nested                 — blockquotes
<code lang> … </code>                 — code, highlighted when the language is known
<file lang name> … </file>            — file listings
<html> … </html>  /  <php> … </php>   — embedded HTML (when allowed) / PHP shown as code
  (two-space indented text)           — preformatted block
----                                  — horizontal rule
{{image.png}}                         — standalone media line
~~NOTOC~~  /  ~~NOCACHE~~             — document directives
Anything else is paragraph text; a blank line ends the current block.

Inline syntax is handled by :mod:`pydoku.services.inline`.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from pydoku.models import Heading, ParseContext, plain_text
from pydoku.schemas import ParserConfig
from pydoku.services.escaping import escape_entities, escape_text
from pydoku.services.footnotes import render_footnotes
from pydoku.services.highlight import highlight_code
from pydoku.services.inline import InlineEngine, render_nodes
from pydoku.services.lists import MARKER_KINDS, ListTracker
from pydoku.services.namespaces import section_id
from pydoku.services.tables import TableBuilder

log = logging.getLogger(__name__)


TOC_MIN_HEADINGS = 3


# -----------------------------------------------------------------------------
# Line patterns
# -----------------------------------------------------------------------------

_DIRECTIVES_RE  = re.compile(r"^(?:~~(?:NOTOC|NOCACHE)~~\s*)+$")
_CODE_OPEN_RE   = re.compile(r"^<(?P<kind>code|file)(?:\s+(?P<lang>[^\s>]+))?(?:\s+(?P<name>[^>]+?))?\s*>")
_EMBED_OPEN_RE  = re.compile(r"^<(?P<kind>html|HTML|php|PHP)>")
_LIST_RE        = re.compile(r"^(?P<indent> *)(?P<marker>[*-])(?:\s+(?P<content>.*))?$")
_INDENT_RE      = re.compile(r"^( {2,})\S")
_QUOTE_RE       = re.compile(r"^(?P<level>>+)\s?(?P<content>.*)$")
_HEADER_RE      = re.compile(r"^(?P<open>={2,})(?P<title>.*?[^=\s].*?)(?P<close>={2,})\s*$")
_HR_RE          = re.compile(r"^-{4,}$")
_MEDIA_LINE_RE  = re.compile(r"^\{\{[^{}]+\}\}$")


# -----------------------------------------------------------------------------

@dataclass
class RenderResult:
    html: str
    headings: list[Heading] = field(default_factory=list)
    footnotes: int = 0
    warnings: list[str] = field(default_factory=list)


@dataclass
class _Verbatim:
    """An open code / file / html / php / preformatted block."""
    kind: str
    lines: list[str] = field(default_factory=list)
    lang: str = ""
    name: str = ""
    indent: int = 0


# -----------------------------------------------------------------------------
# Block state machine
# -----------------------------------------------------------------------------

class _BlockParser:
    """Line-by-line classifier for one ``parse()`` call."""

    def __init__(self, parser: "Parser", ctx: ParseContext) -> None:
        self.config = parser.config
        self.inline = parser.inline
        self.tables = parser.tables
        self.ctx = ctx

        self.out: list[str] = []
        self.mode: Optional[str] = None
        self.paragraph: list[str] = []
        self.table_rows: list[str] = []
        self.lists = ListTracker()
        self.quote_level = 0
        self.quote_lines: list[str] = []
        self.quote_parts: list[str] = []
        self.verbatim: Optional[_Verbatim] = None
        self.section_open = False

    # ── driver ────────────────────────────────────────────────────────────

    def run(self, markup: str) -> str:
        markup = markup.replace("\r\n", "\n").replace("\r", "\n")

        for line in markup.split("\n"):
            self._line(line)

        if self.verbatim is not None and self.verbatim.kind not in ("pre", "literal"):
            self.ctx.warn(f"unterminated <{self.verbatim.kind}> block closed at end of input")
        self.flush()
        if self.section_open:
            self.out.append("</div>")

        parts: list[str] = []
        toc = self._toc()
        if toc:
            parts.append(toc)
        parts.extend(p for p in self.out if p)
        footnotes = render_footnotes(self.ctx.footnotes)
        if footnotes:
            parts.append(footnotes)
        body = "\n".join(parts)
        return f'<div class="{escape_entities(self.config.wrapper_class)}">\n{body}\n</div>'

    def _line(self, line: str) -> None:
        if self.verbatim is not None and self._continue_verbatim(line):
            return

        stripped = line.strip()
        if not stripped:
            self.flush()
            return

        expanded = line.expandtabs(2)

        # A line of nothing but directives ends the current block like a blank one.
        if _DIRECTIVES_RE.match(stripped) and not _INDENT_RE.match(expanded):
            if "NOTOC" in stripped:
                self.ctx.notoc = True
            self.flush()
            return

        if self._open_embed(stripped) or self._open_code(stripped):
            return

        if stripped[0] in "^|":
            if self.ctx.literal_section:
                self._enter(None)
                self.verbatim = _Verbatim(kind="literal", lines=[stripped])
            else:
                self._enter("table")
                self.table_rows.append(stripped)
            return

        m = _LIST_RE.match(expanded)
        if m:
            self._list_item(m)
            return

        m = _INDENT_RE.match(expanded)
        if m:
            self._enter(None)
            indent = len(m.group(1))
            self.verbatim = _Verbatim(kind="pre", lines=[expanded[indent:]], indent=indent)
            return

        m = _QUOTE_RE.match(line)
        if m:
            self._quote_line(len(m.group("level")), m.group("content"))
            return

        m = _HEADER_RE.match(stripped)
        if m:
            self._heading(m)
            return

        if _HR_RE.match(stripped):
            self._enter(None)
            self.out.append("<hr />")
            self.ctx.literal_section = False
            return

        if _MEDIA_LINE_RE.match(stripped):
            self._enter(None)
            self.out.append(f'<p class="media">{self.inline.render(stripped, self.ctx)}</p>')
            return

        self._enter("paragraph")
        self.paragraph.append(stripped)

    def _enter(self, mode: Optional[str]) -> None:
        """Switch buffering mode, flushing whatever the previous mode held."""
        if self.mode != mode or mode is None:
            self.flush()
        self.mode = mode

    # ── flushing ──────────────────────────────────────────────────────────

    def flush(self) -> None:
        """Close every buffered block: lists, table, quotes, paragraph, verbatim."""
        if self.lists:
            self.out.append("".join(self.lists.close_all()))
        if self.table_rows:
            self.out.append(self.tables.render(self.table_rows, self.ctx))
            self.table_rows = []
        if self.quote_level:
            self._flush_quote()
        if self.paragraph:
            html = self.inline.render(" ".join(self.paragraph), self.ctx)
            self.out.append(f"<p>{html}</p>")
            self.paragraph = []
        if self.verbatim is not None:
            self.out.append(self._render_verbatim(self.verbatim))
            self.verbatim = None
        self.mode = None

    # ── lists ─────────────────────────────────────────────────────────────

    def _list_item(self, m: re.Match) -> None:
        self._enter("list")
        depth = len(m.group("indent")) // 2
        events = self.lists.open_or_continue(depth, MARKER_KINDS[m.group("marker")])
        html = self.inline.render((m.group("content") or "").strip(), self.ctx)
        level = self.lists.level
        self.out.append("".join(events) + f'<li class="level{level}"><div class="li">{html}</div>')

    # ── quotes ────────────────────────────────────────────────────────────

    def _quote_line(self, level: int, content: str) -> None:
        self._enter("quote")
        if level != self.quote_level:
            self._quote_text()
            if level > self.quote_level:
                self.quote_parts.extend(["<blockquote>"] * (level - self.quote_level))
            else:
                self.quote_parts.extend(["</blockquote>"] * (self.quote_level - level))
            self.quote_level = level
        self.quote_lines.append(self.inline.render(content.strip(), self.ctx))

    def _quote_text(self) -> None:
        if self.quote_lines:
            self.quote_parts.append('<div class="no">' + "<br/>".join(self.quote_lines) + "</div>")
            self.quote_lines = []

    def _flush_quote(self) -> None:
        self._quote_text()
        self.quote_parts.extend(["</blockquote>"] * self.quote_level)
        self.out.append("".join(self.quote_parts))
        self.quote_parts = []
        self.quote_level = 0

    # ── headings ──────────────────────────────────────────────────────────

    def _heading(self, m: re.Match) -> None:
        self._enter(None)
        level = 7 - min(len(m.group("open")), 6)
        nodes = self.inline.apply(m.group("title").strip(), self.ctx)
        title = plain_text(nodes).strip()
        anchor = self.ctx.unique_id(section_id(title))
        self.ctx.headings.append(Heading(level=level, id=anchor, title=title))
        literal = {s.casefold() for s in self.config.literal_sections}
        self.ctx.literal_section = title.casefold() in literal

        if self.section_open:
            self.out.append("</div>")
        n = len(self.ctx.headings)
        self.out.append(
            f'<h{level} class="sectionedit{n}" id="{anchor}">{render_nodes(nodes)}</h{level}>'
        )
        self.out.append(f'<div class="level{level}">')
        self.section_open = True

    # ── verbatim blocks ───────────────────────────────────────────────────

    def _open_code(self, stripped: str) -> bool:
        m = _CODE_OPEN_RE.match(stripped)
        if not m:
            return False
        self._enter(None)
        lang = m.group("lang") or ""
        if lang == "-":
            lang = ""
        self.verbatim = _Verbatim(kind=m.group("kind"), lang=lang, name=(m.group("name") or "").strip())
        self._verbatim_text(stripped[m.end():], first=True)
        return True

    def _open_embed(self, stripped: str) -> bool:
        m = _EMBED_OPEN_RE.match(stripped)
        if not m:
            return False
        self._enter(None)
        self.verbatim = _Verbatim(kind=m.group("kind").lower())
        self._verbatim_text(stripped[m.end():], first=True)
        return True

    def _continue_verbatim(self, line: str) -> bool:
        """Feed *line* to the open verbatim block; False if the block ended before it."""
        block = self.verbatim
        if block.kind == "pre":
            expanded = line.expandtabs(2)
            if not line.strip():
                block.lines.append("")
                return True
            indent = len(expanded) - len(expanded.lstrip(" "))
            if indent >= block.indent and not _LIST_RE.match(expanded) and expanded.strip()[0] not in "^|":
                block.lines.append(expanded[block.indent:])
                return True
            self.flush()
            return False
        if block.kind == "literal":
            stripped = line.strip()
            if stripped and stripped[0] in "^|":
                block.lines.append(stripped)
                return True
            self.flush()
            return False
        self._verbatim_text(line)
        return True

    def _verbatim_text(self, text: str, first: bool = False) -> None:
        """Append *text* to the open code/file/html/php block, closing it at its end tag."""
        block = self.verbatim
        close = re.search(rf"</{block.kind}>", text, re.IGNORECASE)
        if close is None:
            if not (first and not text.strip()):
                block.lines.append(text)
            return
        before, after = text[:close.start()], text[close.end():]
        if before.strip() or not first:
            block.lines.append(before)
        self.out.append(self._render_verbatim(block))
        self.verbatim = None
        if after.strip():
            self._line(after)

    def _render_verbatim(self, block: _Verbatim) -> str:
        lines = list(block.lines)
        while lines and not lines[-1].strip():
            lines.pop()
        text = "\n".join(lines)

        if block.kind == "html":
            if self.config.html_embed_allowed:
                return text
            return f'<pre class="code html">{escape_entities(text)}</pre>'
        if block.kind == "php":
            return f'<pre class="code php">{escape_entities(text)}</pre>'
        if block.kind in ("pre", "literal"):
            return f'<pre class="code">{escape_entities(text)}</pre>'

        if self.config.highlight_code:
            body = highlight_code(text, block.lang)
        else:
            body = escape_entities(text)
        css = f"{block.kind} {block.lang}".strip()
        pre = f'<pre class="{escape_entities(css)}">{body}</pre>'
        if block.kind == "file" and block.name:
            return f'<dl class="file"><dt>{escape_text(block.name)}</dt><dd>{pre}</dd></dl>'
        return pre

    # ── table of contents ─────────────────────────────────────────────────

    def _toc(self) -> str:
        headings = self.ctx.headings
        if not self.config.toc_enabled or self.ctx.notoc:
            return ""
        if len(headings) < self.config.toc_min_headings:
            return ""

        base_level = min(h.level for h in headings)
        tracker = ListTracker()
        lines = ['<div id="dw__toc" class="toc">',
                 '<h3 class="toc-title">Table of Contents</h3>']
        for h in headings:
            depth = h.level - base_level + 1
            events = tracker.open_or_continue(depth, "ul")
            lines.append(
                "".join(events)
                + f'<li class="level{tracker.level}"><div class="li"><a href="#{h.id}">{escape_text(h.title)}</a></div>'
            )
        lines.append("".join(tracker.close_all()))
        lines.append("</div>")
        return "\n".join(lines)


# -----------------------------------------------------------------------------
# Public API
# -----------------------------------------------------------------------------

class Parser:
    """DokuWiki-to-HTML parser.

    A parser holds only its immutable :class:`ParserConfig` and compiled
    rules; every call to :meth:`parse` gets a fresh :class:`ParseContext`, so
    a single instance may be shared across threads.
    """

    def __init__(self, config: Optional[ParserConfig] = None) -> None:
        self.config = config or ParserConfig()
        self.inline = InlineEngine(self.config)
        self.tables = TableBuilder(self.inline)

    def parse(self, markup: str) -> str:
        return self.render(markup).html

    def render(self, markup: str) -> RenderResult:
        ctx = ParseContext(config=self.config)
        html = _BlockParser(self, ctx).run(markup)
        if ctx.warnings:
            log.debug("rendered with %d warning(s)", len(ctx.warnings))
        return RenderResult(
            html=html,
            headings=list(ctx.headings),
            footnotes=len(ctx.footnotes),
            warnings=list(ctx.warnings),
        )


def parse(markup: str, config: Optional[ParserConfig] = None) -> str:
    """Render *markup* to HTML with *config* (defaults when omitted)."""
    return Parser(config).parse(markup)


# -----------------------------------------------------------------------------
