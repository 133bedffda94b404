#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Inline rule engine
==================
Rewrites one content fragment (a paragraph, list item, table cell, quote
line or heading) into a list of inline nodes, then renders those nodes.

Rules run in a fixed order and each one only ever rewrites :class:`Text`
nodes, so anything resolved by an earlier rule is out of reach of the later
ones:

  1. literal escapes  ``<nowiki>…</nowiki>``  ``%%…%%``  inline ``<html>`` / ``<php>``,
     then the ``~~NOTOC~~`` / ``~~NOCACHE~~`` directives are dropped
  2. forced line breaks  ``\\\\``
  3. links  ``[[…]]``  ``<user@host>``  bare ``http://`` / ``www.`` URLs
  4. media  ``{{…}}``
  5. formatting  ``**`` ``//`` ``__`` ``''`` ``<sub>`` ``<sup>`` ``<del>``
  6. typography (when enabled)
  7. emoticons
  8. footnotes  ``((…))``
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
import re
from functools import singledispatch
from typing import Callable, Optional, Union
from urllib.parse import quote

from pydoku.models import (
    Container, Deleted, Emphasis, Entity, Escape, FootnoteRef, Image, LineBreak, Link,
    Monospace, Node, ParseContext, Raw, Strong, Subscript, Superscript, Text, Underline,
)
from pydoku.schemas import ParserConfig
from pydoku.services.escaping import escape_entities, escape_text
from pydoku.services.namespaces import media_src, page_href, resolve_namespace, section_id
from pydoku.services.substitutions import (
    EMOTICON_RE, TYPOGRAPHY_RE, emoticon_for, typography_entity,
)

log = logging.getLogger(__name__)

Handler = Callable[[re.Match, ParseContext], Optional[Union[Node, list]]]


# -----------------------------------------------------------------------------
# Patterns
# -----------------------------------------------------------------------------

_LITERAL_RE = re.compile(
    r"<nowiki>(?P<nowiki>.*?)</nowiki>"
    r"|%%(?P<percent>.*?)%%"
    r"|<(?:html|HTML)>(?P<html>.*?)</(?:html|HTML)>"
    r"|<(?:php|PHP)>(?P<php>.*?)</(?:php|PHP)>",
    re.DOTALL,
)

_LINEBREAK_RE = re.compile(r"\\\\(?=\s|$)")

_EMAIL = r"[\w.%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}"
_EMAIL_RE = re.compile(rf"^{_EMAIL}$")
_EXTERNAL_RE = re.compile(r"^(?:https?|ftp|news|irc|gopher)://", re.IGNORECASE)
_URL_TAIL = r"[^\s<\[\]{}|]*[^\s<\[\]{}|.,:;!?*\"')]"

_LINK_RE = re.compile(
    r"(?P<media>\{\{[^{}]*\}\})"
    r"|\[\[(?P<target>.+?)(?:\|(?P<text>.*?))?\]\]"
    rf"|<(?P<email>{_EMAIL})>"
    rf"""|(?<![\w"'=/])(?P<url>https?://{_URL_TAIL})"""
    rf"""|(?<![\w"'=/.])(?P<www>www\.{_URL_TAIL})""",
)

_MEDIA_RE = re.compile(r"\{\{(?P<src>[^|{}]*)(?:\|(?P<alt>[^{}]*))?\}\}")
_MEDIA_SIZE_RE = re.compile(r"^(?:(?P<w>\d+)(?:x(?P<h>\d+))?|x(?P<honly>\d+))$")
_IMAGE_EXTENSIONS = {"png", "jpg", "jpeg", "gif", "webp", "svg", "bmp", "ico"}
_NON_EXT_RE = re.compile(r"[^a-z0-9]")

# Document directives; the block parser handles lines holding nothing else.
DIRECTIVE_RE = re.compile(r"\s*~~(?P<name>NOTOC|NOCACHE)~~\s*")

_FOOTNOTE_OPEN_RE  = re.compile(r"\(\(")
_FOOTNOTE_CLOSE_RE = re.compile(r"\)\)")


# -----------------------------------------------------------------------------
# Rendering
# -----------------------------------------------------------------------------

def render_nodes(nodes: list[Node]) -> str:
    return "".join(render_node(n) for n in nodes)


@singledispatch
def render_node(node) -> str:
    raise TypeError(f"Cannot render inline node {node!r}")


@render_node.register
def _(node: Text) -> str:
    return escape_text(node.value)


@render_node.register
def _(node: Escape) -> str:
    return escape_entities(node.value)


@render_node.register
def _(node: Raw) -> str:
    return node.html


@render_node.register
def _(node: Entity) -> str:
    return f"&{node.ref};"


@render_node.register
def _(node: LineBreak) -> str:
    return "<br/>"


@render_node.register
def _(node: Image) -> str:
    attrs = [f'src="{escape_entities(node.src)}"']
    if node.align:
        attrs.append(f'class="{node.align}"')
    if node.alt:
        alt = escape_entities(node.alt)
        attrs.append(f'alt="{alt}" title="{alt}"')
    else:
        attrs.append('alt=""')
    if node.width:
        attrs.append(f'width="{node.width}"')
    if node.height:
        attrs.append(f'height="{node.height}"')
    return f'<img {" ".join(attrs)} loading="lazy" />'


@render_node.register
def _(node: FootnoteRef) -> str:
    i = node.index
    return f'<sup><a href="#fn__{i}" id="{node.marker_id}" class="fn_top">{i})</a></sup>'


@render_node.register
def _(node: Container) -> str:
    return f"<{node.tag}>{render_nodes(node.children)}</{node.tag}>"


@render_node.register
def _(node: Link) -> str:
    attrs = [f'href="{escape_entities(node.href)}"']
    if node.css_class:
        attrs.append(f'class="{escape_entities(node.css_class)}"')
    if node.title:
        attrs.append(f'title="{escape_entities(node.title)}"')
    if node.rel:
        attrs.append(f'rel="{node.rel}"')
    if node.data_wiki_id:
        attrs.append(f'data-wiki-id="{escape_entities(node.data_wiki_id)}"')
    return f'<a {" ".join(attrs)}>{render_nodes(node.children)}</a>'


# -----------------------------------------------------------------------------
# Node-list rewriting
# -----------------------------------------------------------------------------

def _merge_text(nodes: list[Node]) -> list[Node]:
    merged: list[Node] = []
    for node in nodes:
        if isinstance(node, Text):
            if not node.value:
                continue
            if merged and isinstance(merged[-1], Text):
                merged[-1] = Text(merged[-1].value + node.value)
                continue
        merged.append(node)
    return merged


def _split_text(nodes: list[Node], pattern: re.Pattern, handler: Handler, ctx: ParseContext) -> list[Node]:
    """Replace every *pattern* match inside Text nodes with *handler*'s result.

    A handler returning ``None`` leaves the matched text untouched.  Nodes
    produced by the handler are not revisited by the same rule.
    """
    out: list[Node] = []
    for node in nodes:
        if isinstance(node, Container):
            node.children = _split_text(node.children, pattern, handler, ctx)
            out.append(node)
            continue
        if not isinstance(node, Text):
            out.append(node)
            continue
        pos = 0
        for m in pattern.finditer(node.value):
            result = handler(m, ctx)
            if result is None:
                continue
            out.append(Text(node.value[pos:m.start()]))
            out.extend(result if isinstance(result, list) else [result])
            pos = m.end()
        out.append(Text(node.value[pos:]))
    return _merge_text(out)


def _wrap_spans(
    nodes: list[Node],
    opener: re.Pattern,
    closer: re.Pattern,
    make: Callable[[list[Node]], Optional[Node]],
) -> list[Node]:
    """Pair *opener* with the nearest following *closer* and wrap what lies between.

    The pair may span several sibling nodes (``**[[link]] text**``), but never
    crosses a container boundary.  Content must be non-empty.
    """
    result: list[Node] = []
    pending = list(nodes)
    while pending:
        node = pending.pop(0)
        if isinstance(node, Container):
            node.children = _wrap_spans(node.children, opener, closer, make)
            result.append(node)
            continue
        if not isinstance(node, Text):
            result.append(node)
            continue
        m = opener.search(node.value)
        if not m:
            result.append(node)
            continue

        before, rest = node.value[:m.start()], node.value[m.end():]
        c = closer.search(rest)
        if c and c.start() == 0:
            result.append(Text(before + m.group(0)))
            pending.insert(0, Text(rest))
            continue
        if c:
            children = [Text(rest[:c.start()])]
            tail = rest[c.end():]
            consumed = 0
        else:
            children = None
            for j, candidate in enumerate(pending):
                if not isinstance(candidate, Text):
                    continue
                c = closer.search(candidate.value)
                if c:
                    children = [Text(rest)] + pending[:j] + [Text(candidate.value[:c.start()])]
                    tail = candidate.value[c.end():]
                    consumed = j + 1
                    break

        if children is None:
            result.append(Text(before + m.group(0)))
            pending.insert(0, Text(rest))
            continue

        result.append(Text(before))
        inner = _wrap_spans(_merge_text(children), opener, closer, make)
        wrapped = make(inner)
        if wrapped is None:
            result.extend([Text(m.group(0)), *inner, Text(c.group(0))])
        else:
            result.append(wrapped)
        del pending[:consumed]
        pending.insert(0, Text(tail))
    return _merge_text(result)


# -----------------------------------------------------------------------------
# Engine
# -----------------------------------------------------------------------------

_FORMATTING: tuple[tuple[str, str, type[Container]], ...] = (
    (r"\*\*",     r"\*\*",      Strong),
    (r"(?<!:)//", r"(?<!:)//",  Emphasis),
    (r"__",       r"__",        Underline),
    (r"''",       r"''",        Monospace),
    (r"<sub>",    r"</sub>",    Subscript),
    (r"<sup>",    r"</sup>",    Superscript),
    (r"<del>",    r"</del>",    Deleted),
)


class InlineEngine:
    """Applies the ordered inline rules for one :class:`ParserConfig`.

    The engine keeps only immutable configuration and compiled patterns;
    every piece of per-document state lives in the :class:`ParseContext`
    passed to :meth:`apply`.
    """

    def __init__(self, config: ParserConfig) -> None:
        self.config = config
        self._formatting = [
            (re.compile(o), re.compile(c), kind) for o, c, kind in _FORMATTING
        ]

    # ── public ────────────────────────────────────────────────────────────

    def apply(self, text: str, ctx: ParseContext) -> list[Node]:
        nodes: list[Node] = [Text(text)]
        nodes = _split_text(nodes, _LITERAL_RE, self._literal, ctx)
        nodes = _split_text(nodes, DIRECTIVE_RE, self._directive, ctx)
        nodes = _split_text(nodes, _LINEBREAK_RE, lambda m, c: LineBreak(), ctx)
        nodes = _split_text(nodes, _LINK_RE, self._link, ctx)
        nodes = _split_text(nodes, _MEDIA_RE, self._media, ctx)
        for opener, closer, kind in self._formatting:
            nodes = _wrap_spans(nodes, opener, closer, lambda children, kind=kind: kind(children=children))
        if self.config.typography_enabled:
            nodes = _split_text(nodes, TYPOGRAPHY_RE, self._typography, ctx)
        nodes = _split_text(nodes, EMOTICON_RE, self._emoticon, ctx)
        nodes = _wrap_spans(
            nodes, _FOOTNOTE_OPEN_RE, _FOOTNOTE_CLOSE_RE,
            lambda children: self._footnote(children, ctx),
        )
        return nodes

    def render(self, text: str, ctx: ParseContext) -> str:
        return render_nodes(self.apply(text, ctx))

    # ── 1. literal escapes ────────────────────────────────────────────────

    def _literal(self, m: re.Match, ctx: ParseContext) -> Node:
        if m.group("nowiki") is not None:
            return Escape(m.group("nowiki"))
        if m.group("percent") is not None:
            return Escape(m.group("percent"))
        if m.group("html") is not None:
            if self.config.html_embed_allowed:
                return Raw(m.group("html"))
            return Raw(f'<code class="code html">{escape_entities(m.group("html"))}</code>')
        return Raw(f'<code class="code php">{escape_entities(m.group("php"))}</code>')

    def _directive(self, m: re.Match, ctx: ParseContext) -> Text:
        if m.group("name") == "NOTOC":
            ctx.notoc = True
        inside = m.start() > 0 and m.end() < len(m.string)
        return Text(" " if inside and m.group(0) != m.group(0).strip() else "")

    # ── 3. links ──────────────────────────────────────────────────────────

    def _link(self, m: re.Match, ctx: ParseContext) -> Optional[Node]:
        if m.group("media"):
            return None     # left for the media rule
        if m.group("email"):
            addr = m.group("email")
            return Link(children=[Escape(addr)], href=f"mailto:{addr}", css_class="mail", title=addr)
        if m.group("url"):
            url = m.group("url")
            return Link(children=[Escape(_short_url(url))], href=url,
                        css_class="urlextern", title=url, rel="nofollow")
        if m.group("www"):
            url = m.group("www")
            return Link(children=[Escape(_short_url(url))], href=f"http://{url}",
                        css_class="urlextern", title=f"http://{url}", rel="nofollow")
        return self._wikilink(m.group("target").strip(), (m.group("text") or "").strip(), ctx)

    def _wikilink(self, target: str, text: str, ctx: ParseContext) -> Optional[Node]:
        if _EMAIL_RE.match(target):
            return Link(children=[Text(text or target)], href=f"mailto:{target}",
                        css_class="mail", title=target)

        if _EXTERNAL_RE.match(target):
            return Link(children=[Text(text) if text else Escape(_short_url(target))], href=target,
                        css_class="urlextern", title=target, rel="nofollow")

        if target.startswith("\\\\"):
            return Escape(text or target)

        if ">" in target:
            prefix, page = (p.strip() for p in target.split(">", 1))
            base = self.config.interwiki_map.get(prefix)
            if base is None:
                ctx.warn(f"unknown interwiki prefix '{prefix}'")
                return None
            href = _interwiki_url(base, page)
            return Link(children=[Text(text or page)], href=href,
                        css_class=f"interwiki iw_{prefix}", title=href,
                        data_wiki_id=f"{prefix}:{page}")

        page, _, section = target.partition("#")
        href = ""
        page_id = None
        if page.strip():
            page_id = resolve_namespace(
                page, self.config.current_namespace, relative=self.config.bare_links_relative,
            )
            href = page_href(page_id, self.config)
        if section:
            href += "#" + section_id(section)
        return Link(children=[Text(text or target)], href=href or "#",
                    css_class="wikilink1", title=page_id, data_wiki_id=page_id)

    # ── 4. media ──────────────────────────────────────────────────────────

    def _media(self, m: re.Match, ctx: ParseContext) -> Optional[Node]:
        raw = m.group("src")
        if not raw.strip():
            return None
        alt = (m.group("alt") or "").strip()

        lead  = raw[:1].isspace()
        trail = raw[-1:].isspace()
        if lead and not trail:
            align = "mediaright"
        elif trail and not lead:
            align = "medialeft"
        else:
            align = "mediacenter"

        path, _, query = raw.strip().partition("?")
        width = height = None
        link_only = False
        for item in filter(None, (q.strip() for q in query.split("&"))):
            if item == "linkonly":
                link_only = True
                continue
            size = _MEDIA_SIZE_RE.match(item)
            if size:
                width = size.group("w")
                height = size.group("h") or size.group("honly")

        path = path.strip()
        if _EXTERNAL_RE.match(path):
            src = path
            name = path.rstrip("/").rsplit("/", 1)[-1]
        else:
            media_id = resolve_namespace(
                path, self.config.current_namespace, relative=self.config.bare_links_relative,
            )
            src = media_src(media_id, self.config, width, height)
            name = media_id.rsplit(":", 1)[-1]

        ext = name.rsplit(".", 1)[-1].lower() if "." in name else ""
        ext = _NON_EXT_RE.sub("", ext)
        if link_only:
            return Link(children=[Text(alt or name)], href=src, css_class="media", title=name)
        if ext not in _IMAGE_EXTENSIONS:
            return Link(children=[Text(alt or name)], href=src,
                        css_class=f"media mediafile mf_{ext or 'file'}", title=name)
        return Image(src=src, alt=alt, align=align, width=width, height=height)

    # ── 6. typography ─────────────────────────────────────────────────────

    def _typography(self, m: re.Match, ctx: ParseContext) -> list[Node]:
        entity = Entity(typography_entity(m))
        if m.group("w"):
            return [Text(m.group("w")), entity, Text(m.group("h"))]
        return [entity]

    # ── 7. emoticons ──────────────────────────────────────────────────────

    def _emoticon(self, m: re.Match, ctx: ParseContext) -> Node:
        icon = emoticon_for(m.group(1))
        if self.config.use_emoji:
            return Raw(icon.glyph)
        src = escape_entities(self.config.smiley_base_path + icon.image)
        return Raw(f'<img src="{src}" class="icon smiley" alt="{escape_entities(icon.token)}" />')

    # ── 8. footnotes ──────────────────────────────────────────────────────

    def _footnote(self, children: list[Node], ctx: ParseContext) -> Optional[Node]:
        html = render_nodes(children).strip()
        if not html:
            return None
        return ctx.footnotes.cite(html)


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def _short_url(url: str) -> str:
    """Display form of a bare URL: no scheme, no ``www.``, no trailing slash."""
    text = re.sub(r"^[a-z]+://", "", url, flags=re.IGNORECASE)
    if text.startswith("www."):
        text = text[4:]
    return text.rstrip("/") or url


def _interwiki_url(base: str, page: str) -> str:
    if "{URL}" in base:
        return base.replace("{URL}", page)
    if "{NAME}" in base:
        return base.replace("{NAME}", quote(page))
    return base + quote(page)


# -----------------------------------------------------------------------------
