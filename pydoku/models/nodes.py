#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Inline nodes
============
The inline rule engine turns a text fragment into a sequence of these nodes;
:func:`pydoku.services.inline.render_nodes` turns the sequence into HTML.

Only :class:`Text` is ever rewritten by later rules.  Every other leaf is
opaque: its content was resolved by an earlier rule and is emitted verbatim
(``Raw``, ``Entity``) or escaped exactly once (``Escape``) by the renderer.
Containers hold children which later rules still descend into.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union


# -----------------------------------------------------------------------------
# Leaves
# -----------------------------------------------------------------------------

@dataclass
class Text:
    value: str


@dataclass
class Escape:
    """Literal user text (``<nowiki>``, ``%%``) — never interpreted."""
    value: str


@dataclass
class Raw:
    """Trusted HTML produced by the engine or allowed embedded HTML."""
    html: str


@dataclass
class Entity:
    """A named or numeric character reference such as ``rarr`` or ``#215``."""
    ref: str


@dataclass
class LineBreak:
    pass


@dataclass
class Image:
    src: str
    alt: str = ""
    align: str = ""
    width: Optional[str] = None
    height: Optional[str] = None


@dataclass
class FootnoteRef:
    index: int
    marker_id: str


# -----------------------------------------------------------------------------
# Containers
# -----------------------------------------------------------------------------

@dataclass
class Container:
    children: list["Node"] = field(default_factory=list)

    tag = "span"


@dataclass
class Strong(Container):
    tag = "strong"


@dataclass
class Emphasis(Container):
    tag = "em"


@dataclass
class Underline(Container):
    tag = "u"


@dataclass
class Monospace(Container):
    tag = "code"


@dataclass
class Subscript(Container):
    tag = "sub"


@dataclass
class Superscript(Container):
    tag = "sup"


@dataclass
class Deleted(Container):
    tag = "del"


@dataclass
class Link(Container):
    href: str = ""
    css_class: str = ""
    title: Optional[str] = None
    rel: Optional[str] = None
    data_wiki_id: Optional[str] = None


Node = Union[Text, Escape, Raw, Entity, LineBreak, Image, FootnoteRef, Container]


# -----------------------------------------------------------------------------

def plain_text(nodes: list[Node]) -> str:
    """Concatenate the visible text of *nodes* (used for ids and TOC titles)."""
    out: list[str] = []
    for node in nodes:
        if isinstance(node, (Text, Escape)):
            out.append(node.value)
        elif isinstance(node, Container):
            out.append(plain_text(node.children))
        elif isinstance(node, Image):
            out.append(node.alt)
    return "".join(out)
