#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Namespace service — resolve link targets to canonical page ids and map ids
to hrefs / media URLs.

Page ids are colon-delimited paths (``wiki:syntax``); relative prefixes
``.`` / ``..`` walk the current namespace like ``./`` and ``../`` in a file
system.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import re
from urllib.parse import quote, urlencode

from pydoku.schemas import ParserConfig


# -----------------------------------------------------------------------------

START_PAGE = "start"

_DISALLOWED_RE   = re.compile(r"[^a-z0-9_.:\-]")
_COLONS_RE       = re.compile(r":+")
_UNDERSCORES_RE  = re.compile(r"_+")
_SEGMENT_EDGE_RE = re.compile(r"_*:_*")
_SLUG_RE         = re.compile(r"[^a-z0-9]+")


# -----------------------------------------------------------------------------

def clean_id(raw: str) -> str:
    """Normalise a page or media id.

    Lower-cases, replaces disallowed characters with ``_`` and collapses
    repeated / leading / trailing colons.
    """
    text = raw.strip().lower()
    text = _DISALLOWED_RE.sub("_", text)
    text = _COLONS_RE.sub(":", text)
    text = _UNDERSCORES_RE.sub("_", text)
    text = _SEGMENT_EDGE_RE.sub(":", text)
    return text.strip(":_")


# -----------------------------------------------------------------------------

def resolve_namespace(target: str, current_namespace: str = "", relative: bool = True) -> str:
    """Resolve *target* against *current_namespace* to a canonical page id.

    ``:a:b``   absolute
    ``..:x``   one namespace up per ``..``
    ``.:x``    inside the current namespace
    ``x:``     the ``start`` page of namespace ``x``
    ``x``      relative to the current namespace when *relative* is true,
               otherwise taken as-is

    An empty result resolves to the ``start`` page.
    """
    target = target.strip()
    start_page = target.endswith(":")
    if start_page:
        target = target[:-1]

    namespace = [p for p in current_namespace.split(":") if p]

    if target.startswith(":"):
        resolved = target[1:]
    elif target.startswith(".."):
        levels = 0
        while target.startswith(".."):
            target = target[3:] if target.startswith("..:") else target[2:]
            levels += 1
        parents = namespace[:max(len(namespace) - levels, 0)]
        resolved = ":".join(parents + [target])
    elif target.startswith("."):
        target = target[2:] if target.startswith(".:") else target[1:]
        resolved = ":".join(namespace + [target])
    elif relative:
        resolved = ":".join(namespace + [target])
    else:
        resolved = target

    resolved = clean_id(resolved)
    if start_page:
        return f"{resolved}:{START_PAGE}" if resolved else START_PAGE
    return resolved or START_PAGE


# -----------------------------------------------------------------------------

def section_id(title: str) -> str:
    """Convert heading text to an anchor id: ``Hello, World!`` → ``hello_world``."""
    slug = _SLUG_RE.sub("_", title.strip().lower()).strip("_")
    return slug or "section"


# -----------------------------------------------------------------------------
# id → URL
# -----------------------------------------------------------------------------

def page_href(page_id: str, config: ParserConfig) -> str:
    if config.use_dokuwiki_paths:
        return f"{config.pages_base_path}doku.php?id={quote(page_id, safe=':')}"
    href = config.pages_base_path + quote(page_id.replace(":", "/"))
    if config.use_txt_extension:
        href += ".txt"
    return href


def media_src(
    media_id: str,
    config: ParserConfig,
    width: str | None = None,
    height: str | None = None,
) -> str:
    if config.use_dokuwiki_paths:
        params: dict[str, str] = {}
        if width:
            params["w"] = width
        if height:
            params["h"] = height
        params["media"] = media_id
        return f"{config.media_base_path}lib/exe/fetch.php?" + urlencode(params, safe=":")
    return config.media_base_path + quote(media_id.replace(":", "/"))


# -----------------------------------------------------------------------------
