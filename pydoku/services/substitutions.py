#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Typography and emoticon tables.

Both tables are static and ordered; their matchers are compiled once at
import time with longer tokens tried first, so ``<->`` never loses to ``<-``
and ``:-)`` never loses to ``:)``.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import re
from typing import NamedTuple


# -----------------------------------------------------------------------------
# Typography
# -----------------------------------------------------------------------------

# Arrows and dashes only count when surrounded by whitespace.
TYPOGRAPHY_SPACED: dict[str, str] = {
    "<->": "harr",
    "<=>": "hArr",
    "---": "mdash",
    "->":  "rarr",
    "<-":  "larr",
    "=>":  "rArr",
    "<=":  "lArr",
    ">>":  "raquo",
    "<<":  "laquo",
    "--":  "ndash",
}

TYPOGRAPHY_ANYWHERE: dict[str, str] = {
    "(c)":  "copy",
    "(tm)": "trade",
    "(r)":  "reg",
    "...":  "hellip",
}


def _alternation(tokens) -> str:
    return "|".join(re.escape(t) for t in sorted(tokens, key=len, reverse=True))


TYPOGRAPHY_RE = re.compile(
    r"(?P<spaced>(?<!\S)(?:" + _alternation(TYPOGRAPHY_SPACED) + r")(?!\S))"
    r"|(?P<symbol>" + _alternation(TYPOGRAPHY_ANYWHERE) + r")"
    r"|(?<![\w.])(?P<w>\d+)x(?P<h>\d+)(?![\w.])",
    re.IGNORECASE,
)


def typography_entity(match: re.Match) -> str:
    """Entity name for a :data:`TYPOGRAPHY_RE` match (``times`` for ``WxH``)."""
    if match.group("spaced"):
        return TYPOGRAPHY_SPACED[match.group("spaced")]
    if match.group("symbol"):
        return TYPOGRAPHY_ANYWHERE[match.group("symbol").lower()]
    return "times"


# -----------------------------------------------------------------------------
# Emoticons
# -----------------------------------------------------------------------------

class Emoticon(NamedTuple):
    token: str
    glyph: str
    image: str


EMOTICONS: tuple[Emoticon, ...] = (
    Emoticon("8-)",      "😎", "cool.svg"),
    Emoticon("8-O",      "😲", "eek.svg"),
    Emoticon("8-o",      "😲", "eek.svg"),
    Emoticon(":-(",      "😢", "sad.svg"),
    Emoticon(":(",       "😢", "sad.svg"),
    Emoticon(":-)",      "🙂", "smile.svg"),
    Emoticon(":)",       "🙂", "smile.svg"),
    Emoticon("=)",       "😊", "smile2.svg"),
    Emoticon("=-)",      "😊", "smile2.svg"),
    Emoticon(":-/",      "😕", "doubt.svg"),
    Emoticon(":/",       "😕", "doubt.svg"),
    Emoticon(":-\\",     "😕", "doubt2.svg"),
    Emoticon(":\\",      "😕", "doubt2.svg"),
    Emoticon(":-?",      "😕", "confused.svg"),
    Emoticon(":-D",      "😄", "biggrin.svg"),
    Emoticon(":D",       "😄", "biggrin.svg"),
    Emoticon(":-P",      "😛", "razz.svg"),
    Emoticon(":P",       "😛", "razz.svg"),
    Emoticon(":-O",      "😯", "surprised.svg"),
    Emoticon(":O",       "😯", "surprised.svg"),
    Emoticon(":-X",      "😣", "silenced.svg"),
    Emoticon(":X",       "😣", "silenced.svg"),
    Emoticon(":-|",      "😐", "neutral.svg"),
    Emoticon(":|",       "😐", "neutral.svg"),
    Emoticon(";-)",      "😉", "wink.svg"),
    Emoticon("m(",       "🤦", "facepalm.svg"),
    Emoticon("^_^",      "😄", "fun.svg"),
    Emoticon(":?:",      "❓", "question.svg"),
    Emoticon(":!:",      "❗", "exclaim.svg"),
    Emoticon("LOL",      "😂", "lol.svg"),
    Emoticon("FIXME",    "🔧", "fixme.svg"),
    Emoticon("DELETEME", "🗑️", "deleteme.svg"),
)

_EMOTICON_BY_TOKEN: dict[str, Emoticon] = {e.token: e for e in EMOTICONS}

EMOTICON_RE = re.compile(
    r"(?<!\S)(" + _alternation(_EMOTICON_BY_TOKEN) + r")(?!\S)"
)


def emoticon_for(token: str) -> Emoticon:
    return _EMOTICON_BY_TOKEN[token]


# -----------------------------------------------------------------------------
