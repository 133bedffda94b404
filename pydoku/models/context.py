#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Per-parse state.

A :class:`ParseContext` is created at the start of every ``parse()`` call and
dropped at its end.  Nothing in here is shared between calls, which is what
makes one :class:`~pydoku.services.renderer.Parser` safe to use from several
threads at once.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from pydoku.models.nodes import FootnoteRef
from pydoku.schemas import ParserConfig

log = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

@dataclass
class Footnote:
    index: int
    html: str
    markers: list[str] = field(default_factory=list)


# -----------------------------------------------------------------------------

class FootnoteRegistry:
    """Footnotes keyed by their exact text, numbered 1.. in first-seen order."""

    def __init__(self) -> None:
        self._by_text: dict[str, Footnote] = {}
        self.notes: list[Footnote] = []

    def __len__(self) -> int:
        return len(self.notes)

    def cite(self, text: str) -> FootnoteRef:
        note = self._by_text.get(text)
        if note is None:
            note = Footnote(index=len(self.notes) + 1, html=text)
            self._by_text[text] = note
            self.notes.append(note)
        marker = f"fnt__{note.index}"
        if note.markers:
            marker = f"{marker}_{len(note.markers) + 1}"
        note.markers.append(marker)
        return FootnoteRef(index=note.index, marker_id=marker)


# -----------------------------------------------------------------------------

@dataclass
class Heading:
    level: int
    id: str
    title: str


# -----------------------------------------------------------------------------

@dataclass
class ParseContext:
    config: ParserConfig
    footnotes: FootnoteRegistry = field(default_factory=FootnoteRegistry)
    headings: list[Heading] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    literal_section: bool = False
    notoc: bool = False
    _ids: dict[str, int] = field(default_factory=dict)
    _issued: set[str] = field(default_factory=set)

    def warn(self, message: str) -> None:
        log.debug("parse anomaly: %s", message)
        self.warnings.append(message)

    def unique_id(self, base: str) -> str:
        """Return *base*, or the first ``base_N`` not handed out yet."""
        count = self._ids.get(base, 0)
        candidate = base if count == 0 else f"{base}_{count}"
        while candidate in self._issued:
            count += 1
            candidate = f"{base}_{count}"
        self._ids[base] = count + 1
        self._issued.add(candidate)
        return candidate
