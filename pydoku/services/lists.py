#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
List nesting tracker.

Keeps the stack of open ``<ul>`` / ``<ol>`` tags keyed by indentation depth
and reports the tag events needed to move from one item to the next.  Each
open list always has exactly one open ``<li>``; nested lists open inside it.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ListKind = Literal["ul", "ol"]

MARKER_KINDS: dict[str, ListKind] = {"*": "ul", "-": "ol"}


# -----------------------------------------------------------------------------

@dataclass
class ListFrame:
    kind: ListKind
    depth: int


# -----------------------------------------------------------------------------

class ListTracker:

    def __init__(self) -> None:
        self.stack: list[ListFrame] = []

    def __bool__(self) -> bool:
        return bool(self.stack)

    @property
    def level(self) -> int:
        """1-based nesting level of the innermost open list."""
        return len(self.stack)

    def open_or_continue(self, depth: int, kind: ListKind) -> list[str]:
        """Tag events that precede the ``<li>`` of an item at *depth*."""
        events: list[str] = []
        while self.stack and self.stack[-1].depth > depth:
            events += self._close_top()

        top = self.stack[-1] if self.stack else None
        if top is not None and top.depth == depth:
            if top.kind == kind:
                events.append("</li>")
                return events
            events += self._close_top()

        events.append(f"<{kind}>")
        self.stack.append(ListFrame(kind=kind, depth=depth))
        return events

    def close_all(self) -> list[str]:
        events: list[str] = []
        while self.stack:
            events += self._close_top()
        return events

    def _close_top(self) -> list[str]:
        frame = self.stack.pop()
        return ["</li>", f"</{frame.kind}>"]


# -----------------------------------------------------------------------------
