#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Table builder
=============
Turns buffered ``^`` / ``|`` row lines into an HTML ``<table>``.

Supported:
  ^ h1 ^ h2 ^        — header cells
  | c1 | c2 |        — data cells (``^`` and ``|`` may be mixed in one row)
  | a ||             — empty cells after a filled one widen it (colspan)
  | ::: |            — continue the cell above (rowspan); the marker must span
                       as many columns as that cell, or it stays literal
  |  right|  c  |left  |   — two or more spaces set the alignment

Spans are resolved in two passes: colspans within each row first, then
rowspans per column against the colspan-adjusted column positions.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from pydoku.models import ParseContext
from pydoku.services.escaping import escape_text
from pydoku.services.inline import InlineEngine

log = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

# Delimiters inside links, media and literal spans do not split cells.
_CELL_TOKEN_RE = re.compile(
    r"\[\[.*?\]\]|\{\{.*?\}\}|<nowiki>.*?</nowiki>|%%.*?%%|(?P<delim>[\^|])"
)

ROWSPAN_MARKER = ":::"

_ALIGN_CLASS = {"left": "leftalign", "right": "rightalign", "center": "centeralign"}


# -----------------------------------------------------------------------------

@dataclass
class Cell:
    tag: str
    html: str = ""
    align: str = ""
    empty: bool = False
    marker: bool = False
    filler: bool = False
    colspan: int = 1
    rowspan: int = 1
    start: int = 0
    owner: Optional["Cell"] = None

    @property
    def absorbed(self) -> bool:
        return self.owner is not None


# -----------------------------------------------------------------------------

def split_row(line: str) -> tuple[list[tuple[str, str]], bool]:
    """Split one row line into ``(delimiter, raw_cell)`` pairs.

    Returns the pairs and whether the row was properly closed.  Text after
    the last delimiter of an unclosed row becomes a final cell.
    """
    line = line.strip()
    delims = [(m.start(), m.group("delim")) for m in _CELL_TOKEN_RE.finditer(line) if m.group("delim")]
    cells: list[tuple[str, str]] = []
    for (pos, delim), (next_pos, _) in zip(delims, delims[1:]):
        cells.append((delim, line[pos + 1:next_pos]))

    if not delims:
        return [("|", line)], False
    last_pos, last_delim = delims[-1]
    remainder = line[last_pos + 1:]
    if remainder.strip():
        cells.append((last_delim, remainder))
        return cells, False
    return cells, True


def cell_alignment(raw: str) -> str:
    if not raw.strip():
        return ""
    leading  = len(raw) - len(raw.lstrip(" "))
    trailing = len(raw) - len(raw.rstrip(" "))
    if leading >= 2 and trailing >= 2:
        return "center"
    if leading >= 2:
        return "right"
    if trailing >= 2:
        return "left"
    return ""


# -----------------------------------------------------------------------------

class TableBuilder:

    def __init__(self, engine: InlineEngine) -> None:
        self.engine = engine

    def render(self, rows: list[str], ctx: ParseContext) -> str:
        grid = [self._fold_colspans(self._parse_row(row, ctx)) for row in rows]
        grid = [row for row in grid if row]
        if not grid:
            return ""

        columns = max(sum(c.colspan for c in row) for row in grid)
        for row in grid:
            width = sum(c.colspan for c in row)
            tag = row[-1].tag
            row.extend(Cell(tag=tag, empty=True, filler=True) for _ in range(columns - width))
            col = 0
            for cell in row:
                cell.start = col
                col += cell.colspan

        self._fold_rowspans(grid, ctx)
        return self._to_html(grid)

    # ── row parsing ───────────────────────────────────────────────────────

    def _parse_row(self, line: str, ctx: ParseContext) -> list[Cell]:
        pairs, closed = split_row(line)
        if not closed:
            ctx.warn(f"table row without closing delimiter: {line.strip()!r}")
        cells: list[Cell] = []
        for delim, raw in pairs:
            tag = "th" if delim == "^" else "td"
            content = raw.strip()
            if not content:
                cells.append(Cell(tag=tag, empty=True))
            elif content == ROWSPAN_MARKER:
                cells.append(Cell(tag=tag, marker=True))
            else:
                cells.append(Cell(
                    tag=tag,
                    html=self.engine.render(content, ctx),
                    align=cell_alignment(raw),
                ))
        return cells

    @staticmethod
    def _fold_colspans(cells: list[Cell]) -> list[Cell]:
        folded: list[Cell] = []
        for cell in cells:
            prev = folded[-1] if folded else None
            if cell.empty and prev is not None and not prev.empty:
                prev.colspan += 1
                continue
            folded.append(cell)
        return folded

    @staticmethod
    def _fold_rowspans(grid: list[list[Cell]], ctx: ParseContext) -> None:
        for r, row in enumerate(grid):
            for cell in row:
                if not cell.marker:
                    continue
                above = grid[r - 1] if r else []
                owner = next((c for c in above if c.start == cell.start), None)
                if owner is not None and owner.absorbed:
                    owner = owner.owner
                if owner is None or owner.marker:
                    reason = f"rowspan marker without a cell above in column {cell.start}"
                elif owner.colspan != cell.colspan:
                    reason = (f"rowspan marker in column {cell.start} spans {cell.colspan} column(s), "
                              f"the cell above spans {owner.colspan}")
                else:
                    owner.rowspan += 1
                    cell.owner = owner
                    continue
                ctx.warn(reason)
                cell.marker = False
                cell.html = escape_text(ROWSPAN_MARKER)

    # ── output ────────────────────────────────────────────────────────────

    @staticmethod
    def _to_html(grid: list[list[Cell]]) -> str:
        parts = ['<div class="table"><table class="inline">']
        for r, row in enumerate(grid):
            cells: list[str] = []
            for cell in row:
                if cell.absorbed:
                    continue
                classes = [f"col{cell.start}"]
                if cell.align:
                    classes.append(_ALIGN_CLASS[cell.align])
                attrs = f' class="{" ".join(classes)}"'
                if cell.colspan > 1:
                    attrs += f' colspan="{cell.colspan}"'
                if cell.rowspan > 1:
                    attrs += f' rowspan="{cell.rowspan}"'
                cells.append(f"<{cell.tag}{attrs}>{cell.html}</{cell.tag}>")
            parts.append(f'<tr class="row{r}">' + "".join(cells) + "</tr>")
        parts.append("</table></div>")
        return "\n".join(parts)


# -----------------------------------------------------------------------------
