#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
pydoku — DokuWiki markup to HTML.

    >>> from pydoku import parse
    >>> parse("**hello** [[wiki:start]]")
"""
# -----------------------------------------------------------------------------

from pydoku._version import __version__
from pydoku.schemas import ParserConfig
from pydoku.services.escaping import escape_entities
from pydoku.services.namespaces import resolve_namespace
from pydoku.services.renderer import Parser, RenderResult, parse

__all__ = [
    "Parser", "parse", "ParserConfig", "RenderResult",
    "resolve_namespace", "escape_entities",
    "__version__",
]


# -----------------------------------------------------------------------------
