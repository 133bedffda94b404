#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Pydantic v2 schemas: the immutable parser configuration and the request /
response models of the HTTP preview surface.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


_INTERWIKI_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")

DEFAULT_INTERWIKI: dict[str, str] = {
    "wp":   "https://en.wikipedia.org/wiki/",
    "doku": "https://www.dokuwiki.org/",
}

# Section titles of the DokuWiki syntax reference page whose examples are
# shown as literal markup rather than rendered.
SYNTAX_SECTIONS: tuple[str, ...] = (
    "Links",
    "Tables",
    "Quoting",
    "Text Conversions",
    "No Formatting",
    "Embedding HTML and PHP",
)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Parser configuration
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ParserConfig(BaseModel):
    """Options for one :class:`~pydoku.services.renderer.Parser`.

    Instances are frozen; a parser never mutates its configuration, so one
    config can be shared by any number of parsers and threads.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    current_namespace:   str = ""
    interwiki_map:       dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_INTERWIKI))
    pages_base_path:     str = "/"
    media_base_path:     str = "/media/"
    smiley_base_path:    str = "/lib/images/smileys/"
    use_txt_extension:   bool = False
    use_dokuwiki_paths:  bool = False
    html_embed_allowed:  bool = True
    typography_enabled:  bool = True
    use_emoji:           bool = True
    toc_enabled:         bool = True
    toc_min_headings:    int = Field(default=3, ge=1)
    bare_links_relative: bool = True
    literal_sections:    tuple[str, ...] = SYNTAX_SECTIONS
    highlight_code:      bool = True
    wrapper_class:       str = "dokuwiki"

    @field_validator("current_namespace")
    @classmethod
    def namespace_is_colon_path(cls, v: str) -> str:
        v = v.strip()
        if "/" in v or "\\" in v:
            raise ValueError(f"Namespace '{v}' must be colon-delimited")
        return v.strip(":")

    @field_validator("interwiki_map")
    @classmethod
    def interwiki_entries_valid(cls, v: dict[str, str]) -> dict[str, str]:
        for prefix, base in v.items():
            if not _INTERWIKI_KEY_RE.match(prefix):
                raise ValueError(f"Interwiki prefix '{prefix}' contains invalid characters")
            if not isinstance(base, str) or not base.strip():
                raise ValueError(f"Interwiki prefix '{prefix}' has an empty URL")
            if not (base.startswith(("http://", "https://", "/"))):
                raise ValueError(f"Interwiki URL for '{prefix}' must be absolute: {base!r}")
        return dict(v)

    @field_validator("pages_base_path", "media_base_path", "smiley_base_path")
    @classmethod
    def base_path_has_trailing_slash(cls, v: str) -> str:
        return v if v.endswith("/") else v + "/"


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Render preview
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class RenderRequest(BaseModel):
    content: str = Field(..., max_length=1_000_000)
    namespace: Optional[str] = Field(None, max_length=255)


# -----------------------------------------------------------------------------

class HeadingResponse(BaseModel):
    level: int
    id: str
    title: str


# -----------------------------------------------------------------------------

class RenderResponse(BaseModel):
    html: str
    headings: list[HeadingResponse] = []
    footnotes: int = 0
    warnings: list[str] = []


# -----------------------------------------------------------------------------

class HealthResponse(BaseModel):
    ok: bool = True
    version: str
