#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Application configuration.

All values can be overridden via ``DOKU_*`` environment variables or a .env
file.  The parser options mirror :class:`~pydoku.schemas.ParserConfig`.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from pydoku._version import __version__ as _pkg_version
from pydoku.schemas import DEFAULT_INTERWIKI, SYNTAX_SECTIONS, ParserConfig


# -----------------------------------------------------------------------------

class Settings(BaseSettings):

    model_config = SettingsConfigDict(
        env_prefix="DOKU_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Application ────────────────────────────────────────────────────────

    app_name: str = "pydoku"
    app_version: str = _pkg_version
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"

    # ── Parser ─────────────────────────────────────────────────────────────

    namespace: str = ""
    interwiki: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_INTERWIKI))
    pages_base_path: str = "/"
    media_base_path: str = "/media/"
    smiley_base_path: str = "/lib/images/smileys/"
    txt_extension: bool = False
    dokuwiki_paths: bool = False
    htmlok: bool = True
    typography: bool = True
    use_emoji: bool = True
    toc: bool = True
    toc_min_headings: int = 3
    bare_links_relative: bool = True
    literal_sections: tuple[str, ...] = SYNTAX_SECTIONS
    highlight_code: bool = True
    wrapper_class: str = "dokuwiki"

    # ── HTTP preview ───────────────────────────────────────────────────────

    max_content_bytes: int = 1_000_000
    cors_origins: list[str] = [
        "http://localhost:8000",
        "http://localhost:3000",
    ]

    def parser_config(self, **overrides) -> ParserConfig:
        """Build the immutable parser configuration from these settings."""
        values = dict(
            current_namespace=self.namespace,
            interwiki_map=self.interwiki,
            pages_base_path=self.pages_base_path,
            media_base_path=self.media_base_path,
            smiley_base_path=self.smiley_base_path,
            use_txt_extension=self.txt_extension,
            use_dokuwiki_paths=self.dokuwiki_paths,
            html_embed_allowed=self.htmlok,
            typography_enabled=self.typography,
            use_emoji=self.use_emoji,
            toc_enabled=self.toc,
            toc_min_headings=self.toc_min_headings,
            bare_links_relative=self.bare_links_relative,
            literal_sections=self.literal_sections,
            highlight_code=self.highlight_code,
            wrapper_class=self.wrapper_class,
        )
        values.update({k: v for k, v in overrides.items() if v is not None})
        return ParserConfig(**values)


# -----------------------------------------------------------------------------

@lru_cache
def get_settings() -> Settings:
    return Settings()


# -----------------------------------------------------------------------------
