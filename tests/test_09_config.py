#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Tests for ParserConfig validation and environment-driven Settings."""
# -----------------------------------------------------------------------------

from __future__ import annotations

import pytest
from pydantic import ValidationError

from pydoku import ParserConfig
from pydoku.core.config import Settings, get_settings
from pydoku.schemas import DEFAULT_INTERWIKI, SYNTAX_SECTIONS


# =============================================================================
# ParserConfig
# =============================================================================

def test_defaults():
    cfg = ParserConfig()
    assert cfg.current_namespace == ""
    assert cfg.interwiki_map == DEFAULT_INTERWIKI
    assert cfg.pages_base_path == "/"
    assert cfg.media_base_path == "/media/"
    assert cfg.html_embed_allowed is True
    assert cfg.typography_enabled is True
    assert cfg.use_emoji is True
    assert cfg.toc_enabled is True
    assert cfg.literal_sections == SYNTAX_SECTIONS
    assert cfg.wrapper_class == "dokuwiki"


def test_config_is_frozen():
    cfg = ParserConfig()
    with pytest.raises(ValidationError):
        cfg.use_emoji = False


def test_unknown_option_rejected():
    with pytest.raises(ValidationError):
        ParserConfig(bogus=True)


def test_namespace_colons_trimmed():
    assert ParserConfig(current_namespace=":a:b:").current_namespace == "a:b"


def test_namespace_with_slashes_rejected():
    with pytest.raises(ValidationError):
        ParserConfig(current_namespace="a/b")


def test_base_paths_get_trailing_slash():
    cfg = ParserConfig(pages_base_path="/wiki", media_base_path="/files")
    assert cfg.pages_base_path == "/wiki/"
    assert cfg.media_base_path == "/files/"


@pytest.mark.parametrize("mapping", [
    {"bad key": "https://example.com/"},
    {"ok": "ftp://example.com/"},
    {"ok": ""},
    {"ok": "   "},
])
def test_invalid_interwiki_rejected(mapping):
    with pytest.raises(ValidationError):
        ParserConfig(interwiki_map=mapping)


def test_relative_interwiki_base_allowed():
    cfg = ParserConfig(interwiki_map={"local": "/other/"})
    assert cfg.interwiki_map == {"local": "/other/"}


def test_toc_min_headings_must_be_positive():
    with pytest.raises(ValidationError):
        ParserConfig(toc_min_headings=0)


# =============================================================================
# Settings
# =============================================================================

@pytest.fixture
def clean_env(monkeypatch):
    for name in ("NAMESPACE", "TYPOGRAPHY", "INTERWIKI", "HTMLOK", "DOKUWIKI_PATHS", "LOG_LEVEL",
                 "BARE_LINKS_RELATIVE", "LITERAL_SECTIONS", "WRAPPER_CLASS"):
        monkeypatch.delenv(f"DOKU_{name}", raising=False)
    return monkeypatch


def test_settings_defaults(clean_env):
    cfg = Settings().parser_config()
    assert cfg == ParserConfig()


def test_settings_from_environment(clean_env):
    clean_env.setenv("DOKU_NAMESPACE", "wiki:docs")
    clean_env.setenv("DOKU_TYPOGRAPHY", "false")
    clean_env.setenv("DOKU_INTERWIKI", '{"gh": "https://github.com/"}')
    clean_env.setenv("DOKU_DOKUWIKI_PATHS", "1")
    clean_env.setenv("DOKU_BARE_LINKS_RELATIVE", "false")
    clean_env.setenv("DOKU_LITERAL_SECTIONS", '["Examples"]')
    clean_env.setenv("DOKU_WRAPPER_CLASS", "page")
    cfg = Settings().parser_config()
    assert cfg.current_namespace == "wiki:docs"
    assert cfg.typography_enabled is False
    assert cfg.interwiki_map == {"gh": "https://github.com/"}
    assert cfg.use_dokuwiki_paths is True
    assert cfg.bare_links_relative is False
    assert cfg.literal_sections == ("Examples",)
    assert cfg.wrapper_class == "page"


def test_parser_config_overrides(clean_env):
    cfg = Settings().parser_config(current_namespace="ns", use_emoji=False)
    assert cfg.current_namespace == "ns"
    assert cfg.use_emoji is False


def test_parser_config_ignores_none_overrides(clean_env):
    clean_env.setenv("DOKU_NAMESPACE", "wiki")
    assert Settings().parser_config(current_namespace=None).current_namespace == "wiki"


def test_invalid_log_level_rejected(clean_env):
    clean_env.setenv("DOKU_LOG_LEVEL", "LOUD")
    with pytest.raises(ValidationError):
        Settings()


def test_get_settings_is_cached():
    assert get_settings() is get_settings()


# -----------------------------------------------------------------------------
