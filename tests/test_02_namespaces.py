#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Tests for page id resolution and id → URL mapping."""
# -----------------------------------------------------------------------------

from __future__ import annotations

import pytest

from pydoku import ParserConfig, resolve_namespace
from pydoku.services.namespaces import clean_id, media_src, page_href, section_id


# =============================================================================
# resolve_namespace
# =============================================================================

@pytest.mark.parametrize("target,expected", [
    (":ns3:page",  "ns3:page"),
    ("..:parent",  "ns1:parent"),
    (".:sibling",  "ns1:ns2:sibling"),
    (":",          "ns1:ns2:start"),
])
def test_resolution_vectors(target, expected):
    assert resolve_namespace(target, "ns1:ns2") == expected


def test_parent_prefix_repeats():
    assert resolve_namespace("..:..:x", "a:b:c") == "a:x"


def test_parent_prefix_without_colon():
    assert resolve_namespace("..x", "a:b") == "a:x"


def test_parent_never_pops_below_root():
    assert resolve_namespace("..:..:..:too:far", "a") == "too:far"


def test_current_prefix_without_colon():
    assert resolve_namespace(".here", "a:b") == "a:b:here"


def test_bare_target_relative_by_default():
    assert resolve_namespace("page", "ns1") == "ns1:page"


def test_bare_target_page_local_when_not_relative():
    assert resolve_namespace("page", "ns1", relative=False) == "page"


def test_trailing_colon_means_start_page():
    assert resolve_namespace("wiki:") == "wiki:start"


def test_empty_target_is_start():
    assert resolve_namespace("") == "start"


def test_target_is_cleaned():
    assert resolve_namespace(":Wiki:Some Page!") == "wiki:some_page"


# =============================================================================
# clean_id / section_id
# =============================================================================

def test_clean_id_collapses_separators():
    assert clean_id("::a::b::") == "a:b"


def test_clean_id_replaces_disallowed_characters():
    assert clean_id("Hello World!") == "hello_world"


def test_section_id_slugifies():
    assert section_id("Hello, World!") == "hello_world"


def test_section_id_never_empty():
    assert section_id("!!!") == "section"


# =============================================================================
# URLs
# =============================================================================

def test_page_href_direct_path():
    assert page_href("wiki:syntax", ParserConfig()) == "/wiki/syntax"


def test_page_href_txt_extension():
    cfg = ParserConfig(use_txt_extension=True)
    assert page_href("wiki:syntax", cfg) == "/wiki/syntax.txt"


def test_page_href_dokuwiki_style():
    cfg = ParserConfig(use_dokuwiki_paths=True, pages_base_path="/dw")
    assert page_href("wiki:syntax", cfg) == "/dw/doku.php?id=wiki:syntax"


def test_media_src_direct_path():
    assert media_src("wiki:img.png", ParserConfig()) == "/media/wiki/img.png"


def test_media_src_dokuwiki_style_with_width():
    cfg = ParserConfig(use_dokuwiki_paths=True, media_base_path="/")
    assert media_src("wiki:img.png", cfg, "200") == "/lib/exe/fetch.php?w=200&media=wiki:img.png"


# -----------------------------------------------------------------------------
