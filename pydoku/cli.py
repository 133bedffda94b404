#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Render DokuWiki markup from stdin (or a file) to HTML on stdout.

Usage:
    pydoku [options] [FILE] < page.txt > page.html

Options:
    --namespace NS          Namespace used to resolve relative links
                            (default: $DOKU_NAMESPACE or the root namespace)
    --no-typography         Leave arrows, dashes, (c) etc. untouched
    --no-html               Show <html> blocks as code instead of passing them through
    --no-toc                Never emit a table of contents
    --images-for-smileys    Render emoticons as <img> instead of Unicode glyphs
    --verbose               Debug logging on stderr, including parse warnings
    --pygments-css          Print the stylesheet for highlighted code and exit

All other options come from DOKU_* environment variables or a .env file.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from pydoku.core.config import get_settings
from pydoku.services.highlight import pygments_css
from pydoku.services.renderer import Parser

log = logging.getLogger("pydoku")


# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pydoku",
        description="Convert DokuWiki markup to HTML.",
        epilog=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("file", nargs="?", default=None,
                        help="Markup file to read (default: stdin)")
    parser.add_argument("--namespace", default=None, metavar="NS",
                        help="Current namespace for relative links")
    parser.add_argument("--no-typography", action="store_true",
                        help="Disable typography substitutions")
    parser.add_argument("--no-html", action="store_true",
                        help="Render <html> blocks as escaped code")
    parser.add_argument("--no-toc", action="store_true",
                        help="Disable the table of contents")
    parser.add_argument("--images-for-smileys", action="store_true",
                        help="Use smiley images instead of emoji")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable debug logging")
    parser.add_argument("--pygments-css", nargs="?", const="friendly", default=None,
                        metavar="STYLE", help="Print Pygments CSS and exit")
    return parser


def _read_input(path: Optional[str]) -> str:
    if path is None or path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _first_error(exc: ValidationError) -> str:
    """One-line summary of a settings / config validation failure."""
    err = exc.errors()[0]
    where = ".".join(str(p) for p in err["loc"])
    return f"{where}: {err['msg']}" if where else err["msg"]


# -----------------------------------------------------------------------------

def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = get_settings()
    except ValidationError as exc:
        print(f"Error: invalid configuration: {_first_error(exc)}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.pygments_css is not None:
        print(pygments_css(args.pygments_css))
        return 0

    try:
        config = settings.parser_config(
            current_namespace=args.namespace,
            typography_enabled=False if args.no_typography else None,
            html_embed_allowed=False if args.no_html else None,
            toc_enabled=False if args.no_toc else None,
            use_emoji=False if args.images_for_smileys else None,
        )
    except ValidationError as exc:
        print(f"Error: invalid configuration: {_first_error(exc)}", file=sys.stderr)
        return 1

    try:
        markup = _read_input(args.file)
    except OSError as exc:
        print(f"Error: cannot read {args.file}: {exc}", file=sys.stderr)
        return 1

    if not markup.strip():
        print("Error: no input", file=sys.stderr)
        return 1

    try:
        result = Parser(config).render(markup)
    except Exception as exc:
        log.exception("render failed")
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    for warning in result.warnings:
        log.info("warning: %s", warning)

    sys.stdout.write(result.html + "\n")
    return 0


# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())


# -----------------------------------------------------------------------------
