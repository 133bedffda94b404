#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Pytest fixtures for pydoku tests.
The HTTP client talks to the ASGI app in-process; no server is started.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from pydoku.main import create_app
from pydoku.schemas import ParserConfig
from pydoku.services.renderer import Parser


# -----------------------------------------------------------------------------

@pytest_asyncio.fixture(scope="function")
async def client():
    """HTTP test client wired to a fresh application instance."""
    app = create_app()
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def parser() -> Parser:
    return Parser(ParserConfig())


# -----------------------------------------------------------------------------
# Helper functions for tests
# -----------------------------------------------------------------------------

def body(html: str) -> str:
    """Strip the outer wrapper div from a parse() result."""
    prefix = '<div class="dokuwiki">\n'
    suffix = "\n</div>"
    assert html.startswith(prefix) and html.endswith(suffix), html
    return html[len(prefix):-len(suffix)]


# -----------------------------------------------------------------------------
