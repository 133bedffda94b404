#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Render endpoints — live preview of DokuWiki markup.

GET  /api/v1/render?content=...&namespace=wiki
POST /api/v1/render   {"content": "...", "namespace": "wiki"}
GET  /api/v1/health
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import ValidationError

from pydoku.core.config import get_settings
from pydoku.schemas import HealthResponse, HeadingResponse, RenderRequest, RenderResponse
from pydoku.services.renderer import Parser

log = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

router = APIRouter(tags=["render"])


# -----------------------------------------------------------------------------

def _render(content: str, namespace: Optional[str]) -> RenderResponse:
    settings = get_settings()
    if len(content.encode("utf-8")) > settings.max_content_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Content exceeds {settings.max_content_bytes} bytes",
        )
    try:
        config = settings.parser_config(current_namespace=namespace)
    except ValidationError as exc:
        raise HTTPException(
            status_code=422,
            detail=[e["msg"] for e in exc.errors()],
        )
    result = Parser(config).render(content)
    if result.warnings:
        log.debug("preview render produced %d warning(s)", len(result.warnings))
    return RenderResponse(
        html=result.html,
        headings=[HeadingResponse(level=h.level, id=h.id, title=h.title) for h in result.headings],
        footnotes=result.footnotes,
        warnings=result.warnings,
    )


# -----------------------------------------------------------------------------

@router.get("/render", response_model=RenderResponse)
async def render_preview(
    content:   str = Query(default="", max_length=1_000_000),
    namespace: Optional[str] = Query(default=None),
):
    """Rendered HTML for a snippet of markup, for quick previews."""
    return _render(content, namespace)


@router.post("/render", response_model=RenderResponse)
async def render_document(body: RenderRequest):
    return _render(body.content, body.namespace)


@router.get("/health", response_model=HealthResponse, tags=["system"])
async def health():
    return HealthResponse(ok=True, version=get_settings().app_version)


# -----------------------------------------------------------------------------
