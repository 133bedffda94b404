from pydoku.schemas.schemas import (
    ParserConfig,
    DEFAULT_INTERWIKI, SYNTAX_SECTIONS,
    RenderRequest, RenderResponse, HeadingResponse, HealthResponse,
)

__all__ = [
    "ParserConfig",
    "DEFAULT_INTERWIKI", "SYNTAX_SECTIONS",
    "RenderRequest", "RenderResponse", "HeadingResponse", "HealthResponse",
]
