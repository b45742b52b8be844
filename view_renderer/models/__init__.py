"""Pydantic models for render requests and API responses."""

from view_renderer.models.base_models import ErrorResponse, HealthResponse
from view_renderer.models.render_request import (
    AnyRenderRequest,
    EmptyRequest,
    ExplicitRequest,
    FileRequest,
    InlineRequest,
    PartialRequest,
    RenderRequest,
    TemplateRequest,
    TextRequest,
    UpdateRequest,
    normalize_options,
)

__all__ = [
    "AnyRenderRequest",
    "EmptyRequest",
    "ErrorResponse",
    "ExplicitRequest",
    "FileRequest",
    "HealthResponse",
    "InlineRequest",
    "PartialRequest",
    "RenderRequest",
    "TemplateRequest",
    "TextRequest",
    "UpdateRequest",
    "normalize_options",
]
