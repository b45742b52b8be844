"""Template handlers and the Jinja2 lookup capability."""

from view_renderer.templates.handlers import (
    INLINE_IDENTIFIER,
    TEXT_IDENTIFIER,
    HandlerRegistry,
    JinjaTemplate,
    TextTemplate,
    default_handlers,
)
from view_renderer.templates.resolver import JinjaTemplateResolver, LookupResult, template_path

__all__ = [
    "INLINE_IDENTIFIER",
    "TEXT_IDENTIFIER",
    "HandlerRegistry",
    "JinjaTemplate",
    "JinjaTemplateResolver",
    "LookupResult",
    "TextTemplate",
    "default_handlers",
    "template_path",
]
