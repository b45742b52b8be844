"""Render dispatch, template lookup and layout composition."""

from view_renderer.rendering.composer import LayoutComposer
from view_renderer.rendering.content import DEFAULT_SLOT, ContentStore, capture
from view_renderer.rendering.context import LayoutContext, ViewContext
from view_renderer.rendering.dispatcher import RenderDispatcher
from view_renderer.rendering.instrumentation import (
    RENDER_PARTIAL_EVENT,
    RENDER_TEMPLATE_EVENT,
    Notifier,
    RenderEvent,
    log_render_event,
)
from view_renderer.rendering.lookup import TemplateLookup
from view_renderer.rendering.partials import TemplatePartialRenderer

__all__ = [
    "DEFAULT_SLOT",
    "RENDER_PARTIAL_EVENT",
    "RENDER_TEMPLATE_EVENT",
    "ContentStore",
    "LayoutComposer",
    "LayoutContext",
    "Notifier",
    "RenderDispatcher",
    "RenderEvent",
    "TemplateLookup",
    "TemplatePartialRenderer",
    "ViewContext",
    "capture",
    "log_render_event",
]
