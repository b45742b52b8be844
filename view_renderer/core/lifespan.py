"""Application lifespan management."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from view_renderer import __version__
from view_renderer.config import Settings
from view_renderer.logging_config import get_logger, log_with_context
from view_renderer.rendering.dispatcher import RenderDispatcher
from view_renderer.rendering.instrumentation import RENDER_TEMPLATE_EVENT, Notifier, log_render_event
from view_renderer.templates.resolver import JinjaTemplateResolver

logger = get_logger(__name__)


def build_dispatcher(settings: Settings) -> RenderDispatcher:
    """Wire resolver, notifier and dispatcher from settings."""
    notifier = Notifier()
    if settings.log_render_events:
        notifier.subscribe(RENDER_TEMPLATE_EVENT, log_render_event)

    resolver = JinjaTemplateResolver.from_settings(settings)
    return RenderDispatcher(resolver, settings, notifier=notifier)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the shared render pipeline at startup and drop it at shutdown.

    Exceptions raised while the app runs are re-raised after cleanup.
    """
    settings: Settings = app.state.settings

    log_with_context(
        logger,
        "info",
        "Starting view renderer",
        version=__version__,
        template_dir=str(settings.template_dir),
        event_type="app_startup",
    )

    app.state.dispatcher = build_dispatcher(settings)

    try:
        yield
    finally:
        app.state.dispatcher = None
        log_with_context(
            logger,
            "info",
            "View renderer stopped",
            event_type="app_shutdown",
        )
