"""Application factory for creating and configuring the FastAPI app."""

from fastapi import FastAPI

from view_renderer import __version__
from view_renderer.config import Settings, get_settings
from view_renderer.core.lifespan import lifespan
from view_renderer.middleware.error_handlers import register_error_handlers
from view_renderer.routers import health_router, view_router


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use (defaults to the process-wide instance)

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="View Renderer",
        description="Server-side view rendering: templates, partials and layouts.",
        version=__version__,
        lifespan=lifespan,
        root_path=settings.relative_url_root or "",
    )
    app.state.settings = settings

    register_error_handlers(app)

    app.include_router(health_router.router, tags=["health"])
    app.include_router(view_router.router, tags=["views"])

    return app
