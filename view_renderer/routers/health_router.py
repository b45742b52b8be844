"""Health endpoint."""

from fastapi import APIRouter, Request

from view_renderer import __version__
from view_renderer.models import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request):
    """Basic health check endpoint.

    Reports ``starting`` until the lifespan has built the render pipeline.
    """
    settings = request.app.state.settings
    ready = getattr(request.app.state, "dispatcher", None) is not None
    return HealthResponse(
        status="ok" if ready else "starting",
        version=__version__,
        template_dir=str(settings.template_dir),
    )
