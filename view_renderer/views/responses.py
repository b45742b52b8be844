"""HTML response helpers for FastAPI hosts."""

from fastapi.responses import HTMLResponse

from view_renderer.controller import ActionRenderer
from view_renderer.logging_config import get_logger, log_with_context

logger = get_logger(__name__)


def html_response(renderer: ActionRenderer, status_code: int = 200) -> HTMLResponse:
    """Wrap a rendered body in an HTMLResponse.

    Args:
        renderer: ActionRenderer that has already rendered
        status_code: HTTP status code

    Returns:
        HTMLResponse using the configured charset
    """
    if not renderer.performed:
        log_with_context(
            logger,
            "warning",
            "Building a response before anything was rendered",
            event_type="empty_response",
        )
    body = renderer.response_body if renderer.performed else " "
    charset = renderer.settings.default_charset
    return HTMLResponse(
        content=body.encode(charset),
        status_code=status_code,
        media_type=f"text/html; charset={charset}",
    )
