"""FastAPI dependencies for dependency injection."""

from fastapi import Request

from view_renderer.controller import ActionRenderer
from view_renderer.rendering.dispatcher import RenderDispatcher


async def get_dispatcher(request: Request) -> RenderDispatcher:
    """
    Get the shared render dispatcher from app state.

    Args:
        request: The FastAPI request object.

    Returns:
        The process-wide RenderDispatcher.

    Raises:
        RuntimeError: If the dispatcher is not initialized.
    """
    dispatcher: RenderDispatcher | None = getattr(request.app.state, "dispatcher", None)

    if dispatcher is None:
        raise RuntimeError("Render dispatcher not initialized.")

    return dispatcher


async def get_action_renderer(request: Request) -> ActionRenderer:
    """
    Build a fresh ActionRenderer for this request.

    Each request gets its own view context, so slots captured while rendering
    one response never leak into another.

    Args:
        request: The FastAPI request object.

    Returns:
        A new ActionRenderer bound to the shared dispatcher.
    """
    dispatcher = await get_dispatcher(request)
    return ActionRenderer(dispatcher, assigns={"request": request})
