"""Controller-side render cycle.

Controllers call into the renderer through an ActionRenderer, one per
response. It applies the legacy option rewrites, guards against rendering
twice, and copies the controller's assigns into the view context.
"""

import functools
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from view_renderer.config import Settings
from view_renderer.exceptions import ActionNotFound, DoubleRenderError
from view_renderer.logging_config import get_logger, log_with_context
from view_renderer.models.render_request import normalize_options
from view_renderer.protocols import FallbackActionHandler
from view_renderer.rendering.context import ViewContext
from view_renderer.rendering.dispatcher import RenderDispatcher

logger = get_logger(__name__)


class ActionRenderer:
    """Renders the body of a single response."""

    def __init__(
        self,
        dispatcher: RenderDispatcher,
        *,
        assigns: Mapping[str, Any] | None = None,
        formats: Iterable[str] | None = None,
        settings: Settings | None = None,
    ):
        self.dispatcher = dispatcher
        self.settings = settings or dispatcher.settings
        self.response_body: str | None = None

        protected = set(self.settings.protected_assigns)
        view_assigns = {k: v for k, v in (assigns or {}).items() if k not in protected}
        self.view: ViewContext = dispatcher.new_context(formats=formats, assigns=view_assigns)

    @property
    def performed(self) -> bool:
        return self.response_body is not None

    def render(
        self,
        options: Any = None,
        locals: Mapping[str, Any] | None = None,
        block: Callable[..., Any] | None = None,
    ) -> str:
        """Render the response body.

        Raises:
            DoubleRenderError: If this response already has a body
        """
        if self.performed:
            log_with_context(
                logger,
                "warning",
                "Render called twice for one response",
                event_type="double_render",
            )
            raise DoubleRenderError()

        if isinstance(options, Mapping):
            options = normalize_options(options)

        self.response_body = self.render_to_body(options, locals, block)
        return self.response_body

    def render_to_body(
        self,
        options: Any = None,
        locals: Mapping[str, Any] | None = None,
        block: Callable[..., Any] | None = None,
    ) -> str:
        """Render without the double-render guard; an empty result becomes a single space."""
        body = self.dispatcher.render(options, locals, block, view=self.view)
        return " " if body is None else str(body)


def resolve_action(controller: Any, action_name: str) -> Callable[..., Any]:
    """Find the callable serving an action.

    Public methods named after the action win. Otherwise a controller that
    implements FallbackActionHandler serves the action through
    handle_missing_action.

    Raises:
        ActionNotFound: If neither applies
    """
    if not action_name.startswith("_"):
        method = getattr(controller, action_name, None)
        if callable(method):
            return method

    if isinstance(controller, FallbackActionHandler):
        return functools.partial(controller.handle_missing_action, action_name)

    raise ActionNotFound(action_name, details={"controller": type(controller).__name__})
