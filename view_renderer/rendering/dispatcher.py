"""Render entry point."""

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from markupsafe import Markup

from view_renderer.config import Settings
from view_renderer.exceptions import PageUpdateUnavailable
from view_renderer.logging_config import get_logger, log_with_context
from view_renderer.models.render_request import PartialRequest, RenderRequest, UpdateRequest
from view_renderer.protocols import PageUpdater, PartialRenderer, TemplateResolver
from view_renderer.rendering.composer import LayoutComposer
from view_renderer.rendering.context import ViewContext
from view_renderer.rendering.instrumentation import Notifier
from view_renderer.rendering.lookup import TemplateLookup
from view_renderer.rendering.partials import TemplatePartialRenderer

logger = get_logger(__name__)


class RenderDispatcher:
    """Classifies render calls and routes them.

    The dispatcher holds no per-render state and can be shared by every
    request of the process; each top-level render gets a fresh ViewContext.
    """

    def __init__(
        self,
        resolver: TemplateResolver,
        settings: Settings,
        *,
        notifier: Notifier | None = None,
        partial_renderer: PartialRenderer | None = None,
        page_updater: PageUpdater | None = None,
    ):
        self.settings = settings
        self.notifier = notifier or Notifier()
        self.lookup = TemplateLookup(resolver, settings)
        self.composer = LayoutComposer(self.lookup, self.notifier)
        self.partial_renderer = partial_renderer or TemplatePartialRenderer(self.lookup, self.composer, self.notifier)
        self.page_updater = page_updater

    def new_context(
        self,
        formats: Iterable[str] | None = None,
        assigns: Mapping[str, Any] | None = None,
    ) -> ViewContext:
        return ViewContext(self, formats=formats, assigns=assigns)

    def render(
        self,
        request: Any = None,
        locals: Mapping[str, Any] | None = None,
        block: Callable[..., Any] | None = None,
        *,
        view: ViewContext | None = None,
    ) -> Markup | str | None:
        """Render a request.

        Routing, first match wins:

        1. update requests go to the page updater with the block
        2. a block together with a layout renders the layout as a partial
           whose bare yields run the block; the result is appended to the
           view's output buffer
        3. partial requests go to the partial renderer
        4. everything else resolves a template and renders it with its layout

        A request that is neither a RenderRequest nor a mapping is a partial
        target, with ``locals`` as its locals.

        Args:
            request: RenderRequest, options mapping, or bare partial target
            locals: Locals for a bare partial target
            block: Content block for layouts and partials
            view: Context to render in; a fresh one when omitted

        Returns:
            Rendered output, or None when the request names no template

        Raises:
            MissingTemplate: If a named template or layout does not exist
            PageUpdateUnavailable: If an update is requested without a page updater
        """
        view = view or self.new_context()
        request = self.coerce_request(request, locals)

        log_with_context(
            logger,
            "debug",
            "Dispatching render",
            mode=request.mode,
            has_block=block is not None,
            event_type="render_dispatch",
        )

        if isinstance(request, UpdateRequest):
            if self.page_updater is None:
                raise PageUpdateUnavailable()
            return self.page_updater.update_page(view, block or request.block)

        if block is not None and request.layout is not None:
            wrapped = self.partial_renderer.render_partial(view, request.layout, request.locals, block=block)
            return view.safe_concat(wrapped)

        if isinstance(request, PartialRequest):
            return self.partial_renderer.render_partial(
                view,
                request.target,
                request.locals,
                layout=request.layout,
                block=block,
            )

        template = self.lookup.determine_template(request, view.formats)
        if template is None:
            return None
        return self.composer.render_template(view, template, request.layout, request.locals, block)

    @staticmethod
    def coerce_request(request: Any, locals: Mapping[str, Any] | None = None) -> RenderRequest:
        """Turn any accepted render argument into a RenderRequest.

        Positional locals fill in for an options mapping that has none.
        """
        if isinstance(request, RenderRequest):
            return request
        if request is None or isinstance(request, Mapping):
            options = dict(request or {})
            if locals is not None and options.get("locals") is None:
                options["locals"] = locals
            return RenderRequest.from_options(options)
        return PartialRequest(target=request, locals=locals)
