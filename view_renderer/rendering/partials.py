"""Default partial renderer for hosts that do not bring their own."""

from collections.abc import Callable, Mapping
from typing import Any

from markupsafe import Markup

from view_renderer.rendering.composer import LayoutComposer
from view_renderer.rendering.context import ViewContext
from view_renderer.rendering.instrumentation import RENDER_PARTIAL_EVENT, Notifier
from view_renderer.rendering.lookup import TemplateLookup


class TemplatePartialRenderer:
    """Renders single partials through the template lookup.

    ``render_partial(view, "users/card")`` renders ``users/_card``. When a
    block is given, the partial's bare ``yield_content()`` calls run it,
    which is what wraps a block in a layout. A partial-level layout is itself
    a partial that yields the rendered fragment. Collection rendering is not
    supported.
    """

    def __init__(self, lookup: TemplateLookup, composer: LayoutComposer, notifier: Notifier):
        self.lookup = lookup
        self.composer = composer
        self.notifier = notifier

    def render_partial(
        self,
        view: ViewContext,
        target: Any,
        locals: Mapping[str, Any] | None = None,
        layout: Any = None,
        block: Callable[..., Any] | None = None,
    ) -> Markup:
        locals = dict(locals or {})
        template = self.lookup.find_partial(target, None, view.formats)

        with self.notifier.instrument(RENDER_PARTIAL_EVENT, identifier=template.identifier) as payload:
            content = self.composer.execute(view, template, locals, self.composer.layout_for(view, block))
            if layout is None:
                return content

            layout_template = self.lookup.find_partial(layout, None, view.formats)
            payload["layout"] = layout_template.identifier
            return self.composer.execute(
                view,
                layout_template,
                locals,
                self.composer.layout_for(view, lambda *args: content),
            )
