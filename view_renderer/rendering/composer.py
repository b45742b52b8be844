"""Two-phase template rendering: primary template, then its layout."""

from collections.abc import Callable, Mapping
from typing import Any

from markupsafe import Markup

from view_renderer.protocols import Template, YieldFn
from view_renderer.rendering.content import DEFAULT_SLOT, capture, to_safe
from view_renderer.rendering.context import ViewContext
from view_renderer.rendering.instrumentation import RENDER_TEMPLATE_EVENT, Notifier
from view_renderer.rendering.lookup import TemplateLookup


class LayoutComposer:
    """Executes a template and wraps its output in a layout.

    A layout is a template that calls ``yield_content()``: with no argument it
    receives the primary template's output (or the caller's block, when the
    render was given one); with a slot name it receives that slot's content.
    """

    def __init__(self, lookup: TemplateLookup, notifier: Notifier):
        self.lookup = lookup
        self.notifier = notifier

    def render_template(
        self,
        view: ViewContext,
        template: Template,
        layout: Any = None,
        locals: Mapping[str, Any] | None = None,
        block: Callable[..., Any] | None = None,
    ) -> Markup:
        """Render a template, then its layout if one applies.

        The template's output is stored in the default slot before the layout
        runs, whether or not a layout applies.

        Args:
            view: Context of the current render call
            template: Primary template
            layout: Layout name or Template, or None
            locals: Locals shared by template and layout
            block: Outer block served to the layout's bare yield calls

        Returns:
            Final output

        Raises:
            MissingTemplate: If the layout exists in no format
        """
        locals = locals or {}
        layout_template = self.lookup.find_layout(layout, view.formats)

        with self.notifier.instrument(
            RENDER_TEMPLATE_EVENT,
            identifier=template.identifier,
            layout=layout_template.identifier if layout_template is not None else None,
        ):
            content = self.execute(view, template, locals, self.layout_for(view))
            view.content[DEFAULT_SLOT] = content

            if layout_template is None:
                return content

            view.layout_context.layout = layout_template.identifier
            return self.render_layout(view, layout_template, locals, block)

    def render_layout(
        self,
        view: ViewContext,
        layout: Template,
        locals: Mapping[str, Any],
        block: Callable[..., Any] | None = None,
    ) -> Markup:
        return self.execute(view, layout, locals, self.layout_for(view, block))

    def execute(self, view: ViewContext, template: Template, locals: Mapping[str, Any], yield_fn: YieldFn) -> Markup:
        """Run one template with yield_fn installed as the context's yield function."""
        previous = view.layout_context.yield_fn
        view.layout_context.yield_fn = yield_fn
        try:
            return to_safe(template.render(view, locals, yield_fn))
        finally:
            view.layout_context.yield_fn = previous

    @staticmethod
    def layout_for(view: ViewContext, block: Callable[..., Any] | None = None) -> YieldFn:
        """Build the function templates call to pull content.

        A slot name (a string first argument) always reads the slot. Without
        a block every call reads a slot, the default one when no name is
        given. With a block, other calls run the block with the call's
        arguments.
        """

        def yield_content(*args: Any) -> Markup:
            if block is None or (args and isinstance(args[0], str)):
                return view.content.get(args[0] if args else DEFAULT_SLOT)
            return capture(block, *args)

        return yield_content
