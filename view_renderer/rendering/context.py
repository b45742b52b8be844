"""Per-render state shared by the templates of one render call."""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from markupsafe import Markup

from view_renderer.protocols import YieldFn
from view_renderer.rendering.content import ContentStore, capture, to_safe

if TYPE_CHECKING:
    from view_renderer.rendering.dispatcher import RenderDispatcher


@dataclass
class LayoutContext:
    """Slot contents, applied layout and yield function of one render call."""

    content: ContentStore = field(default_factory=ContentStore)
    layout: str | None = None
    yield_fn: YieldFn | None = None


class ViewContext:
    """State handed to every template executed for one render call.

    A fresh ViewContext is built for each top-level render, so concurrent
    renders never share slots. Nested renders issued from templates
    (``render(...)`` inside a template) reuse the context they run in, which
    is how content captured by a template reaches its layout.
    """

    def __init__(
        self,
        dispatcher: "RenderDispatcher",
        *,
        formats: Iterable[str] | None = None,
        assigns: Mapping[str, Any] | None = None,
    ):
        self.dispatcher = dispatcher
        self.formats: tuple[str, ...] = tuple(formats) if formats else (dispatcher.settings.default_format,)
        self.assigns: dict[str, Any] = dict(assigns or {})
        self.layout_context = LayoutContext()
        self.output_buffer = Markup("")

    @property
    def content(self) -> ContentStore:
        return self.layout_context.content

    @property
    def layout(self) -> str | None:
        """Identifier of the layout applied by the most recent template render."""
        return self.layout_context.layout

    def render(
        self,
        options: Any = None,
        locals: Mapping[str, Any] | None = None,
        block: Callable[..., Any] | None = None,
    ) -> Markup:
        """Render from inside a template, sharing this context's slots.

        A request naming no template renders as empty markup.
        """
        return to_safe(self.dispatcher.render(options, locals, block, view=self))

    def content_for(self, name: str, content: Any = None) -> Markup:
        """Write a slot when content is given, otherwise read it.

        Content may be a callable, whose output is captured. Writing returns
        empty markup so the call can sit in an output expression.
        """
        if content is None:
            return self.content[name]
        self.content[name] = capture(content) if callable(content) else content
        return Markup("")

    def yield_content(self, *args: Any) -> Markup:
        """Call the yield function currently in scope.

        Outside any template execution this reads the slot named by the first
        argument (the default slot when there is none).
        """
        yield_fn = self.layout_context.yield_fn
        if yield_fn is None:
            return self.content.get(args[0] if args else None)
        return to_safe(yield_fn(*args))

    def safe_concat(self, content: Any) -> Markup:
        """Append safe content to the output buffer and return the appended part."""
        chunk = to_safe(content)
        self.output_buffer = self.output_buffer + chunk
        return chunk
