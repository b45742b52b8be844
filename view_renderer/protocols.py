"""Protocol definitions for the renderer's external collaborators."""

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from view_renderer.rendering.context import ViewContext
    from view_renderer.templates.resolver import LookupResult

YieldFn = Callable[..., str]


@runtime_checkable
class Template(Protocol):
    """A resolved, executable rendering artifact.

    Templates are immutable once resolved and may be shared between
    concurrent renders. The identifier is stable across lookups of the
    same source and is used for instrumentation.
    """

    identifier: str
    formats: tuple[str, ...]

    def render(self, view: "ViewContext", locals: Mapping[str, Any], yield_fn: YieldFn) -> str:
        """Execute the template.

        Args:
            view: Per-render view context
            locals: Local variables for this execution
            yield_fn: Called by the template to pull layout or slot content

        Returns:
            Rendered output
        """
        ...


class TemplateResolver(Protocol):
    """Lookup capability turning a name and prefix into a Template."""

    def find(
        self,
        name: str,
        prefix: str | None = None,
        formats: tuple[str, ...] | None = None,
    ) -> "LookupResult":
        """Look a template up.

        A formats value of None accepts any format.
        """
        ...

    def compile_inline(self, source: str, handler: str, format: str) -> Template:
        """Compile literal template source with the handler for an extension."""
        ...


class PartialRenderer(Protocol):
    """Renders named partial fragments on behalf of the dispatcher."""

    def render_partial(
        self,
        view: "ViewContext",
        target: Any,
        locals: Mapping[str, Any] | None = None,
        layout: Any = None,
        block: Callable[..., Any] | None = None,
    ) -> str:
        ...


class PageUpdater(Protocol):
    """Legacy page-update capability; receives the caller's block untouched."""

    def update_page(self, view: "ViewContext", block: Callable[..., Any] | None) -> str:
        ...


@runtime_checkable
class FallbackActionHandler(Protocol):
    """Controllers implementing this serve actions that have no method of their own."""

    def handle_missing_action(self, action_name: str) -> Any:
        ...
