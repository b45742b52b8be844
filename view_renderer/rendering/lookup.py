"""Turns render requests into templates."""

from typing import Any

from view_renderer.config import Settings
from view_renderer.exceptions import MissingTemplate
from view_renderer.logging_config import get_logger, log_with_context
from view_renderer.models.render_request import (
    ExplicitRequest,
    FileRequest,
    InlineRequest,
    RenderRequest,
    TemplateRequest,
    TextRequest,
)
from view_renderer.protocols import Template, TemplateResolver
from view_renderer.templates.handlers import TextTemplate

logger = get_logger(__name__)


def partial_path(target: str) -> str:
    """``users/card`` -> ``users/_card``; ``card`` -> ``_card``."""
    directory, _, name = target.rpartition("/")
    if name.startswith("_"):
        return target
    return f"{directory}/_{name}" if directory else f"_{name}"


class TemplateLookup:
    """Thin layer over a TemplateResolver used by the render pipeline.

    Misses become MissingTemplate here, with one exception: a layout that
    exists only for some other format is skipped rather than reported.
    """

    def __init__(self, resolver: TemplateResolver, settings: Settings):
        self.resolver = resolver
        self.settings = settings

    def find(self, name: str, prefix: str | None = None, formats: tuple[str, ...] | None = None) -> Template:
        """Resolve a template or fail.

        Raises:
            MissingTemplate: If the resolver finds nothing
        """
        result = self.resolver.find(name, prefix, formats)
        if result.template is None:
            raise MissingTemplate(name, prefix=prefix, searched=result.searched, formats=formats)
        return result.template

    def exists(self, name: str, prefix: str | None = None, formats: tuple[str, ...] | None = None) -> bool:
        return self.resolver.find(name, prefix, formats).found

    def determine_template(self, request: RenderRequest, formats: tuple[str, ...]) -> Template | None:
        """Pick the template a request describes.

        Inline source is compiled with the handler named by the request (the
        configured default otherwise); text becomes a pass-through template;
        an explicit template is returned as given; file and template names go
        to the resolver. Requests with none of these resolve to None.
        """
        if isinstance(request, InlineRequest):
            handler = request.handler or self.settings.default_handler
            return self.resolver.compile_inline(request.source, handler, self.settings.default_format)
        if isinstance(request, TextRequest):
            return TextTemplate(request.value, formats=formats[:1])
        if isinstance(request, ExplicitRequest):
            return request.template
        if isinstance(request, FileRequest):
            return self.find(request.path, request.prefix, formats)
        if isinstance(request, TemplateRequest):
            return self.find(request.name, request.prefix, formats)
        return None

    def find_layout(self, layout: Any, formats: tuple[str, ...]) -> Template | None:
        """Resolve a layout reference.

        The lookup is first made for the negotiated formats. On a miss it is
        repeated accepting any format: if the layout exists there it simply
        does not apply to this format and no layout is used; if it does not
        exist at all MissingTemplate is raised.

        Args:
            layout: Layout name, resolved Template, or None
            formats: Negotiated formats

        Returns:
            The layout template, or None when no layout applies

        Raises:
            MissingTemplate: If the layout exists in no format
        """
        if layout is None:
            return None
        if isinstance(layout, Template):
            return layout

        name = str(layout)
        strict = self.resolver.find(name, None, formats)
        if strict.template is not None:
            return strict.template

        relaxed = self.resolver.find(name, None, None)
        if relaxed.template is None:
            raise MissingTemplate(name, searched=strict.searched + relaxed.searched, formats=formats)

        log_with_context(
            logger,
            "debug",
            "Layout exists only for other formats, rendering without it",
            layout=name,
            formats=list(formats),
            event_type="layout_relaxed_lookup",
        )
        return None

    def find_partial(self, target: Any, prefix: str | None, formats: tuple[str, ...]) -> Template:
        """Resolve a partial target (a name or an already resolved Template).

        Raises:
            MissingTemplate: If no partial matches
        """
        if isinstance(target, Template):
            return target
        return self.find(partial_path(str(target)), prefix, formats)
