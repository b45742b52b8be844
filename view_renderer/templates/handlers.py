"""Template handlers and the template objects they produce.

A handler is chosen by the last extension of a template file
(``index.html.jinja`` is rendered by the ``jinja`` handler) or, for inline
templates, by the request's ``type`` option.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

import jinja2
from markupsafe import Markup

from view_renderer.exceptions import TemplateHandlerNotFound
from view_renderer.protocols import Template, YieldFn

if TYPE_CHECKING:
    from view_renderer.rendering.context import ViewContext

INLINE_IDENTIFIER = "inline template"
TEXT_IDENTIFIER = "text template"


@dataclass(frozen=True)
class JinjaTemplate:
    """A compiled Jinja2 template.

    Templates see their locals (over the controller assigns) plus these helpers:

    - ``yield_content(name=None)``: layout/slot content, or the caller's block
    - ``content_for(name, content=None)``: write or read a named slot
    - ``render(options, locals)``: nested render sharing this view's slots
    - ``view``: the ViewContext itself
    """

    compiled: jinja2.Template = field(repr=False, compare=False)
    identifier: str
    formats: tuple[str, ...] = ()

    def render(self, view: "ViewContext", locals: Mapping[str, Any], yield_fn: YieldFn) -> Markup:
        context = {
            **view.assigns,
            **locals,
            "view": view,
            "yield_content": yield_fn,
            "content_for": view.content_for,
            "render": view.render,
        }
        return Markup(self.compiled.render(context))


@dataclass(frozen=True)
class TextTemplate:
    """Literal text rendered verbatim."""

    text: str
    formats: tuple[str, ...] = ()
    identifier: str = TEXT_IDENTIFIER

    def render(self, view: "ViewContext", locals: Mapping[str, Any], yield_fn: YieldFn) -> str:
        return self.text


class TemplateHandler(Protocol):
    def compile(self, source: str, identifier: str, formats: tuple[str, ...]) -> Template:
        """Build a template from literal source."""
        ...

    def load(self, environment: jinja2.Environment, path: str, formats: tuple[str, ...]) -> Template:
        """Load a template by loader path; raises jinja2.TemplateNotFound when absent."""
        ...


class JinjaHandler:
    def __init__(self, environment: jinja2.Environment):
        self.environment = environment

    def compile(self, source: str, identifier: str, formats: tuple[str, ...]) -> JinjaTemplate:
        return JinjaTemplate(self.environment.from_string(source), identifier, formats)

    def load(self, environment: jinja2.Environment, path: str, formats: tuple[str, ...]) -> JinjaTemplate:
        compiled = environment.get_template(path)
        return JinjaTemplate(compiled, compiled.name or path, formats)


class TextHandler:
    def compile(self, source: str, identifier: str, formats: tuple[str, ...]) -> TextTemplate:
        return TextTemplate(source, formats, identifier)

    def load(self, environment: jinja2.Environment, path: str, formats: tuple[str, ...]) -> TextTemplate:
        if environment.loader is None:
            raise jinja2.TemplateNotFound(path)
        source, _, _ = environment.loader.get_source(environment, path)
        return TextTemplate(source, formats, path)


class HandlerRegistry:
    """Maps file extensions to template handlers."""

    def __init__(self):
        self._handlers: dict[str, TemplateHandler] = {}

    def register(self, extension: str, handler: TemplateHandler) -> None:
        self._handlers[extension.lower().lstrip(".")] = handler

    def for_extension(self, extension: str) -> TemplateHandler:
        """Get the handler for an extension.

        Raises:
            TemplateHandlerNotFound: If nothing is registered for it
        """
        handler = self._handlers.get(extension.lower().lstrip("."))
        if handler is None:
            raise TemplateHandlerNotFound(extension, details={"registered": sorted(self._handlers)})
        return handler

    @property
    def extensions(self) -> tuple[str, ...]:
        return tuple(self._handlers)


def default_handlers(environment: jinja2.Environment) -> HandlerRegistry:
    """Registry with the Jinja2 handler (``.jinja``, ``.j2``) and plain text (``.text``)."""
    registry = HandlerRegistry()
    jinja_handler = JinjaHandler(environment)
    registry.register("jinja", jinja_handler)
    registry.register("j2", jinja_handler)
    registry.register("text", TextHandler())
    return registry
