"""Template lookup over a Jinja2 loader.

Template files are named ``<path>.<format>.<handler>`` (``users/show.html.jinja``)
or ``<path>.<handler>`` for templates that serve any format. Lookups return an
explicit LookupResult instead of raising, so callers decide whether a miss is
an error.
"""

from dataclasses import dataclass
from pathlib import Path

import jinja2

from view_renderer.config import Settings
from view_renderer.exceptions import ConfigurationException
from view_renderer.logging_config import get_logger, log_with_context
from view_renderer.protocols import Template
from view_renderer.templates.handlers import INLINE_IDENTIFIER, HandlerRegistry, default_handlers

logger = get_logger(__name__)

AUTOESCAPE_EXTENSIONS = ("html", "html.jinja", "html.j2", "xml", "xml.jinja", "xml.j2")


@dataclass(frozen=True)
class LookupResult:
    """Outcome of a template lookup."""

    name: str
    template: Template | None = None
    searched: tuple[str, ...] = ()

    @property
    def found(self) -> bool:
        return self.template is not None


def template_path(name: str, prefix: str | None = None) -> str:
    """Join a template name with its lookup prefix.

    A leading slash roots the name and a name that already contains a
    directory ignores the prefix.
    """
    if name.startswith("/"):
        return name.lstrip("/")
    if prefix and "/" not in name:
        return f"{prefix.strip('/')}/{name}"
    return name


class JinjaTemplateResolver:
    """Resolves template names against a Jinja2 environment.

    The environment's template cache is the template cache: repeated lookups of
    the same path return templates with the same identifier without
    recompiling.
    """

    def __init__(
        self,
        loader: jinja2.BaseLoader | None = None,
        *,
        template_dir: Path | None = None,
        auto_reload: bool = True,
        handlers: HandlerRegistry | None = None,
    ):
        if loader is None:
            if template_dir is None:
                raise ConfigurationException("JinjaTemplateResolver needs a loader or a template_dir")
            loader = jinja2.FileSystemLoader(str(template_dir))

        self.environment = jinja2.Environment(
            loader=loader,
            autoescape=jinja2.select_autoescape(
                enabled_extensions=AUTOESCAPE_EXTENSIONS,
                default_for_string=True,
            ),
            auto_reload=auto_reload,
        )
        self.handlers = handlers or default_handlers(self.environment)

    @classmethod
    def from_settings(cls, settings: Settings) -> "JinjaTemplateResolver":
        """Build a filesystem resolver for settings.template_dir.

        Raises:
            ConfigurationException: If template_dir exists but is not a directory
        """
        template_dir = settings.template_dir
        if template_dir.exists() and not template_dir.is_dir():
            raise ConfigurationException(
                f"Template directory {template_dir} is not a directory",
                details={"template_dir": str(template_dir)},
            )
        if not template_dir.exists():
            log_with_context(
                logger,
                "warning",
                "Template directory does not exist, every lookup will miss",
                template_dir=str(template_dir),
                event_type="template_dir_missing",
            )
        return cls(template_dir=template_dir, auto_reload=settings.auto_reload_templates)

    def find(
        self,
        name: str,
        prefix: str | None = None,
        formats: tuple[str, ...] | None = None,
    ) -> LookupResult:
        """Find a template.

        Args:
            name: Template name, optionally with directories
            prefix: Directory used when name has none
            formats: Acceptable formats in preference order; None accepts any

        Returns:
            LookupResult holding the template, or the candidates searched
        """
        path = template_path(name, prefix)
        candidates = self._candidates(path, formats)

        for candidate in candidates:
            extension = candidate.rsplit(".", 1)[1]
            handler = self.handlers.for_extension(extension)
            try:
                template = handler.load(self.environment, candidate, _formats_of(candidate, path))
            except jinja2.TemplateNotFound:
                continue
            return LookupResult(name=path, template=template, searched=tuple(candidates))

        log_with_context(
            logger,
            "debug",
            "Template lookup missed",
            path=path,
            formats=list(formats) if formats is not None else None,
            searched=candidates,
            event_type="template_lookup_miss",
        )
        return LookupResult(name=path, searched=tuple(candidates))

    def compile_inline(self, source: str, handler: str, format: str) -> Template:
        """Compile literal source with the handler registered for an extension."""
        return self.handlers.for_extension(handler).compile(source, INLINE_IDENTIFIER, (format,))

    def _candidates(self, path: str, formats: tuple[str, ...] | None) -> list[str]:
        extensions = self.handlers.extensions
        bare = [f"{path}.{ext}" for ext in extensions]

        if formats is not None:
            return [f"{path}.{fmt}.{ext}" for fmt in formats for ext in extensions] + bare

        try:
            listed = self.environment.list_templates(
                filter_func=lambda candidate: _matches_any_format(candidate, path, extensions)
            )
        except TypeError:
            # Loader cannot enumerate; only format-agnostic files can be probed
            return bare
        return bare + sorted(c for c in listed if c not in bare)


def _matches_any_format(candidate: str, path: str, extensions: tuple[str, ...]) -> bool:
    if not candidate.startswith(f"{path}."):
        return False
    rest = candidate[len(path) + 1 :]
    if "/" in rest:
        return False
    return rest.rsplit(".", 1)[-1] in extensions


def _formats_of(candidate: str, path: str) -> tuple[str, ...]:
    rest = candidate[len(path) + 1 :]
    if "." not in rest:
        return ()
    return (rest.rsplit(".", 1)[0],)
