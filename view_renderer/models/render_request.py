"""Render request models.

Every render call carries exactly one primary mode. Controllers and templates
usually pass an options mapping ({"template": ..., "layout": ...}); that
mapping is turned into one concrete variant by RenderRequest.from_options,
which applies a fixed precedence so that a mapping naming several modes
always resolves the same way.
"""

from collections.abc import Callable, Mapping
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from view_renderer.protocols import Template


def normalize_options(options: Mapping[str, Any]) -> dict[str, Any]:
    """Apply the legacy option rewrites controllers still rely on.

    - an ``action`` containing a path separator is a template name
    - ``nothing=True`` means an empty text body
    - ``text=None`` renders a single space
    - a leading slash on ``template`` is dropped

    Args:
        options: Raw render options

    Returns:
        A new, rewritten options dict
    """
    opts = dict(options)

    action = opts.get("action")
    if action is not None and "/" in str(action):
        opts["template"] = str(opts.pop("action"))

    if opts.pop("nothing", None) is True:
        opts["text"] = None

    if "text" in opts and opts["text"] is None:
        opts["text"] = " "

    template = opts.get("template")
    if isinstance(template, str) and template.startswith("/"):
        opts["template"] = template[1:]

    return opts


class RenderRequest(BaseModel):
    """Fields shared by every render request variant."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    mode: str
    locals: dict[str, Any] = Field(default_factory=dict, description="Local variables for the template")
    layout: Any = Field(default=None, description="Layout name or resolved Template, if any")

    @field_validator("locals", mode="before")
    @classmethod
    def default_locals(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("layout", mode="before")
    @classmethod
    def falsy_layout_means_none(cls, v: Any) -> Any:
        if v is False or v == "":
            return None
        return v

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None = None) -> "AnyRenderRequest":
        """Build the request variant an options mapping describes.

        Precedence (first key present wins): update, partial, inline, text,
        _template, file, template. A mapping with none of them becomes an
        EmptyRequest, which still carries its layout and locals. Unknown keys
        are ignored.

        Args:
            options: Render options mapping

        Returns:
            One concrete RenderRequest variant
        """
        opts = normalize_options(options or {})
        common: dict[str, Any] = {"locals": opts.get("locals"), "layout": opts.get("layout")}
        prefix = opts.get("_prefix")

        if "update" in opts:
            block = opts["update"] if callable(opts["update"]) else None
            return UpdateRequest(block=block, **common)
        if "partial" in opts:
            return PartialRequest(target=opts["partial"], **common)
        if "inline" in opts:
            return InlineRequest(source=opts["inline"], handler=opts.get("type"), **common)
        if "text" in opts:
            return TextRequest(value=opts["text"], **common)
        if "_template" in opts:
            return ExplicitRequest(template=opts["_template"], **common)
        if "file" in opts:
            return FileRequest(path=opts["file"], prefix=prefix, **common)
        if "template" in opts:
            return TemplateRequest(name=opts["template"], prefix=prefix, **common)
        return EmptyRequest(**common)


class PartialRequest(RenderRequest):
    """Render a named partial fragment."""

    mode: Literal["partial"] = "partial"
    target: Any


class UpdateRequest(RenderRequest):
    """Legacy page update; handed to the page updater as-is."""

    mode: Literal["update"] = "update"
    block: Callable[..., Any] | None = None


class InlineRequest(RenderRequest):
    """Compile and render a literal template snippet."""

    mode: Literal["inline"] = "inline"
    source: str
    handler: str | None = Field(default=None, description="Handler extension, e.g. 'jinja'")


class TextRequest(RenderRequest):
    """Literal text, never passed through a template handler."""

    mode: Literal["text"] = "text"
    value: str = " "

    @field_validator("value", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        if v is None:
            return " "
        return v if isinstance(v, str) else str(v)


class FileRequest(RenderRequest):
    """Render by file-style path."""

    mode: Literal["file"] = "file"
    path: str
    prefix: str | None = None


class TemplateRequest(RenderRequest):
    """Render by logical template name."""

    mode: Literal["template"] = "template"
    name: str
    prefix: str | None = None


class ExplicitRequest(RenderRequest):
    """Render an already resolved Template."""

    mode: Literal["explicit"] = "explicit"
    template: Any

    @field_validator("template", mode="after")
    @classmethod
    def must_be_template(cls, v: Any) -> Any:
        if not isinstance(v, Template):
            raise ValueError(f"expected a resolved Template, got {type(v).__name__}")
        return v


class EmptyRequest(RenderRequest):
    """No primary mode; only meaningful with a block and a layout."""

    mode: Literal["empty"] = "empty"


AnyRenderRequest = Annotated[
    Union[
        PartialRequest,
        UpdateRequest,
        InlineRequest,
        TextRequest,
        FileRequest,
        TemplateRequest,
        ExplicitRequest,
        EmptyRequest,
    ],
    Field(discriminator="mode"),
]
