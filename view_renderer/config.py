from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parent.parent  # view-renderer/

DEFAULT_PROTECTED_ASSIGNS = [
    "assigns",
    "performed_redirect",
    "performed_render",
    "variables_added",
    "request_origin",
    "url",
    "parent_controller",
    "action_name",
    "before_filter_chain_aborted",
    "headers",
    "params",
    "response",
]


class Settings(BaseSettings):
    """Renderer settings with validation.

    Built once at process start (see get_settings) and handed to the
    components that need it. Nothing in the renderer reads ambient globals.

    Every field can be overridden with a VIEW_-prefixed environment variable
    or a .env file entry.
    """

    template_dir: Path = Field(default=BASE_DIR / "templates", description="Root directory of template files")
    default_format: str = Field(default="html", description="Format negotiated when the caller supplies none")
    default_handler: str = Field(default="jinja", description="Handler used for inline templates without a type")
    default_layout: str | None = Field(default="layouts/application", description="Layout wrapping page routes")
    page_prefix: str = Field(default="pages", description="Template directory served by the page routes")
    default_charset: str = Field(default="utf-8", description="Charset of rendered HTML responses")
    relative_url_root: str | None = Field(default=None, description="Path prefix the app is mounted under")
    protected_assigns: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PROTECTED_ASSIGNS),
        description="Controller assigns never copied into a view context",
    )
    auto_reload_templates: bool = Field(default=True, description="Recompile templates when their source changes")
    log_level: str = Field(default="INFO", description="Root log level")
    log_render_events: bool = Field(default=True, description="Log every render_template span")

    model_config = SettingsConfigDict(
        env_file=Path(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        env_prefix="VIEW_",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )

    @field_validator("default_format", "default_handler", mode="after")
    @classmethod
    def validate_extension_like(cls, v: str) -> str:
        """Formats and handlers are matched case-insensitively against file extensions."""
        v = v.strip().lower().lstrip(".")
        if not v:
            raise ValueError("format and handler names must not be empty")
        return v

    @field_validator("relative_url_root", mode="after")
    @classmethod
    def validate_relative_url_root(cls, v: str | None) -> str | None:
        """Normalise to a leading slash and no trailing slash."""
        if v is None:
            return None
        v = v.strip().rstrip("/")
        if not v:
            return None
        if not v.startswith("/"):
            v = f"/{v}"
        return v

    @field_validator("log_level", mode="after")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"log_level must be a standard logging level, got {v!r}")
        return v


_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """Get the process-wide Settings instance.

    The instance is created on first use so the .env file is read once.
    Components receive it explicitly; use this only at the composition root
    (application start-up, FastAPI dependencies).

    Returns:
        Cached Settings instance
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
