"""Custom exceptions for the view renderer with HTTP status codes."""

from collections.abc import Iterable
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error responses."""

    # Generic errors
    VIEW_ERROR = "VIEW_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # Template lookup
    MISSING_TEMPLATE = "MISSING_TEMPLATE"
    MISSING_HANDLER = "MISSING_HANDLER"

    # Render cycle
    DOUBLE_RENDER = "DOUBLE_RENDER"
    PAGE_UPDATE_UNAVAILABLE = "PAGE_UPDATE_UNAVAILABLE"

    # Action dispatch
    ACTION_NOT_FOUND = "ACTION_NOT_FOUND"

    # Configuration errors
    CONFIG_ERROR = "CONFIG_ERROR"


class ViewException(Exception):
    """Base exception for view rendering errors with HTTP status code support.

    All renderer exceptions inherit from this class so the host application
    can map them onto responses in one place.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.VIEW_ERROR,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        """Initialize view exception.

        Args:
            message: Human-readable error message
            code: Error code from ErrorCode enum
            status_code: HTTP status code (default 500)
            details: Additional error context/details
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class MissingTemplate(ViewException):
    """No template matched a lookup."""

    def __init__(
        self,
        name: str,
        prefix: str | None = None,
        searched: Iterable[str] = (),
        formats: Iterable[str] | None = None,
    ):
        self.name = name
        self.prefix = prefix
        self.searched = tuple(searched)
        self.formats = tuple(formats) if formats is not None else None

        location = f"{prefix}/{name}" if prefix and "/" not in name else name
        if self.formats:
            message = f"Missing template {location} with formats {', '.join(self.formats)}"
        else:
            message = f"Missing template {location}"

        super().__init__(
            message,
            code=ErrorCode.MISSING_TEMPLATE,
            status_code=500,
            details={
                "name": name,
                "prefix": prefix,
                "searched": list(self.searched),
                "formats": list(self.formats) if self.formats is not None else None,
            },
        )


class TemplateHandlerNotFound(ViewException):
    """No template handler is registered for an extension."""

    def __init__(self, extension: str, details: dict[str, Any] | None = None):
        self.extension = extension
        super().__init__(
            f"No template handler registered for {extension!r}",
            code=ErrorCode.MISSING_HANDLER,
            status_code=500,
            details={"extension": extension, **(details or {})},
        )


class DoubleRenderError(ViewException):
    """Render was called more than once for one response."""

    def __init__(
        self,
        message: str = "Render was called multiple times in this action. You may only render once per action.",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message,
            code=ErrorCode.DOUBLE_RENDER,
            status_code=500,
            details=details,
        )


class PageUpdateUnavailable(ViewException):
    """An update render was requested but no page updater is configured."""

    def __init__(self, message: str = "No page updater configured", details: dict[str, Any] | None = None):
        super().__init__(
            message,
            code=ErrorCode.PAGE_UPDATE_UNAVAILABLE,
            status_code=501,
            details=details,
        )


class ActionNotFound(ViewException):
    """The requested action does not exist and there is no fallback handler."""

    def __init__(self, action: str, details: dict[str, Any] | None = None):
        self.action = action
        super().__init__(
            f"The action '{action}' could not be found",
            code=ErrorCode.ACTION_NOT_FOUND,
            status_code=404,
            details={"action": action, **(details or {})},
        )


class ConfigurationException(ViewException):
    """Configuration errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONFIG_ERROR,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, status_code, details)
