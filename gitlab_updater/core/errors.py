"""Custom exceptions for the GitLab updater.

Provides user-friendly error messages and structured error handling.
"""

from typing import Optional, Any


class UpdaterError(Exception):
    """Base exception for all updater errors.

    Provides:
    - User-friendly message
    - Technical details for debugging
    - Suggested fixes when applicable
    """

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        suggestion: Optional[str] = None,
        cause: Optional[Exception] = None
    ):
        self.message = message
        self.details = details
        self.suggestion = suggestion
        self.cause = cause
        super().__init__(message)

    def format_user_friendly(self) -> str:
        """Format error for display to user."""
        parts = [f"❌ {self.message}"]

        if self.details:
            parts.append(f"   Details: {self.details}")

        if self.suggestion:
            parts.append(f"   💡 Try: {self.suggestion}")

        return "\n".join(parts)

    def __str__(self) -> str:
        return self.format_user_friendly()


class ConfigError(UpdaterError):
    """Configuration-related errors."""

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        suggestion = kwargs.pop("suggestion", None)
        if not suggestion and config_key:
            suggestion = f"Set the {config_key} environment variable or add it to .env"
        super().__init__(message, suggestion=suggestion, **kwargs)
        self.config_key = config_key


class APIError(UpdaterError):
    """GitLab API errors: transport failures, bad statuses, bad payloads."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
        **kwargs
    ):
        suggestion = kwargs.pop("suggestion", None)
        if not suggestion:
            if status_code == 401:
                suggestion = "Check the access token is valid and has not expired"
            elif status_code == 403:
                suggestion = "The access token needs the 'api' scope and at least reporter access"
            elif status_code == 404:
                suggestion = "Check the GitLab URL and the repo path (group/project)"

        details = kwargs.pop("details", None)
        if not details and url:
            details = f"URL: {url}"

        super().__init__(message, details=details, suggestion=suggestion, **kwargs)
        self.status_code = status_code
        self.url = url


class CapabilityError(UpdaterError):
    """Errors related to capabilities."""

    def __init__(
        self,
        message: str,
        capability_name: Optional[str] = None,
        operation: Optional[str] = None,
        **kwargs
    ):
        details = kwargs.pop("details", None)
        if not details:
            parts = []
            if capability_name:
                parts.append(f"Capability: {capability_name}")
            if operation:
                parts.append(f"Operation: {operation}")
            if parts:
                details = ", ".join(parts)

        super().__init__(message, details=details, **kwargs)
        self.capability_name = capability_name
        self.operation = operation


class ValidationError(UpdaterError):
    """Input validation errors."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs
    ):
        details = kwargs.pop("details", None)
        if not details and field:
            details = f"Field: {field}"
            if value is not None:
                details += f", Value: {repr(value)[:50]}"

        super().__init__(message, details=details, **kwargs)
        self.field = field
        self.value = value


class RelocationError(UpdaterError):
    """Errors while moving an extracted archive to its slug directory."""

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        slug: Optional[str] = None,
        **kwargs
    ):
        details = kwargs.pop("details", None)
        if not details:
            parts = []
            if source:
                parts.append(f"Source: {source}")
            if slug:
                parts.append(f"Slug: {slug}")
            if parts:
                details = ", ".join(parts)

        super().__init__(message, details=details, **kwargs)
        self.source = source
        self.slug = slug


class InstallError(UpdaterError):
    """Errors while installing a pending update."""

    def __init__(
        self,
        message: str,
        extension_name: Optional[str] = None,
        version: Optional[str] = None,
        **kwargs
    ):
        details = kwargs.pop("details", None)
        if not details:
            parts = []
            if extension_name:
                parts.append(f"Extension: {extension_name}")
            if version:
                parts.append(f"Version: {version}")
            if parts:
                details = ", ".join(parts)

        super().__init__(message, details=details, **kwargs)
        self.extension_name = extension_name
        self.version = version


def format_exception_chain(error: Exception, max_depth: int = 5) -> str:
    """Format an exception chain for display.

    Handles nested exceptions and provides clean output.
    """
    lines = []
    current = error
    depth = 0

    while current and depth < max_depth:
        if isinstance(current, UpdaterError):
            lines.append(current.format_user_friendly())
        else:
            lines.append(f"❌ {type(current).__name__}: {current}")

        current = getattr(current, "__cause__", None) or getattr(current, "cause", None)
        depth += 1

        if current:
            lines.append("   Caused by:")

    return "\n".join(lines)
