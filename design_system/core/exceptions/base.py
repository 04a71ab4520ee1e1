"""
Base Exception Class

This module contains the base exception class that all other exceptions
inherit from, plus the two system-level kinds (configuration and internal).
All specialized exceptions are in their respective themed modules.

Author: System Architect
Date: 2025-12-08
"""

from datetime import datetime, timezone
from typing import Any

from design_system.core.config.constants import ErrorCode


class DesignSystemError(Exception):
    """
    Base exception for all design system errors.

    Every error that leaves the core is an instance of this class, so callers
    can rely on a stable machine-readable code, a retryable flag and a status
    code without inspecting the concrete type.

    Attributes:
        code: Machine-readable ErrorCode
        message: Human readable message
        suggestions: Ordered list of actionable hints for the caller
        context: Structured context (component, method, arbitrary key-values)
        cause: Wrapped underlying exception, if any
        retryable: Whether the caller may retry the same request
        status_code: Status used when the error is surfaced over HTTP
        timestamp: When the error was created (UTC)

    Example:
        raise ResourceNotFoundError(
            "Design token",
            "primary-blu",
            suggestions=["Check token name spelling"],
            context={"service": "design-tokens"},
        )
    """

    code: ErrorCode = ErrorCode.INTERNAL_ERROR
    default_status_code: int = 500
    default_retryable: bool = False
    default_suggestions: tuple[str, ...] = ()

    def __init__(
        self,
        message: str,
        *,
        suggestions: list[str] | None = None,
        context: dict[str, Any] | None = None,
        cause: BaseException | None = None,
        retryable: bool | None = None,
        status_code: int | None = None,
        code: ErrorCode | None = None,
    ):
        self.message = message
        if code is not None:
            self.code = code
        self.suggestions = list(suggestions) if suggestions is not None else list(self.default_suggestions)
        self.context = (context or {}).copy()  # Copy to prevent external modification
        self.cause = cause
        self.retryable = self.default_retryable if retryable is None else retryable
        self.status_code = self.default_status_code if status_code is None else status_code
        self.timestamp = datetime.now(timezone.utc)
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to the normalized error payload.

        Returns:
            Dict with code, message, suggestions, retryable and ISO timestamp
        """
        return {
            "code": self.code.value,
            "message": self.message,
            "suggestions": list(self.suggestions),
            "retryable": self.retryable,
            "timestamp": self.timestamp.isoformat().replace("+00:00", "Z"),
        }

    def user_message(self) -> str:
        """Message followed by a bulleted suggestion list, when there is one."""
        if not self.suggestions:
            return self.message
        bullets = "\n".join(f"• {s}" for s in self.suggestions)
        return f"{self.message}\n\nSuggestions:\n{bullets}"

    def with_suggestion(self, suggestion: str) -> "DesignSystemError":
        """
        Add a suggestion to help users fix the error.

        Args:
            suggestion: Helpful suggestion for resolving the error

        Returns:
            Self (for method chaining)
        """
        self.suggestions.append(suggestion)
        return self

    def with_context(self, **context) -> "DesignSystemError":
        """
        Add additional context to the error.

        Args:
            **context: Key-value pairs to add to context

        Returns:
            Self (for method chaining)
        """
        self.context.update(context)
        return self

    def __repr__(self) -> str:
        """
        Return detailed string representation for debugging.

        Example:
            >>> repr(ResourceNotFoundError("Component", "Buton"))
            "ResourceNotFoundError(code='RESOURCE_NOT_FOUND', message='Component \\"Buton\\" not found', ...)"
        """
        context_str = f", context={self.context}" if self.context else ""
        return (
            f"{self.__class__.__name__}(code='{self.code.value}', message='{self.message}', "
            f"retryable={self.retryable}{context_str})"
        )

    @classmethod
    def from_exception(
        cls,
        exc: BaseException,
        message: str | None = None,
        **context
    ) -> "DesignSystemError":
        """
        Create an error of this kind from another exception.

        Useful for wrapping third-party exceptions with additional context.

        Args:
            exc: Original exception to wrap
            message: Custom message (defaults to original exception message)
            **context: Additional context to include

        Returns:
            New instance of this class wrapping ``exc``

        Example:
            >>> try:
            ...     payload = orjson.loads(raw)
            ... except orjson.JSONDecodeError as e:
            ...     raise InvalidDataError.from_exception(e, file="components.json")
        """
        error_context = {
            "original_error": exc.__class__.__name__,
            **context
        }
        return cls(message or str(exc) or exc.__class__.__name__, context=error_context, cause=exc)


class ConfigurationError(DesignSystemError):
    """Raised when configuration is invalid or missing."""

    code = ErrorCode.CONFIGURATION_ERROR
    default_status_code = 500
    default_suggestions = (
        "Check environment variables",
        "Verify configuration file syntax",
        "Ensure all required settings are provided",
    )

    def __init__(self, setting: str, reason: str, **kwargs):
        context = {**(kwargs.pop("context", None) or {}), "setting": setting}
        super().__init__(f'Configuration error for "{setting}": {reason}', context=context, **kwargs)
        self.setting = setting


class InternalError(DesignSystemError):
    """Catch-all for failures that could not be classified."""

    code = ErrorCode.INTERNAL_ERROR
    default_status_code = 500
