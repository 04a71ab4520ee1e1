"""
Error Handling Utilities

Normalization, classification and logging of errors at component
boundaries. Nothing unclassified crosses a boundary: anything that is not
already a DesignSystemError is turned into an InternalError here.

Author: System Architect
Date: 2025-12-08
"""

import functools
import time
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from design_system.core.config.constants import ErrorCode, Severity
from design_system.core.exceptions.base import DesignSystemError, InternalError
from design_system.core.logging.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

_SEVERITY_BY_CODE: dict[ErrorCode, Severity] = {
    ErrorCode.RESOURCE_NOT_FOUND: Severity.LOW,
    ErrorCode.DATA_VALIDATION_FAILED: Severity.MEDIUM,
    ErrorCode.PROTOCOL_ERROR: Severity.MEDIUM,
    ErrorCode.SERVICE_UNAVAILABLE: Severity.HIGH,
    ErrorCode.SERVICE_TIMEOUT: Severity.HIGH,
    ErrorCode.CONFIGURATION_ERROR: Severity.CRITICAL,
    ErrorCode.INTERNAL_ERROR: Severity.CRITICAL,
}


def normalize_error(exc: BaseException, **context) -> DesignSystemError:
    """
    Return ``exc`` as a DesignSystemError.

    Application errors pass through unchanged (context is merged in); any
    other exception becomes an InternalError that keeps the original as
    its cause.
    """
    if isinstance(exc, DesignSystemError):
        if context:
            exc.with_context(**{k: v for k, v in context.items() if k not in exc.context})
        return exc
    return InternalError.from_exception(exc, **context)


def get_severity(error: DesignSystemError) -> Severity:
    """Severity derived from the error code (medium when unlisted)."""
    return _SEVERITY_BY_CODE.get(error.code, Severity.MEDIUM)


def is_retryable(exc: BaseException) -> bool:
    """Only application errors flagged retryable may be retried."""
    return isinstance(exc, DesignSystemError) and exc.retryable


def log_error(error: DesignSystemError, log=None, **context) -> None:
    """
    Log an error at the level implied by its severity.

    low -> info, medium -> warning, high/critical -> error
    """
    log = log or logger
    severity = get_severity(error)
    fields = {
        **error.context,
        **context,
        "error_code": error.code.value,
        "retryable": error.retryable,
        "severity": severity.value,
    }

    if severity is Severity.LOW:
        log.info(f"Low severity error: {error.message}", **fields)
    elif severity is Severity.MEDIUM:
        log.warning(f"Medium severity error: {error.message}", **fields)
    else:
        log.error(
            f"{severity.value.capitalize()} severity error: {error.message}",
            exc_info=error.cause if error.cause is not None else None,
            **fields,
        )


def error_response(error: DesignSystemError) -> dict[str, Any]:
    """Failure envelope returned at the protocol boundary."""
    return {"success": False, "error": error.to_dict()}


def service_operation(service: str) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """
    Wrap an async facade method with entry/exit logging and error normalization.

    Usage:
        class ComponentService(BaseService):
            @service_operation("components")
            async def get_component(self, name: str) -> Component:
                ...

    Any exception escaping the wrapped coroutine is normalized, logged at
    its severity level and re-raised as a DesignSystemError.
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        method = func.__name__

        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            start = time.perf_counter()
            logger.debug("Service call started", service=service, method=method)
            try:
                result = await func(*args, **kwargs)
            except Exception as exc:
                duration_ms = round((time.perf_counter() - start) * 1000, 2)
                error = normalize_error(exc, service=service, method=method)
                log_error(error, duration_ms=duration_ms)
                if error is exc:
                    raise
                raise error from exc

            logger.debug(
                "Service call completed",
                service=service,
                method=method,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            return result

        return wrapper

    return decorator
