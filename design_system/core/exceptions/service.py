"""
Service Exceptions

Exceptions raised by the circuit breaker around a guarded operation:
rejection while the circuit is open, timeouts and wrapped failures.

Author: System Architect
Date: 2025-12-08
"""

from design_system.core.config.constants import ErrorCode
from design_system.core.exceptions.base import DesignSystemError


class ServiceUnavailableError(DesignSystemError):
    """
    Raised when a breaker rejects a call (OPEN, or HALF_OPEN at capacity).

    Retryable: the caller should back off and try again later.
    """

    code = ErrorCode.SERVICE_UNAVAILABLE
    default_status_code = 503
    default_retryable = True
    default_suggestions = (
        "Try again in a few moments",
        "Check service configuration",
        "Verify data sources are accessible",
    )

    def __init__(self, service: str, reason: str | None = None, **kwargs):
        message = f"Service {service} is unavailable: {reason}" if reason else f"Service {service} is unavailable"
        context = {**(kwargs.pop("context", None) or {}), "service": service}
        super().__init__(message, context=context, **kwargs)
        self.service = service


class ServiceTimeoutError(DesignSystemError):
    """Raised when a guarded operation does not settle within the request timeout."""

    code = ErrorCode.SERVICE_TIMEOUT
    default_status_code = 408
    default_retryable = True
    default_suggestions = (
        "Try again with a simpler query",
        "Check network connectivity",
        "Contact support if the issue persists",
    )

    def __init__(self, operation: str, timeout: float, **kwargs):
        context = {**(kwargs.pop("context", None) or {}), "operation": operation, "timeout": timeout}
        super().__init__(f'Operation "{operation}" timed out after {timeout}s', context=context, **kwargs)
        self.operation = operation
        self.timeout = timeout


class ServiceError(DesignSystemError):
    """Wraps an unclassified failure raised inside a guarded operation."""

    code = ErrorCode.SERVICE_ERROR
    default_status_code = 500
