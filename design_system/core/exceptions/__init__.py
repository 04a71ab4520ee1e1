"""
Exception Module

Structured exception hierarchy for the design system service. Exceptions
are organized by theme; every kind carries a code, suggestions, a
retryable flag and a status code.

Module Structure:
-----------------
- **base.py**: DesignSystemError base class + ConfigurationError, InternalError
- **data.py**: InvalidDataError, ResourceNotFoundError
- **validation.py**: ValidationError, ProtocolError
- **service.py**: ServiceUnavailableError, ServiceTimeoutError, ServiceError
- **handler.py**: normalization, severity, retryability and logging helpers

Usage:
------
```python
from design_system.core.exceptions import ResourceNotFoundError, normalize_error
```

Author: System Architect
Date: 2025-12-08
"""

from design_system.core.exceptions.base import ConfigurationError, DesignSystemError, InternalError
from design_system.core.exceptions.data import InvalidDataError, ResourceNotFoundError
from design_system.core.exceptions.handler import (
    error_response,
    get_severity,
    is_retryable,
    log_error,
    normalize_error,
    service_operation,
)
from design_system.core.exceptions.service import (
    ServiceError,
    ServiceTimeoutError,
    ServiceUnavailableError,
)
from design_system.core.exceptions.validation import ProtocolError, ValidationError

__all__ = [
    # Base
    "DesignSystemError",
    "ConfigurationError",
    "InternalError",
    # Data
    "InvalidDataError",
    "ResourceNotFoundError",
    # Validation
    "ValidationError",
    "ProtocolError",
    # Service
    "ServiceUnavailableError",
    "ServiceTimeoutError",
    "ServiceError",
    # Handling
    "error_response",
    "get_severity",
    "is_retryable",
    "log_error",
    "normalize_error",
    "service_operation",
]
