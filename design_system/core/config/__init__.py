"""
Configuration Module

Centralized, type-safe configuration for the design system service.

Components:
-----------
- **settings.py**: Pydantic-based configuration with environment variable loading
- **constants.py**: Enums, dataset file names, event names and timing constants

Usage:
------
```python
from design_system.core.config import get_settings
from design_system.core.config.constants import CircuitState

settings = get_settings()
threshold = settings.circuit_breaker.CB_FAILURE_THRESHOLD
```

Testing:
-------
```python
import os
from design_system.core.config import reload_settings

os.environ["DATA_PATH"] = "/tmp/dataset"
settings = reload_settings()
assert settings.data.DATA_PATH == "/tmp/dataset"
```

Author: System Architect
Date: 2025-12-05
"""

from design_system.core.config.constants import (
    COMPONENTS_FILE,
    DESIGN_TOKENS_FILE,
    GUIDELINES_FILE,
    HEADER_REQUEST_ID,
    RELOAD_DEBOUNCE_SECONDS,
    TOKEN_CATEGORIES,
    BreakerEvent,
    CircuitState,
    DataEvent,
    ErrorCode,
    Severity,
)
from design_system.core.config.settings import Settings, get_settings, reload_settings

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "reload_settings",
    # Enums
    "BreakerEvent",
    "CircuitState",
    "DataEvent",
    "ErrorCode",
    "Severity",
    # Dataset
    "COMPONENTS_FILE",
    "DESIGN_TOKENS_FILE",
    "GUIDELINES_FILE",
    "TOKEN_CATEGORIES",
    # Timing
    "RELOAD_DEBOUNCE_SECONDS",
    # HTTP headers
    "HEADER_REQUEST_ID",
]
