"""
System Constants and Enumerations

This module defines system-wide constants and enumerations used across
the design system service.

Architectural Decision: Centralized constants for maintainability
- Single source of truth for magic numbers
- Type-safe enums for state management and event names
- Dataset file names live here so loader, watcher and CLI agree

Author: System Architect
Date: 2025-12-05
"""

from enum import Enum

# ============================================================================
# Circuit Breaker States
# ============================================================================


class CircuitState(str, Enum):
    """
    Circuit breaker states.

    CLOSED: Normal operation, calls admitted
    OPEN: Failing fast, calls rejected until the recovery deadline
    HALF_OPEN: Probing recovery, a limited number of calls admitted
    """

    CLOSED = "CLOSED"
    OPEN = "OPEN"
    HALF_OPEN = "HALF_OPEN"


# ============================================================================
# Error Codes and Severity
# ============================================================================


class ErrorCode(str, Enum):
    """Machine-readable codes for the closed set of error kinds."""

    INVALID_DATA = "INVALID_DATA"
    DATA_VALIDATION_FAILED = "DATA_VALIDATION_FAILED"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    SERVICE_TIMEOUT = "SERVICE_TIMEOUT"
    SERVICE_ERROR = "SERVICE_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    PROTOCOL_ERROR = "PROTOCOL_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class Severity(str, Enum):
    """
    Error severity, derived from the error code.

    Only used to pick a log level; it never changes retry behavior.
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# ============================================================================
# Observable Events
# ============================================================================


class BreakerEvent(str, Enum):
    """Events emitted by a circuit breaker."""

    INITIALIZED = "initialized"
    STATE_CHANGE = "stateChange"
    CALL_SUCCESS = "callSuccess"
    CALL_FAILURE = "callFailure"
    CALL_REJECTED = "callRejected"
    RESET = "reset"


class DataEvent(str, Enum):
    """Events emitted by the data manager."""

    DATA_LOADED = "dataLoaded"
    DATA_UPDATED = "dataUpdated"
    DATA_ERROR = "dataError"
    FILE_CHANGED = "fileChanged"
    FILE_ADDED = "fileAdded"
    FILE_REMOVED = "fileRemoved"
    WATCH_ERROR = "watchError"


# ============================================================================
# Dataset Files
# ============================================================================

DESIGN_TOKENS_FILE = "design-tokens.json"
COMPONENTS_FILE = "components.json"
GUIDELINES_FILE = "guidelines.json"

# Suffixes the watcher treats as data files (dotfiles are always ignored)
WATCHED_SUFFIXES = (".json", ".yaml", ".yml")

TOKEN_CATEGORIES = ("color", "typography", "spacing", "elevation", "motion")

# ============================================================================
# Timing
# ============================================================================

# Bursts of file events closer together than this are coalesced into one reload
RELOAD_DEBOUNCE_SECONDS = 0.1

# Number of identifiers listed in a token "not found" suggestion
MAX_SUGGESTED_TOKENS = 10

# ============================================================================
# HTTP
# ============================================================================

HEADER_REQUEST_ID = "X-Request-ID"

# ============================================================================
# Retry (caller side; the breaker itself never retries)
# ============================================================================

RETRY_BASE_DELAY = 0.1  # seconds
RETRY_MAX_DELAY = 2.0  # seconds
