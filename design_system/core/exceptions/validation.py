"""
Validation Exceptions

All exceptions related to caller input and malformed requests at the
protocol boundary.

Author: System Architect
Date: 2025-12-08
"""

from design_system.core.config.constants import ErrorCode
from design_system.core.exceptions.base import DesignSystemError


class ValidationError(DesignSystemError):
    """
    Raised when caller input fails shape or type checks.

    Common causes:
    - Empty or whitespace-only search query
    - Missing identifier argument
    - Unknown token category
    """

    code = ErrorCode.DATA_VALIDATION_FAILED
    default_status_code = 400


class ProtocolError(DesignSystemError):
    """Raised for a malformed request at the tool boundary (unknown tool, bad arguments)."""

    code = ErrorCode.PROTOCOL_ERROR
    default_status_code = 400
    default_suggestions = (
        "Check client compatibility",
        "Verify request format",
        "List available tools with GET /tools",
    )

    def __init__(self, message: str, **kwargs):
        super().__init__(f"Protocol error: {message}", **kwargs)
