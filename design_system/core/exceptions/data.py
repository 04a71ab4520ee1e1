"""
Data Exceptions

Exceptions raised when the cached dataset is missing or malformed, or when
a named entity is absent from it.

Author: System Architect
Date: 2025-12-08
"""

from design_system.core.config.constants import ErrorCode
from design_system.core.exceptions.base import DesignSystemError


class InvalidDataError(DesignSystemError):
    """
    Raised when the cached dataset is missing or malformed.

    Common causes:
    - Query issued before the first successful load
    - Dataset file unreadable or not valid JSON
    """

    code = ErrorCode.INVALID_DATA
    default_status_code = 400


class ResourceNotFoundError(DesignSystemError):
    """
    Raised when a named entity is absent from the dataset.

    The message has the form ``<Resource> "<identifier>" not found`` and the
    suggestions usually list the identifiers that do exist.

    Example:
        raise ResourceNotFoundError(
            "Component",
            "Buton",
            suggestions=["Available components: Button, Card", "Check component name spelling"],
        )
    """

    code = ErrorCode.RESOURCE_NOT_FOUND
    default_status_code = 404

    def __init__(self, resource: str, identifier: str, within: str | None = None, **kwargs):
        context = {**(kwargs.pop("context", None) or {}), "resource": resource, "identifier": identifier}
        message = f'{resource} "{identifier}" not found'
        if within:
            message = f"{message} for {within}"
        super().__init__(message, context=context, **kwargs)
        self.resource = resource
        self.identifier = identifier
