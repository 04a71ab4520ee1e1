"""
Query Facades

Read-only services over the cached dataset, each guarded by its own
circuit breaker.
"""

from design_system.application.services.base import BaseService
from design_system.application.services.component_service import ComponentService
from design_system.application.services.design_token_service import DesignTokenService
from design_system.application.services.guidelines_service import GuidelinesService

__all__ = [
    "BaseService",
    "ComponentService",
    "DesignTokenService",
    "GuidelinesService",
]
