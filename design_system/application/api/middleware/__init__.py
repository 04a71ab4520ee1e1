"""
Middleware Module

- ErrorHandlingMiddleware: last-resort handler for unhandled exceptions
"""

from design_system.application.api.middleware.error_handler import ErrorHandlingMiddleware

__all__ = ["ErrorHandlingMiddleware"]
