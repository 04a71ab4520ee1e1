"""
Error Handling Middleware

Last line of defense for exceptions that escape route handlers and the
DesignSystemError exception handler. The client always receives the
normalized error envelope; the full exception is logged server-side.
"""

import traceback
from collections.abc import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from design_system.core.exceptions import InternalError, error_response
from design_system.core.logging.logger import get_logger

logger = get_logger(__name__)


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Catch unhandled exceptions and turn them into a 500 error envelope.

    Args:
        include_traceback: Add the stack trace to the error context in the
            response (development only)
    """

    def __init__(self, app, include_traceback: bool = False):
        super().__init__(app)
        self.include_traceback = include_traceback

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(
                f"Unhandled exception in request: {request.method} {request.url.path}",
                method=request.method,
                path=request.url.path,
                error_type=type(e).__name__,
                exc_info=True,
            )

            error = InternalError(
                "An unexpected error occurred while processing your request",
                cause=e,
                context={"error_type": type(e).__name__},
            )
            content = error_response(error)
            if self.include_traceback:
                content["error"]["traceback"] = traceback.format_exc()
            return JSONResponse(status_code=error.status_code, content=content)
