#!/usr/bin/env python3
"""
FastAPI Application Entry Point

Configures the HTTP surface of the design system service: lifespan
(container assembly, initial data load, shutdown), middleware, exception
handlers and routes.

Author: System Architect
Date: 2025-12-09
"""

import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from design_system.application.api.middleware.error_handler import ErrorHandlingMiddleware
from design_system.application.api.routes.admin import router as admin_router
from design_system.application.api.routes.health import router as health_router
from design_system.application.api.routes.tools import router as tools_router
from design_system.application.container import ServiceContainer
from design_system.core.config.constants import HEADER_REQUEST_ID
from design_system.core.config.settings import Settings, get_settings
from design_system.core.exceptions import ConfigurationError, DesignSystemError, error_response, log_error
from design_system.core.logging.logger import clear_request_id, get_logger, set_request_id, setup_logging

logger = get_logger(__name__)


def create_app(settings: Settings | None = None, container: ServiceContainer | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to use (defaults to the global instance)
        container: Pre-built container (tests); built from settings otherwise

    Returns:
        FastAPI: Configured application instance
    """
    settings = settings or get_settings()

    # ========================================================================
    # Application Lifespan
    # ========================================================================

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(log_level=settings.logging.LOG_LEVEL, log_format=settings.logging.LOG_FORMAT)

        logger.info(
            "Starting design system service",
            environment=settings.app.ENVIRONMENT,
            version=settings.app.APP_VERSION,
            data_path=settings.data.DATA_PATH,
        )

        services = container or ServiceContainer.from_settings(settings)
        result = await services.initialize()
        if not result.success:
            await services.shutdown()
            raise ConfigurationError(
                "DATA_PATH",
                f"initial data load failed: {'; '.join(result.errors)}",
                context={"data_path": str(services.data_manager.config.data_path)},
            )

        app.state.settings = settings
        app.state.container = services
        logger.info("Application startup complete", **result.data.counts())

        try:
            yield
        finally:
            logger.info("Shutting down application")
            await services.shutdown()
            app.state.container = None
            logger.info("Application shutdown complete")

    app = FastAPI(
        title=settings.app.APP_NAME,
        version=settings.app.APP_VERSION,
        description="Design tokens, component specifications and usage guidelines behind circuit breakers",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.container = None

    # ========================================================================
    # Middleware
    # ========================================================================

    app.add_middleware(
        ErrorHandlingMiddleware,
        include_traceback=(settings.app.ENVIRONMENT == "development"),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.app.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[HEADER_REQUEST_ID],
    )

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        """Bind a request ID to every log entry and echo it in the response."""
        request_id = request.headers.get(HEADER_REQUEST_ID) or str(uuid.uuid4())
        set_request_id(request_id)
        try:
            response = await call_next(request)
            response.headers[HEADER_REQUEST_ID] = request_id
            return response
        finally:
            clear_request_id()

    # ========================================================================
    # Exception Handlers
    # ========================================================================

    @app.exception_handler(DesignSystemError)
    async def design_system_error_handler(request: Request, exc: DesignSystemError):
        log_error(exc, path=request.url.path)
        return JSONResponse(status_code=exc.status_code, content=error_response(exc))

    # ========================================================================
    # Routes
    # ========================================================================

    base_path = settings.app.API_BASE_PATH
    app.include_router(health_router, prefix=base_path)
    app.include_router(tools_router, prefix=base_path)
    app.include_router(admin_router, prefix=base_path)

    @app.get("/", tags=["Root"])
    async def root():
        return {
            "service": settings.app.APP_NAME,
            "version": settings.app.APP_VERSION,
            "docs": "/docs",
            "health": f"{base_path}/health",
            "tools": f"{base_path}/tools",
        }

    return app


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run(
        create_app(_settings),
        host=_settings.app.API_HOST,
        port=_settings.app.API_PORT,
        log_level=_settings.logging.LOG_LEVEL.lower(),
    )
