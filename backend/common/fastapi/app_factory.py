"""
FastAPI application factory for the journey service.

Builds a FastAPI application with the configuration, middleware and error
handling shared by every deployment of the service.

Features:
    - Logging setup through common.logging
    - CORS configured from settings (permissive local origins outside production)
    - Request timing middleware
    - Handlers turning domain errors into safe HTTP responses
    - Health check and root endpoints

Middleware:
    - CORS
    - Request Timing: adds an X-Process-Time header and logs each request

Exception Handlers:
    - RecordStoreError: 503 with a generic "Unable to connect" message
    - NothingToExportError: 404 with the error message
    - Exception: 500 with a generic message, full traceback logged

Endpoints:
    - GET /: Service information
    - GET /health: Health check including the configured record store backend

Usage:
    ```python
    from common.fastapi import create_fastapi_app
    from services.journey_service.api.v1.api import api_router

    app = create_fastapi_app(
        service_name="journey-service",
        description="Customer journey reconstruction and attribution",
        api_router=api_router,
    )
    ```
"""

from collections.abc import Callable
import time
from typing import Any

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from loguru import logger

from common.config import BaseServiceSettings, get_settings
from common.exceptions import (
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_503_SERVICE_UNAVAILABLE,
    NothingToExportError,
    RecordStoreError,
)
from common.logging import setup_logging

DEV_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain exceptions that escape a route to safe JSON responses."""

    @app.exception_handler(RecordStoreError)
    async def record_store_error_handler(request: Request, exc: RecordStoreError) -> JSONResponse:
        logger.error(f"Record store failure in {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Unable to connect to record store. Please try again later."},
        )

    @app.exception_handler(NothingToExportError)
    async def nothing_to_export_handler(request: Request, exc: NothingToExportError) -> JSONResponse:
        logger.info(f"{request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=HTTP_404_NOT_FOUND, content={"detail": exc.message})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            f"Unhandled exception in {request.method} {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "An error occurred while processing your request. Please try again later."
            },
        )


def create_fastapi_app(
    service_name: str,
    description: str,
    api_router: APIRouter | None = None,
    additional_setup: Callable[[FastAPI, BaseServiceSettings], None] | None = None,
    root_path: str = "",
    log_to_files: bool = True,
) -> FastAPI:
    """
    Create a FastAPI application with standardized configuration and middleware.

    Args:
        service_name: Name of the service, used to load settings and name log files.
        description: Description shown in the OpenAPI documentation.
        api_router: Optional router, included under API_V1_STR (default "/api/v1").
        additional_setup: Optional callback run last with ``(app, settings)``.
        root_path: Reverse proxy prefix. Ignored in the DEV environment.
        log_to_files: Whether logging also writes rotating log files.

    Returns:
        Configured FastAPI application.
    """
    setup_logging(service_name, log_to_files=log_to_files)
    settings = get_settings(service_name)

    # Not behind a reverse proxy in development
    effective_root_path = root_path if settings.ENVIRONMENT != "DEV" else ""

    app = FastAPI(
        title=settings.SERVICE_NAME,
        version=settings.SERVICE_VERSION,
        description=description,
        openapi_url="/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        root_path=effective_root_path,
    )

    # allow_credentials=True is incompatible with allow_origins=["*"]
    allowed_origins = settings.CORS_ORIGINS if settings.ENVIRONMENT == "PROD" else DEV_CORS_ORIGINS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def add_process_time_header(
        request: Request, call_next: Callable[[Request], Any]
    ) -> Response:
        """Add process time header to responses."""
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)
        logger.info(
            f"{request.method} {request.url.path} - {response.status_code} - {process_time:.3f}s"
        )
        return response

    if api_router:
        app.include_router(api_router, prefix=settings.API_V1_STR)

    @app.get("/health")
    async def health_check() -> dict[str, Any]:
        """Health check endpoint."""
        return {
            "service": settings.SERVICE_NAME,
            "version": settings.SERVICE_VERSION,
            "status": "healthy",
            "record_store": getattr(settings, "RECORD_STORE_BACKEND", None),
            "timestamp": time.time(),
        }

    @app.get("/")
    async def root() -> dict[str, Any]:
        """Root endpoint."""
        return {
            "service": settings.SERVICE_NAME,
            "version": settings.SERVICE_VERSION,
            "message": f"{settings.SERVICE_NAME} is running",
            "docs": "/docs",
            "health": "/health",
        }

    register_exception_handlers(app)

    if additional_setup:
        additional_setup(app, settings)

    return app
