"""
Common FastAPI utilities.

Main Components:
    - app_factory: application factory with CORS, timing middleware, domain
      exception handlers and health endpoints

Usage:
    ```python
    from common.fastapi import create_fastapi_app

    app = create_fastapi_app(
        service_name="journey-service",
        description="Customer journey reconstruction and attribution",
        api_router=api_router,
    )
    ```
"""
from .app_factory import create_fastapi_app, register_exception_handlers

__all__ = ["create_fastapi_app", "register_exception_handlers"]
