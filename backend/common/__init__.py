"""
Common utilities and shared code for the customer journey backend.

Modules:
    - config: Environment-based settings (pydantic-settings)
    - database: Async SQLAlchemy engine and session management
    - exceptions: Domain exceptions and safe API error helpers
    - fastapi: FastAPI application factory with shared middleware
    - logging: Centralized logging configuration using loguru
    - models: SQLAlchemy ORM models for the events, leads and payments tables

Usage:
    ```python
    from common.config import get_settings
    from common.database import get_async_db_session
    from common.logging import setup_logging
    from common.exceptions import RecordStoreError
    ```
"""

__version__ = "0.1.0"
