"""
Database Dependency Injection for Journey Service

This module provides the FastAPI dependency that injects the record store into
API endpoints. The store is cached so a single instance (and a single
connection pool) is reused across all requests.

Dependencies:
    - get_record_store: Provides the configured, timeout-guarded record store

Example:
    ```python
    @router.get("/journeys")
    async def list_journeys(store: RecordStore = Depends(get_record_store)):
        ...
    ```
"""

from functools import lru_cache

from loguru import logger

from common.config import get_settings
from services.journey_service.database.base import SERVICE_NAME, RecordStore
from services.journey_service.database.record_store import PostgresRecordStore, TimedRecordStore


def create_record_store(service_name: str = SERVICE_NAME) -> RecordStore:
    """
    Build the record store selected by RECORD_STORE_BACKEND.

    Returns:
        A TimedRecordStore wrapping either the postgres or the supabase store,
        using STORE_QUERY_TIMEOUT_SECONDS as the per-query timeout.
    """
    settings = get_settings(service_name)
    backend = settings.RECORD_STORE_BACKEND
    timeout = settings.STORE_QUERY_TIMEOUT_SECONDS

    if backend == "supabase":
        from services.journey_service.database.supabase_store import SupabaseRecordStore

        inner: RecordStore = SupabaseRecordStore(
            project_url=settings.SUPABASE_URL,
            service_role_key=settings.SUPABASE_SERVICE_ROLE_KEY,
            timeout_seconds=timeout,
        )
    else:
        inner = PostgresRecordStore()

    logger.info(f"Using {backend} record store with {timeout}s query timeout")
    return TimedRecordStore(inner, timeout_seconds=timeout)


@lru_cache(maxsize=1)
def get_record_store() -> RecordStore:
    """Get a cached singleton instance of the configured record store."""
    return create_record_store()
