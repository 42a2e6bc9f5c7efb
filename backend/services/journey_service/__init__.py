"""
Journey Service Package

Customer journey reconstruction and multi-touch attribution service.

Package Structure:
    - main.py: FastAPI application entry point
    - api/: API endpoint definitions and routing
    - database/: Record store contract and its postgres and supabase clients
    - models/: Immutable domain models
    - services/: Visitor selection, journey building and aggregation,
      attribution, export and stale query suppression

Usage:
    ```python
    from services.journey_service import app

    # uvicorn services.journey_service:app --port 8004
    ```
"""

from services.journey_service.main import app

__all__ = ["app"]
