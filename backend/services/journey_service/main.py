"""
Journey Service - FastAPI Application Entry Point

This module serves as the main entry point for the Journey Service, the
microservice that reconstructs customer journeys from tracking events, leads
and payments and attributes revenue to acquisition sources.

The service provides RESTful APIs for:
    - Journey lists with funnel stats (visitors, leads, customers, revenue)
    - Multi-touch revenue attribution for one visitor
    - CSV export of journey lists

Architecture:
    Every request is scoped by the X-Project-Id header. Journeys are rebuilt
    from the record store on each request and nothing is persisted. Journey
    list requests sharing a view key (project plus the optional
    X-Dashboard-View header) are tokenized so that a superseded request
    answers 409 instead of returning stale data.

Example:
    To run the service locally:
        ```bash
        uv run uvicorn services.journey_service:app --port 8004 --reload
        ```

Attributes:
    app (FastAPI): The FastAPI application instance configured with:
        - Service name: "journey-service"
        - API router: Includes all v1 endpoints
        - Root path: "/journey" for reverse proxy compatibility

See Also:
    - services.journey_service.api.v1.api: API router configuration
    - common.fastapi.create_fastapi_app: FastAPI app factory
"""

from common.fastapi import create_fastapi_app
from services.journey_service.api.v1.api import api_router

app = create_fastapi_app(
    service_name="journey-service",
    description="Customer journey reconstruction and multi-touch revenue attribution",
    api_router=api_router,
    root_path="/journey",
)
