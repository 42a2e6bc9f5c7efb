from fastapi import APIRouter

from services.journey_service.api.v1.endpoints import journeys

api_router = APIRouter()

api_router.include_router(journeys.router, prefix="/journeys", tags=["Journeys"])
