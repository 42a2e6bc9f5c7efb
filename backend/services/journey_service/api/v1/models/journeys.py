"""
Response models for journey service API endpoints.
"""

from typing import Optional

from pydantic import BaseModel

from services.journey_service.models import Journey, JourneyQueryResult, JourneyStats


class JourneyListResponse(BaseModel):
    """Journey list response model."""

    journeys: list[Journey]
    stats: JourneyStats
    is_empty: bool
    message: Optional[str] = None
    query_token: Optional[int] = None

    @classmethod
    def from_result(cls, result: JourneyQueryResult) -> "JourneyListResponse":
        return cls(
            journeys=result.journeys,
            stats=result.stats,
            is_empty=result.is_empty,
            message=result.message,
            query_token=result.query_token,
        )
