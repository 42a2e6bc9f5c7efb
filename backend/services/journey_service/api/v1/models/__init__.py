"""
API Models for Journey Service v1.
"""

from .journeys import JourneyListResponse

__all__ = ["JourneyListResponse"]
