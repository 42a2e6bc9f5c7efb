"""
Shared API Dependencies for Journey Service

FastAPI dependency functions shared by the journey endpoints.

Dependencies:
    - get_project_id: Extracts and validates the project id from HTTP headers
    - get_view_key: Identifies the dashboard view a query belongs to

Project Scope:
    Every record store query is scoped by the project id supplied by the
    caller. The service never infers or defaults it, so a request without a
    project id is rejected before any query runs.

Example:
    ```python
    from fastapi import Depends
    from services.journey_service.api.dependencies import get_project_id

    @router.get("/journeys")
    async def list_journeys(project_id: str = Depends(get_project_id)):
        # project_id is guaranteed to be a non-empty string
        pass
    ```
"""

from fastapi import Depends, Header, HTTPException
from loguru import logger

from services.journey_service.services.query_tracker import build_view_key


def get_project_id(
    project_id_header: str | None = Header(default=None, alias="X-Project-Id"),
) -> str:
    """
    Extract and validate the project ID from the X-Project-Id HTTP header.

    Args:
        project_id_header: The value of the X-Project-Id header, None if missing.

    Returns:
        str: The project ID stripped of whitespace.

    Raises:
        HTTPException: 400 Bad Request if the header is missing or blank.

    Note:
        The project is not checked for existence. An unknown project simply
        yields no journeys.
    """
    if project_id_header is None:
        logger.warning("Missing X-Project-Id header")
        raise HTTPException(status_code=400, detail="X-Project-Id header is required")

    project_id_value = project_id_header.strip()
    if not project_id_value:
        logger.warning("Empty X-Project-Id header")
        raise HTTPException(status_code=400, detail="X-Project-Id header cannot be empty")

    return project_id_value


def get_view_key(
    project_id: str = Depends(get_project_id),
    view_header: str | None = Header(default=None, alias="X-Dashboard-View"),
) -> str:
    """View key for stale query suppression: the project plus an optional client view id."""
    view = view_header.strip() if view_header else None
    return build_view_key(project_id, view or None)
