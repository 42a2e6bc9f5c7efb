"""
Journey API endpoints - journey list, per-visitor attribution and CSV export
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from loguru import logger

from common.exceptions import (
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    NothingToExportError,
    RecordStoreError,
    create_api_error,
    handle_external_service_error,
)
from services.journey_service.api.dependencies import get_project_id, get_view_key
from services.journey_service.api.v1.models import JourneyListResponse
from services.journey_service.models import AttributionReport, JourneyQuery, StatusFilter
from services.journey_service.services import (
    AttributionCalculator,
    ExportFormatter,
    JourneyAggregator,
    JourneyBuilder,
    QueryGenerationTracker,
)
from services.journey_service.services.dependencies import (
    get_attribution_calculator,
    get_export_formatter,
    get_journey_aggregator,
    get_journey_builder,
    get_query_tracker,
)

router = APIRouter()

RECORD_STORE = "record store"


@router.get("", response_model=JourneyListResponse)
async def list_journeys(
    project_id: str = Depends(get_project_id),
    view_key: str = Depends(get_view_key),
    search: str | None = Query(default=None, description="Lead email fragment or visitor ID"),
    date_range: str = Query(default="30d", description="Look-back window: 7d, 30d or 90d"),
    status_filter: StatusFilter = Query(default=StatusFilter.ALL, alias="status", description="Status filter"),
    aggregator: JourneyAggregator = Depends(get_journey_aggregator),
    tracker: QueryGenerationTracker = Depends(get_query_tracker),
):
    """Reconstruct the journeys matching a query, with stats over the unfiltered set."""
    query = JourneyQuery(
        project_id=project_id, search=search, date_range=date_range, status_filter=status_filter
    )
    try:
        result = await tracker.run_latest(view_key, lambda token: aggregator.run_query(query, token))
    except RecordStoreError as e:
        raise handle_external_service_error("fetching journeys", RECORD_STORE, e)

    if result is None:
        raise create_api_error("fetching journeys", status_code=HTTP_409_CONFLICT)

    return JourneyListResponse.from_result(result)


@router.get("/export")
async def export_journeys(
    project_id: str = Depends(get_project_id),
    search: str | None = Query(default=None, description="Lead email fragment or visitor ID"),
    date_range: str = Query(default="30d", description="Look-back window: 7d, 30d or 90d"),
    status_filter: StatusFilter = Query(default=StatusFilter.ALL, alias="status", description="Status filter"),
    aggregator: JourneyAggregator = Depends(get_journey_aggregator),
    formatter: ExportFormatter = Depends(get_export_formatter),
):
    """Download the journeys matching a query as CSV."""
    query = JourneyQuery(
        project_id=project_id, search=search, date_range=date_range, status_filter=status_filter
    )
    try:
        result = await aggregator.run_query(query)
        export = formatter.export(result.journeys)
    except RecordStoreError as e:
        raise handle_external_service_error("exporting journeys", RECORD_STORE, e)
    except NothingToExportError as e:
        raise create_api_error("exporting journeys", status_code=HTTP_404_NOT_FOUND, user_message=e.message)

    return Response(
        content=export.content,
        media_type=export.media_type,
        headers={"Content-Disposition": f"attachment; filename={export.filename}"},
    )


@router.get("/{visitor_id}/attribution", response_model=AttributionReport)
async def get_visitor_attribution(
    visitor_id: str,
    project_id: str = Depends(get_project_id),
    builder: JourneyBuilder = Depends(get_journey_builder),
    calculator: AttributionCalculator = Depends(get_attribution_calculator),
):
    """Attribute a visitor's revenue under the first-touch, last-touch, linear and time-decay models."""
    try:
        journey = await builder.build(project_id, visitor_id)
    except RecordStoreError as e:
        raise handle_external_service_error("fetching visitor journey", RECORD_STORE, e)

    if journey is None:
        logger.info(f"No journey for visitor {visitor_id} in project {project_id}")
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Journey not found")

    return calculator.calculate(journey)
