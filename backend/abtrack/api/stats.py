"""Aggregate statistics and heatmap endpoints."""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query

from abtrack.api.deps import get_analytics
from abtrack.core.window import resolve_window
from abtrack.schemas.event import HeatmapPoint
from abtrack.schemas.stats import StatsResponse
from abtrack.services.analytics import AnalyticsService
from abtrack.utils.exceptions import StorageError, storage_error

router = APIRouter(prefix="/api", tags=["stats"])


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    from_: Optional[str] = Query(None, alias="from", description="Inclusive ISO-8601 lower bound"),
    to: Optional[str] = Query(None, description="Inclusive ISO-8601 upper bound"),
    event: Optional[str] = Query(None, description="Restrict eventsByName to one event name"),
    analytics: AnalyticsService = Depends(get_analytics),
) -> StatsResponse:
    """
    Events by name plus sessions and conversions by variant.

    Either all three views are returned or the request fails.
    """
    try:
        result = analytics.compute_views(resolve_window(from_, to), event_name=event)
    except StorageError as e:
        raise storage_error(e, "compute_stats")
    return StatsResponse.from_result(result)


@router.get("/heatmap", response_model=List[HeatmapPoint])
async def get_heatmap(
    from_: Optional[str] = Query(None, alias="from", description="Inclusive ISO-8601 lower bound"),
    to: Optional[str] = Query(None, description="Inclusive ISO-8601 upper bound"),
    analytics: AnalyticsService = Depends(get_analytics),
) -> List[HeatmapPoint]:
    """The 2000 most recent positioned clicks in the window."""
    try:
        points = analytics.heatmap_points(resolve_window(from_, to))
    except StorageError as e:
        raise storage_error(e, "heatmap")
    return [HeatmapPoint(**point) for point in points]
