"""Event ingestion and raw event endpoints."""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response

from abtrack.api.deps import get_analytics, get_store
from abtrack.core.export import EVENT_COLUMNS, event_rows, format_csv
from abtrack.core.recorder import record_event
from abtrack.core.window import resolve_window
from abtrack.schemas.event import EventCreateRequest, EventCreateResponse, EventOut
from abtrack.services.analytics import AnalyticsService
from abtrack.services.store import EventStore
from abtrack.utils.exceptions import StorageError, ValidationError, storage_error, validation_error
from abtrack.utils.logger import logger
from abtrack.utils.serialization import utc_now

router = APIRouter(prefix="/api", tags=["events"])


@router.post("/event", response_model=EventCreateResponse)
async def create_event(
    request: EventCreateRequest,
    store: EventStore = Depends(get_store),
) -> EventCreateResponse:
    """
    Record a single interaction event.

    Args:
        request: Event body; sessionId and name are required
        store: Event store

    Returns:
        The generated event id
    """
    logger.info(f"EVENT: {request.model_dump_json(exclude_none=True)}")
    try:
        event_id = record_event(
            store,
            request.sessionId,
            request.name,
            variant=request.variant,
            meta=request.meta,
            x=request.x,
            y=request.y,
        )
        return EventCreateResponse(ok=True, id=event_id)
    except ValidationError as e:
        raise validation_error(str(e))
    except StorageError as e:
        raise storage_error(e, "record_event")
    except Exception as e:
        logger.error(f"POST /api/event failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to record event: {str(e)}",
        )


def _load_events(
    analytics: AnalyticsService,
    from_: Optional[str],
    to: Optional[str],
    name: Optional[str],
    variant: Optional[str],
    limit: Optional[str],
) -> List[dict]:
    window = resolve_window(from_, to)
    try:
        return analytics.raw_events(window, name=name, variant=variant, limit=limit)
    except StorageError as e:
        raise storage_error(e, "list_events")


@router.get("/events", response_model=List[EventOut])
async def list_events(
    from_: Optional[str] = Query(None, alias="from", description="Inclusive ISO-8601 lower bound"),
    to: Optional[str] = Query(None, description="Inclusive ISO-8601 upper bound"),
    name: Optional[str] = Query(None, description="Only events with this name"),
    variant: Optional[str] = Query(None, description="Only events from this variant"),
    limit: Optional[str] = Query(None, description="Max rows (default 5000, capped at 20000)"),
    analytics: AnalyticsService = Depends(get_analytics),
) -> List[EventOut]:
    """
    Raw events for export, newest first.

    Note the name filter is ``name`` here while /api/stats uses ``event``.
    """
    rows = _load_events(analytics, from_, to, name, variant, limit)
    return [EventOut.from_record(row) for row in rows]


@router.get("/export/events")
async def export_events(
    from_: Optional[str] = Query(None, alias="from"),
    to: Optional[str] = Query(None),
    name: Optional[str] = Query(None),
    variant: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    analytics: AnalyticsService = Depends(get_analytics),
) -> Response:
    """Same rows as /api/events, as a CSV download."""
    rows = _load_events(analytics, from_, to, name, variant, limit)
    filename = f"events_{int(utc_now().timestamp() * 1000)}.csv"
    return Response(
        content=format_csv(event_rows(rows), EVENT_COLUMNS),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
