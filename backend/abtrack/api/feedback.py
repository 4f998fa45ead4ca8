"""Feedback endpoints."""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response

from abtrack.api.deps import get_analytics, get_store
from abtrack.core.export import FEEDBACK_COLUMNS, feedback_rows, format_csv
from abtrack.core.recorder import record_feedback
from abtrack.core.window import resolve_window
from abtrack.schemas.feedback import FeedbackCreateRequest, FeedbackCreateResponse, FeedbackOut
from abtrack.services.analytics import AnalyticsService
from abtrack.services.store import EventStore
from abtrack.utils.exceptions import StorageError, ValidationError, storage_error, validation_error
from abtrack.utils.logger import logger
from abtrack.utils.serialization import utc_now

router = APIRouter(prefix="/api", tags=["feedback"])


@router.post("/feedback", response_model=FeedbackCreateResponse)
async def create_feedback(
    request: FeedbackCreateRequest,
    store: EventStore = Depends(get_store),
) -> FeedbackCreateResponse:
    """Submit feedback for a session."""
    logger.info(f"FEEDBACK: {request.model_dump_json(exclude_none=True)}")
    try:
        record_feedback(store, request.sessionId, rating=request.rating, text=request.text)
        return FeedbackCreateResponse(ok=True)
    except ValidationError as e:
        raise validation_error(str(e))
    except StorageError as e:
        raise storage_error(e, "record_feedback")
    except Exception as e:
        logger.error(f"POST /api/feedback failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to record feedback: {str(e)}",
        )


def _load_feedback(analytics: AnalyticsService, from_: Optional[str], to: Optional[str]) -> List[dict]:
    try:
        return analytics.raw_feedback(resolve_window(from_, to))
    except StorageError as e:
        raise storage_error(e, "list_feedback")


@router.get("/feedback", response_model=List[FeedbackOut])
async def list_feedback(
    from_: Optional[str] = Query(None, alias="from", description="Inclusive ISO-8601 lower bound"),
    to: Optional[str] = Query(None, description="Inclusive ISO-8601 upper bound"),
    analytics: AnalyticsService = Depends(get_analytics),
) -> List[FeedbackOut]:
    """Most recent feedback, newest first, at most 200 entries."""
    return [FeedbackOut.from_record(row) for row in _load_feedback(analytics, from_, to)]


@router.get("/export/feedback")
async def export_feedback(
    from_: Optional[str] = Query(None, alias="from"),
    to: Optional[str] = Query(None),
    analytics: AnalyticsService = Depends(get_analytics),
) -> Response:
    """Same rows as GET /api/feedback, as a CSV download."""
    rows = _load_feedback(analytics, from_, to)
    filename = f"feedback_{int(utc_now().timestamp() * 1000)}.csv"
    return Response(
        content=format_csv(feedback_rows(rows), FEEDBACK_COLUMNS),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
