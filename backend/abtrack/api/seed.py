"""Demo data seeding endpoint. Not available in production."""
from fastapi import APIRouter, Depends, Query

from abtrack.api.deps import get_store
from abtrack.config import settings
from abtrack.constants import SEED_DEFAULT_COUNT
from abtrack.core.aggregation import clamp_limit
from abtrack.schemas.stats import SeedResponse
from abtrack.services.seed import generate_seed_events
from abtrack.services.store import EventStore
from abtrack.utils.exceptions import StorageError, not_found_error, storage_error
from abtrack.utils.logger import logger

router = APIRouter(prefix="/api", tags=["seed"])

# Upper bound on sessions generated per request
SEED_MAX_COUNT = 5000


@router.post("/seed", response_model=SeedResponse)
async def seed(
    count: str = Query(str(SEED_DEFAULT_COUNT), description="Number of synthetic sessions"),
    store: EventStore = Depends(get_store),
) -> SeedResponse:
    """Bulk-insert synthetic sessions with clicks and conversions."""
    if settings.is_production:
        raise not_found_error("Route", "/api/seed")

    sessions = clamp_limit(count, SEED_DEFAULT_COUNT, SEED_MAX_COUNT)
    logger.info(f"SEED: count={sessions}")
    try:
        inserted = store.add_events(generate_seed_events(sessions))
    except StorageError as e:
        raise storage_error(e, "seed")
    return SeedResponse(ok=True, inserted=inserted)
