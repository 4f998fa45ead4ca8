"""Request-scoped dependencies shared by the routers."""
from fastapi import Depends
from sqlalchemy.orm import Session

from abtrack.database import get_db
from abtrack.services.analytics import AnalyticsService
from abtrack.services.store import EventStore, SqlEventStore


def get_store(db: Session = Depends(get_db)) -> EventStore:
    """Event store bound to the request's database session."""
    return SqlEventStore(db)


def get_analytics(store: EventStore = Depends(get_store)) -> AnalyticsService:
    """Analytics service over the request's store."""
    return AnalyticsService(store)
