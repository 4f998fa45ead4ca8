"""Interaction event model."""
from sqlalchemy import JSON, Column, DateTime, Float, Index, String, Uuid
from sqlalchemy.dialects.postgresql import JSONB
import uuid
from abtrack.database import Base
from abtrack.constants import Variant
from abtrack.utils.serialization import utc_now


class Event(Base):
    """A single recorded interaction. Rows are append-only."""
    __tablename__ = "events"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    session_id = Column(String, nullable=False, index=True)
    variant = Column(String(1), nullable=False, default=Variant.DEFAULT)  # A|B
    name = Column(String, nullable=False)  # e.g. "session_started", "cta_clicked"
    meta = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=True)  # Free-form, stored verbatim
    x = Column(Float, nullable=True)  # Relative click x in [0, 1]
    y = Column(Float, nullable=True)  # Relative click y in [0, 1]
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, index=True)

    # Every read path filters on the window first
    __table_args__ = (
        Index("idx_events_name_created", "name", "created_at"),
    )
