"""Feedback model."""
from sqlalchemy import Column, DateTime, Integer, String, Text, Uuid
import uuid
from abtrack.database import Base
from abtrack.utils.serialization import utc_now


class Feedback(Base):
    """Free-text feedback left by a session."""
    __tablename__ = "feedback"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    session_id = Column(String, nullable=False, index=True)
    rating = Column(Integer, nullable=True)  # Unvalidated range
    text = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, index=True)
