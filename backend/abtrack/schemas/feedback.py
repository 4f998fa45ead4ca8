"""Schemas for feedback submission and listing."""
from datetime import datetime
from pydantic import BaseModel, Field
from typing import Any, Mapping, Optional


class FeedbackCreateRequest(BaseModel):
    """Request schema for POST /api/feedback."""
    sessionId: Optional[str] = Field(None, description="Session ID from the client")
    rating: Optional[int] = Field(None, description="Caller-defined rating")
    text: Optional[str] = Field(None, description="Free-text feedback")


class FeedbackCreateResponse(BaseModel):
    """Response schema for POST /api/feedback."""
    ok: bool


class FeedbackOut(BaseModel):
    """A stored feedback entry."""
    sessionId: str
    rating: Optional[int] = None
    text: Optional[str] = None
    createdAt: datetime

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "FeedbackOut":
        """Convert a store record to the response model."""
        return cls(
            sessionId=record["session_id"],
            rating=record.get("rating"),
            text=record.get("text"),
            createdAt=record["created_at"],
        )
