"""Schemas for event ingestion and export."""
from datetime import datetime
from pydantic import BaseModel, Field, JsonValue
from typing import Any, Dict, Mapping, Optional


class EventCreateRequest(BaseModel):
    """Request schema for POST /api/event.

    Required fields are checked by the recorder so that missing values map to
    a 400 rather than a schema error.
    """
    sessionId: Optional[str] = Field(None, description="Session ID from the client")
    variant: Optional[str] = Field(None, description="Experiment arm, A or B (default A)")
    name: Optional[str] = Field(None, description="Event name, e.g. cta_clicked")
    meta: Optional[Dict[str, JsonValue]] = Field(None, description="Free-form event details")
    x: Optional[float] = Field(None, description="Relative click x in [0, 1]")
    y: Optional[float] = Field(None, description="Relative click y in [0, 1]")


class EventCreateResponse(BaseModel):
    """Response schema for POST /api/event."""
    ok: bool
    id: str


class EventOut(BaseModel):
    """A stored event as returned by GET /api/events."""
    sessionId: str
    variant: str
    name: str
    meta: Optional[Dict[str, Any]] = None
    x: Optional[float] = None
    y: Optional[float] = None
    createdAt: datetime

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "EventOut":
        """Convert a store record to the response model."""
        return cls(
            sessionId=record["session_id"],
            variant=record["variant"],
            name=record["name"],
            meta=record.get("meta"),
            x=record.get("x"),
            y=record.get("y"),
            createdAt=record["created_at"],
        )


class HeatmapPoint(BaseModel):
    """One normalized click position."""
    x: float
    y: float
