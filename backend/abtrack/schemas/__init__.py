"""Pydantic schemas for request/response validation."""
from abtrack.schemas.event import EventCreateRequest, EventCreateResponse, EventOut, HeatmapPoint
from abtrack.schemas.feedback import FeedbackCreateRequest, FeedbackCreateResponse, FeedbackOut
from abtrack.schemas.stats import StatsResponse, SeedResponse

__all__ = [
    "EventCreateRequest",
    "EventCreateResponse",
    "EventOut",
    "HeatmapPoint",
    "FeedbackCreateRequest",
    "FeedbackCreateResponse",
    "FeedbackOut",
    "StatsResponse",
    "SeedResponse",
]
