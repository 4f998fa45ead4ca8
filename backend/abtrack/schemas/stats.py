"""Schemas for aggregate statistics."""
from pydantic import BaseModel
from typing import List

from abtrack.core.aggregation import AggregateResult


class EventNameCount(BaseModel):
    name: str
    count: int


class VariantSessions(BaseModel):
    variant: str
    sessions: int


class VariantConversions(BaseModel):
    variant: str
    conversions: int


class StatsResponse(BaseModel):
    """Response schema for GET /api/stats."""
    eventsByName: List[EventNameCount]
    sessionsByVariant: List[VariantSessions]
    conversionsByVariant: List[VariantConversions]

    @classmethod
    def from_result(cls, result: AggregateResult) -> "StatsResponse":
        return cls(
            eventsByName=result.events_by_name,
            sessionsByVariant=result.sessions_by_variant,
            conversionsByVariant=result.conversions_by_variant,
        )


class SeedResponse(BaseModel):
    """Response schema for POST /api/seed."""
    ok: bool
    inserted: int
