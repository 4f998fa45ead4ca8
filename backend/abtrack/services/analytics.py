"""Time-windowed analytics over an EventStore."""
from typing import Any, Dict, List, Optional

from abtrack.constants import (
    CONVERSION_EVENT,
    EVENTS_DEFAULT_LIMIT,
    EVENTS_MAX_LIMIT,
    FEEDBACK_LIMIT,
    HEATMAP_POINT_LIMIT,
    EventName,
)
from abtrack.core.aggregation import AggregateResult, clamp_limit, order_by_variant, rank_by_count
from abtrack.core.window import TimeWindow
from abtrack.services.store import EventStore


class AnalyticsService:
    """
    Computes aggregate views and bounded raw projections.

    Every method takes the same resolved TimeWindow, so all read paths share
    one bound semantics. Store failures propagate as StorageError and nothing
    partial is returned.
    """

    def __init__(self, store: EventStore):
        self.store = store

    def compute_views(self, window: TimeWindow, event_name: Optional[str] = None) -> AggregateResult:
        """
        Compute events-by-name, sessions-by-variant and conversions-by-variant.

        Args:
            window: Resolved time window
            event_name: Restricts only the events-by-name view to one name

        Returns:
            AggregateResult with deterministically ordered rows
        """
        # All counts are collected before anything is returned
        by_name = self.store.count_by("name", window, name=event_name)
        sessions = self.store.count_by("variant", window, name=EventName.SESSION_STARTED)
        conversions = self.store.count_by("variant", window, name=CONVERSION_EVENT)

        return AggregateResult(
            events_by_name=rank_by_count(by_name),
            sessions_by_variant=order_by_variant(sessions, "sessions"),
            conversions_by_variant=order_by_variant(conversions, "conversions"),
        )

    def heatmap_points(self, window: TimeWindow) -> List[Dict[str, float]]:
        """The most recent positioned clicks, capped for rendering."""
        return self.store.recent_points(window, HEATMAP_POINT_LIMIT)

    def raw_events(
        self,
        window: TimeWindow,
        name: Optional[str] = None,
        variant: Optional[str] = None,
        limit: Any = None,
    ) -> List[Dict[str, Any]]:
        """
        Raw events for export, newest first.

        ``limit`` defaults to 5000 and is clamped to 20000 whatever the caller
        asks for.
        """
        row_limit = clamp_limit(limit, EVENTS_DEFAULT_LIMIT, EVENTS_MAX_LIMIT)
        return self.store.recent_events(window, row_limit, name=name, variant=variant)

    def raw_feedback(self, window: TimeWindow, limit: Any = FEEDBACK_LIMIT) -> List[Dict[str, Any]]:
        """Recent feedback, newest first, never more than 200 entries."""
        return self.store.recent_feedback(window, clamp_limit(limit, FEEDBACK_LIMIT, FEEDBACK_LIMIT))
