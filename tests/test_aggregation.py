# ==============================================================================
# Tests for Aggregation Rules and AnalyticsService
# ==============================================================================
"""
Unit tests for the pure aggregation functions and the analytics service over
an in-memory store.

Tests cover:
- Deterministic ordering of events-by-name (count desc, name asc)
- Per-variant views and conversion rates (including zero sessions)
- Limit clamping
- Window and filter consistency across views
- Inverted windows produce empty views
"""

import pytest

from abtrack.core.aggregation import (
    clamp_limit,
    compute_views,
    conversion_rate,
    filter_records,
    group_count,
    heatmap_points,
    rank_by_count,
    recent_first,
    summarize_variants,
)
from abtrack.core.window import UNBOUNDED, TimeWindow
from abtrack.services.analytics import AnalyticsService
from conftest import at


def ev(name, variant="A", minutes=0, **fields):
    return {"session_id": "s", "name": name, "variant": variant, "created_at": at(minutes), **fields}


def scenario_a():
    """session_started A x10, B x6; cta_clicked A x4, B x3."""
    return (
        [ev("session_started", "A", i) for i in range(10)]
        + [ev("session_started", "B", i) for i in range(6)]
        + [ev("cta_clicked", "A", i) for i in range(4)]
        + [ev("cta_clicked", "B", i) for i in range(3)]
    )


# ==============================================================================
# Pure functions
# ==============================================================================


class TestRankByCount:
    """Tests for rank_by_count()."""

    def test_count_descending(self):
        assert rank_by_count({"a": 1, "b": 3, "c": 2}) == [
            {"name": "b", "count": 3},
            {"name": "c", "count": 2},
            {"name": "a", "count": 1},
        ]

    def test_ties_by_name_ascending(self):
        ranked = rank_by_count({"zeta": 2, "alpha": 2, "mid": 2, "top": 5})
        assert [row["name"] for row in ranked] == ["top", "alpha", "mid", "zeta"]

    def test_tie_order_does_not_depend_on_input_order(self):
        forward = rank_by_count(dict([("b", 1), ("a", 1)]))
        backward = rank_by_count(dict([("a", 1), ("b", 1)]))
        assert forward == backward


class TestConversionRate:
    """Tests for conversion_rate() and summarize_variants()."""

    def test_zero_sessions_is_zero(self):
        assert conversion_rate(0, 0) == 0
        assert conversion_rate(0, 17) == 0

    def test_rate_is_percentage(self):
        assert conversion_rate(10, 4) == pytest.approx(40.0)
        assert conversion_rate(6, 3) == pytest.approx(50.0)

    def test_summary_fills_missing_arm(self):
        summary = summarize_variants([{"variant": "A", "sessions": 4}], [{"variant": "A", "conversions": 1}])
        assert summary == [
            {"variant": "A", "sessions": 4, "conversions": 1, "rate": 25.0},
            {"variant": "B", "sessions": 0, "conversions": 0, "rate": 0.0},
        ]


class TestClampLimit:
    """Tests for clamp_limit()."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            (None, 5000),
            ("", 5000),
            ("abc", 5000),
            ("0", 5000),
            ("-5", 5000),
            ("10", 10),
            (7.9, 7),
            ("999999", 20000),
            ("inf", 5000),
            (20000, 20000),
        ],
    )
    def test_event_limits(self, raw, expected):
        assert clamp_limit(raw) == expected

    def test_custom_bounds(self):
        assert clamp_limit(500, default=200, maximum=200) == 200
        assert clamp_limit(None, default=200, maximum=200) == 200


class TestFilterAndGroup:
    """Tests for filter_records(), group_count(), recent_first()."""

    def test_empty_filters_are_ignored(self):
        records = [ev("a"), ev("b", "B")]
        assert filter_records(records, UNBOUNDED, name=None, variant="") == records

    def test_filters_combine_with_window(self):
        records = [ev("a", minutes=0), ev("a", minutes=5), ev("b", minutes=5)]
        matched = filter_records(records, TimeWindow(start=at(1)), name="a")
        assert matched == [records[1]]

    def test_group_count(self):
        assert group_count([ev("a"), ev("a"), ev("b")], "name") == {"a": 2, "b": 1}

    def test_recent_first_limits(self):
        records = [ev("a", minutes=m) for m in (3, 1, 2)]
        assert [r["created_at"] for r in recent_first(records, 2)] == [at(3), at(2)]

    def test_heatmap_points_need_both_coordinates(self):
        records = [
            ev("page_click", minutes=1, x=0.1, y=0.2),
            ev("page_click", minutes=2, x=0.3, y=None),
            ev("page_click", minutes=3),
            ev("page_click", minutes=4, x=0.0, y=0.0),
        ]
        assert heatmap_points(records, UNBOUNDED) == [{"x": 0.0, "y": 0.0}, {"x": 0.1, "y": 0.2}]


class TestComputeViews:
    """Tests for compute_views() over in-memory records."""

    def test_scenario_a(self):
        result = compute_views(scenario_a(), UNBOUNDED)
        assert result.sessions_by_variant == [{"variant": "A", "sessions": 10}, {"variant": "B", "sessions": 6}]
        assert result.conversions_by_variant == [
            {"variant": "A", "conversions": 4},
            {"variant": "B", "conversions": 3},
        ]
        assert result.events_by_name == [
            {"name": "session_started", "count": 16},
            {"name": "cta_clicked", "count": 7},
        ]

    def test_event_name_restricts_only_first_view(self):
        result = compute_views(scenario_a(), UNBOUNDED, event_name="cta_clicked")
        assert result.events_by_name == [{"name": "cta_clicked", "count": 7}]
        assert result.sessions_by_variant[0]["sessions"] == 10


# ==============================================================================
# AnalyticsService over MemoryEventStore
# ==============================================================================


@pytest.fixture()
def analytics(memory_store):
    for record in scenario_a():
        memory_store.add_event(record)
    return AnalyticsService(memory_store)


class TestAnalyticsService:
    """Tests for AnalyticsService with a MemoryEventStore."""

    def test_scenario_a_rates(self, analytics):
        result = analytics.compute_views(UNBOUNDED)
        summary = {row["variant"]: row["rate"] for row in summarize_variants(
            result.sessions_by_variant, result.conversions_by_variant
        )}
        assert summary["A"] == pytest.approx(40.0)
        assert summary["B"] == pytest.approx(50.0)

    def test_window_applies_to_every_view(self, analytics):
        # minutes 0..2 inclusive: A sessions 0,1,2 / B sessions 0,1,2 / conversions 3 + 3
        result = analytics.compute_views(TimeWindow(start=at(0), end=at(2)))
        assert result.sessions_by_variant == [{"variant": "A", "sessions": 3}, {"variant": "B", "sessions": 3}]
        assert result.conversions_by_variant == [
            {"variant": "A", "conversions": 3},
            {"variant": "B", "conversions": 3},
        ]
        assert result.events_by_name == [
            {"name": "cta_clicked", "count": 6},
            {"name": "session_started", "count": 6},
        ]

    def test_scenario_c_inverted_window_is_empty(self, analytics, memory_store):
        memory_store.add_event(ev("page_click", minutes=1, x=0.5, y=0.5))
        memory_store.add_feedback({"session_id": "s", "rating": 5, "text": "ok", "created_at": at(1)})
        window = TimeWindow(start=at(5), end=at(1))

        result = analytics.compute_views(window)
        assert result.events_by_name == []
        assert result.sessions_by_variant == []
        assert result.conversions_by_variant == []
        assert analytics.heatmap_points(window) == []
        assert analytics.raw_events(window) == []
        assert analytics.raw_feedback(window) == []

    def test_raw_events_filters_and_strips_id(self, analytics):
        rows = analytics.raw_events(UNBOUNDED, name="cta_clicked", variant="B")
        assert len(rows) == 3
        assert all("id" not in row for row in rows)
        assert [row["created_at"] for row in rows] == [at(2), at(1), at(0)]

    def test_raw_feedback_is_capped(self, memory_store):
        for i in range(250):
            memory_store.add_feedback({"session_id": f"s{i}", "created_at": at(i)})
        rows = AnalyticsService(memory_store).raw_feedback(UNBOUNDED, limit=10_000)
        assert len(rows) == 200
        assert rows[0]["session_id"] == "s249"
