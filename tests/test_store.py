# ==============================================================================
# Tests for SqlEventStore
# ==============================================================================
"""
Integration tests for the SQLAlchemy store against in-memory SQLite.

Tests cover:
- Inclusive window bounds in SQL match TimeWindow.matches
- Heatmap cap keeps the 2000 most recent points
- Raw event limit is clamped to 20000
- meta is stored and returned verbatim
- Database failures surface as StorageError
"""

import pytest
from sqlalchemy import insert

from abtrack.core.window import UNBOUNDED, TimeWindow
from abtrack.database import Base, engine
from abtrack.models import Event
from abtrack.services.analytics import AnalyticsService
from abtrack.utils.exceptions import StorageError
from conftest import at


def add(store, name, minutes, variant="A", **fields):
    return store.add_event(
        {"session_id": "s", "variant": variant, "name": name, "created_at": at(minutes), **fields}
    )


class TestWrites:
    """Tests for add_event(), add_events(), add_feedback()."""

    def test_add_event_assigns_id_and_timestamp(self, sql_store):
        event_id = sql_store.add_event({"session_id": "s1", "variant": "B", "name": "page_click"})
        rows = sql_store.recent_events(UNBOUNDED, 10)
        assert event_id
        assert len(rows) == 1
        assert rows[0]["created_at"].tzinfo is not None
        assert "id" not in rows[0]

    def test_meta_round_trips(self, sql_store):
        meta = {"label": "Buy now", "n": 3, "ratio": 0.5, "ok": False, "tags": ["x", None], "deep": {"a": []}}
        add(sql_store, "cta_clicked", 0, meta=meta)
        assert sql_store.recent_events(UNBOUNDED, 1)[0]["meta"] == meta

    def test_add_events_counts(self, sql_store):
        inserted = sql_store.add_events([
            {"session_id": "s", "variant": "A", "name": "page_click", "x": 0.1, "y": 0.1},
            {"session_id": "s", "variant": "A", "name": "page_click"},
        ])
        assert inserted == 2

    def test_feedback(self, sql_store):
        sql_store.add_feedback({"session_id": "s1", "rating": 4, "text": "nice", "created_at": at(1)})
        sql_store.add_feedback({"session_id": "s2", "rating": None, "text": None, "created_at": at(2)})
        rows = sql_store.recent_feedback(UNBOUNDED, 200)
        assert [row["session_id"] for row in rows] == ["s2", "s1"]
        assert rows[1]["rating"] == 4


class TestWindowInSql:
    """The SQL translation of the window must agree with TimeWindow.matches."""

    def test_bounds_are_inclusive(self, sql_store):
        for minutes in range(0, 5):
            add(sql_store, "page_click", minutes)
        window = TimeWindow(start=at(1), end=at(3))
        assert sql_store.count_by("name", window) == {"page_click": 3}
        assert [r["created_at"] for r in sql_store.recent_events(window, 10)] == [at(3), at(2), at(1)]

    def test_inverted_window_matches_nothing(self, sql_store):
        add(sql_store, "session_started", 1)
        window = TimeWindow(start=at(2), end=at(0))
        assert sql_store.count_by("variant", window, name="session_started") == {}
        assert sql_store.recent_points(window, 10) == []

    def test_count_by_with_filter(self, sql_store):
        add(sql_store, "session_started", 0, "A")
        add(sql_store, "session_started", 0, "B")
        add(sql_store, "session_started", 0, "B")
        add(sql_store, "cta_clicked", 0, "B")
        assert sql_store.count_by("variant", UNBOUNDED, name="session_started") == {"A": 1, "B": 2}
        assert sql_store.count_by("name", UNBOUNDED, name=None) == {"session_started": 3, "cta_clicked": 1}


class TestCaps:
    """Read caps enforced by AnalyticsService over the SQL store."""

    def test_scenario_b_heatmap_keeps_most_recent_2000(self, sql_store, db):
        rows = [
            {"session_id": "s", "variant": "A", "name": "page_click", "x": 0.5, "y": i / 2500, "created_at": at(i)}
            for i in range(2500)
        ]
        db.execute(insert(Event), rows)
        db.commit()

        points = AnalyticsService(sql_store).heatmap_points(UNBOUNDED)
        assert len(points) == 2000
        assert points[0]["y"] == pytest.approx(2499 / 2500)
        assert points[-1]["y"] == pytest.approx(500 / 2500)

    def test_scenario_d_event_limit_is_clamped(self, sql_store, db):
        rows = [
            {"session_id": "s", "variant": "A", "name": "page_click", "created_at": at(i)}
            for i in range(20_005)
        ]
        db.execute(insert(Event), rows)
        db.commit()

        analytics = AnalyticsService(sql_store)
        assert len(analytics.raw_events(UNBOUNDED, limit="999999")) == 20_000
        assert len(analytics.raw_events(UNBOUNDED)) == 5_000


class TestFailures:
    """Database failures become StorageError."""

    def test_missing_table_raises_storage_error(self, sql_store):
        Base.metadata.drop_all(bind=engine)
        with pytest.raises(StorageError):
            sql_store.count_by("name", UNBOUNDED)
        with pytest.raises(StorageError):
            sql_store.add_event({"session_id": "s", "variant": "A", "name": "x"})
