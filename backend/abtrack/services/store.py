"""Event and feedback stores.

``EventStore`` defines what the analytics service needs from persistence:
appends, filtered group counts and bounded recent projections. Ordering of
grouped views stays in ``abtrack.core.aggregation``; adapters only honour the
window, the equality filters and the row limits.
"""
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional
import uuid

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from abtrack.core import aggregation
from abtrack.core.window import TimeWindow
from abtrack.models import Event, Feedback
from abtrack.utils.exceptions import StorageError
from abtrack.utils.logger import logger
from abtrack.utils.serialization import serialize_model_to_dict, utc_now


class EventStore(ABC):
    """Append-only store for events and feedback."""

    @abstractmethod
    def add_event(self, record: Dict[str, Any]) -> str:
        """
        Persist one event record.

        Args:
            record: Validated event fields (no id or timestamp)

        Returns:
            Generated event id
        """
        ...

    @abstractmethod
    def add_events(self, records: List[Dict[str, Any]]) -> int:
        """Persist many event records at once and return how many were written."""
        ...

    @abstractmethod
    def add_feedback(self, record: Dict[str, Any]) -> str:
        """Persist one feedback record and return its id."""
        ...

    @abstractmethod
    def count_by(self, field: str, window: TimeWindow, **equals: Optional[str]) -> Dict[Any, int]:
        """
        Count in-window events per value of ``field``.

        Args:
            field: Event field to group on ("name" or "variant")
            window: Resolved time window
            **equals: Equality filters; None values are ignored

        Returns:
            Unordered mapping of group value to count
        """
        ...

    @abstractmethod
    def recent_points(self, window: TimeWindow, limit: int) -> List[Dict[str, float]]:
        """Most recent in-window ``{x, y}`` pairs, newest first."""
        ...

    @abstractmethod
    def recent_events(self, window: TimeWindow, limit: int, **equals: Optional[str]) -> List[Dict[str, Any]]:
        """Most recent in-window event records (without id), newest first."""
        ...

    @abstractmethod
    def recent_feedback(self, window: TimeWindow, limit: int) -> List[Dict[str, Any]]:
        """Most recent in-window feedback records, newest first."""
        ...


class SqlEventStore(EventStore):
    """EventStore backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        """Roll back and re-raise database failures as StorageError."""
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error during {operation}: {e}", exc_info=True)
            raise StorageError(f"{operation} failed: {e}") from e

    @staticmethod
    def _within(query: Query, model: Any, window: TimeWindow) -> Query:
        """Apply the inclusive window bounds to ``model.created_at``."""
        if window.start is not None:
            query = query.filter(model.created_at >= window.start)
        if window.end is not None:
            query = query.filter(model.created_at <= window.end)
        return query

    @staticmethod
    def _matching(query: Query, equals: Dict[str, Optional[str]]) -> Query:
        for field, value in equals.items():
            if value not in (None, ""):
                query = query.filter(getattr(Event, field) == value)
        return query

    def add_event(self, record: Dict[str, Any]) -> str:
        with self._guard("add_event"):
            event = Event(**record)
            self.db.add(event)
            self.db.flush()
            event_id = str(event.id)
            self.db.commit()
            return event_id

    def add_events(self, records: List[Dict[str, Any]]) -> int:
        with self._guard("add_events"):
            self.db.add_all([Event(**record) for record in records])
            self.db.commit()
            return len(records)

    def add_feedback(self, record: Dict[str, Any]) -> str:
        with self._guard("add_feedback"):
            feedback = Feedback(**record)
            self.db.add(feedback)
            self.db.flush()
            feedback_id = str(feedback.id)
            self.db.commit()
            return feedback_id

    def count_by(self, field: str, window: TimeWindow, **equals: Optional[str]) -> Dict[Any, int]:
        with self._guard(f"count_by({field})"):
            column = getattr(Event, field)
            query = self.db.query(column, func.count(Event.id))
            query = self._matching(self._within(query, Event, window), equals)
            return {value: count for value, count in query.group_by(column).all()}

    def recent_points(self, window: TimeWindow, limit: int) -> List[Dict[str, float]]:
        with self._guard("recent_points"):
            query = self.db.query(Event.x, Event.y).filter(
                Event.x.isnot(None),
                Event.y.isnot(None),
            )
            rows = (
                self._within(query, Event, window)
                .order_by(Event.created_at.desc())
                .limit(limit)
                .all()
            )
            return [{"x": x, "y": y} for x, y in rows]

    def recent_events(self, window: TimeWindow, limit: int, **equals: Optional[str]) -> List[Dict[str, Any]]:
        with self._guard("recent_events"):
            query = self._matching(self._within(self.db.query(Event), Event, window), equals)
            rows = query.order_by(Event.created_at.desc()).limit(limit).all()
            return [serialize_model_to_dict(row, exclude=["id"]) for row in rows]

    def recent_feedback(self, window: TimeWindow, limit: int) -> List[Dict[str, Any]]:
        with self._guard("recent_feedback"):
            query = self._within(self.db.query(Feedback), Feedback, window)
            rows = query.order_by(Feedback.created_at.desc()).limit(limit).all()
            return [serialize_model_to_dict(row) for row in rows]


class MemoryEventStore(EventStore):
    """In-process EventStore built directly on the aggregation rules."""

    def __init__(self, clock: Callable = utc_now):
        self.clock = clock
        self.events: List[Dict[str, Any]] = []
        self.feedback: List[Dict[str, Any]] = []

    def _stamp(self, record: Dict[str, Any]) -> Dict[str, Any]:
        stored = dict(record)
        stored["id"] = str(uuid.uuid4())
        stored.setdefault("created_at", self.clock())
        return stored

    def add_event(self, record: Dict[str, Any]) -> str:
        stored = self._stamp(record)
        self.events.append(stored)
        return stored["id"]

    def add_events(self, records: List[Dict[str, Any]]) -> int:
        for record in records:
            self.add_event(record)
        return len(records)

    def add_feedback(self, record: Dict[str, Any]) -> str:
        stored = self._stamp(record)
        self.feedback.append(stored)
        return stored["id"]

    def count_by(self, field: str, window: TimeWindow, **equals: Optional[str]) -> Dict[Any, int]:
        return aggregation.group_count(aggregation.filter_records(self.events, window, **equals), field)

    def recent_points(self, window: TimeWindow, limit: int) -> List[Dict[str, float]]:
        return aggregation.heatmap_points(self.events, window, limit)

    def recent_events(self, window: TimeWindow, limit: int, **equals: Optional[str]) -> List[Dict[str, Any]]:
        matched = aggregation.filter_records(self.events, window, **equals)
        return [
            {key: value for key, value in record.items() if key != "id"}
            for record in aggregation.recent_first(matched, limit)
        ]

    def recent_feedback(self, window: TimeWindow, limit: int) -> List[Dict[str, Any]]:
        matched = aggregation.filter_records(self.feedback, window)
        return [dict(record) for record in aggregation.recent_first(matched, limit)]
