"""Aggregation rules: filter, then group-count, then deterministic sort.

Everything here works on plain record dictionaries (``name``, ``variant``,
``x``, ``y``, ``created_at``...) so the rules can be exercised without a store.
Store adapters only supply filtered group counts and bounded projections; the
ordering of every grouped view is decided here.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from abtrack.constants import (
    CONVERSION_EVENT,
    EVENTS_DEFAULT_LIMIT,
    EVENTS_MAX_LIMIT,
    HEATMAP_POINT_LIMIT,
    EventName,
    Variant,
)
from abtrack.core.window import TimeWindow

Record = Mapping[str, Any]


@dataclass
class AggregateResult:
    """The three grouped views returned together by ``/api/stats``."""
    events_by_name: List[Dict[str, Any]] = field(default_factory=list)
    sessions_by_variant: List[Dict[str, Any]] = field(default_factory=list)
    conversions_by_variant: List[Dict[str, Any]] = field(default_factory=list)


def filter_records(
    records: Iterable[Record],
    window: TimeWindow,
    **equals: Optional[Any],
) -> List[Record]:
    """
    Keep records inside the window whose fields equal the given values.

    Filters whose value is None or empty are ignored.
    """
    conditions = {key: value for key, value in equals.items() if value not in (None, "")}
    return [
        record for record in records
        if window.matches(record.get("created_at"))
        and all(record.get(key) == value for key, value in conditions.items())
    ]


def group_count(records: Iterable[Record], key: str) -> Dict[Any, int]:
    """Count records per value of ``key``."""
    counts: Dict[Any, int] = {}
    for record in records:
        value = record.get(key)
        counts[value] = counts.get(value, 0) + 1
    return counts


def rank_by_count(counts: Mapping[str, int]) -> List[Dict[str, Any]]:
    """Order ``{name: count}`` by count descending, ties by name ascending."""
    ordered = sorted(counts.items(), key=lambda item: (-item[1], str(item[0])))
    return [{"name": name, "count": count} for name, count in ordered]


def order_by_variant(counts: Mapping[str, int], label: str) -> List[Dict[str, Any]]:
    """Order ``{variant: count}`` by variant ascending as ``{variant, <label>}`` rows."""
    ordered = sorted(counts.items(), key=lambda item: str(item[0]))
    return [{"variant": variant, label: count} for variant, count in ordered]


def recent_first(records: Iterable[Record], limit: int) -> List[Record]:
    """Sort by ``created_at`` descending and keep at most ``limit`` records."""
    ordered = sorted(records, key=lambda record: record["created_at"], reverse=True)
    return ordered[:max(limit, 0)]


def clamp_limit(
    raw: Any,
    default: int = EVENTS_DEFAULT_LIMIT,
    maximum: int = EVENTS_MAX_LIMIT,
) -> int:
    """
    Turn a caller-supplied limit into a safe positive row count.

    Missing, non-numeric, zero or negative values fall back to ``default``;
    anything above ``maximum`` is cut down to it.
    """
    try:
        value = int(float(raw))
    except (TypeError, ValueError, OverflowError):
        return default
    if value <= 0:
        return default
    return min(value, maximum)


def conversion_rate(sessions: int, conversions: int) -> float:
    """Conversions per hundred sessions; 0 when there are no sessions."""
    if not sessions:
        return 0.0
    return conversions / sessions * 100


def summarize_variants(
    sessions_by_variant: Iterable[Mapping[str, Any]],
    conversions_by_variant: Iterable[Mapping[str, Any]],
) -> List[Dict[str, Any]]:
    """
    Combine the per-variant views into an A/B summary.

    Both arms are always present, with zeros where a view has no row.
    """
    sessions = {row["variant"]: row["sessions"] for row in sessions_by_variant}
    conversions = {row["variant"]: row["conversions"] for row in conversions_by_variant}

    summary = []
    for variant in Variant.ALL:
        session_count = sessions.get(variant, 0)
        conversion_count = conversions.get(variant, 0)
        summary.append({
            "variant": variant,
            "sessions": session_count,
            "conversions": conversion_count,
            "rate": conversion_rate(session_count, conversion_count),
        })
    return summary


def compute_views(
    records: Iterable[Record],
    window: TimeWindow,
    event_name: Optional[str] = None,
) -> AggregateResult:
    """
    Compute the grouped views over in-memory records.

    Args:
        records: Event records
        window: Resolved time window
        event_name: Optional single-name restriction for ``events_by_name``

    Returns:
        AggregateResult with all three views
    """
    records = list(records)
    return AggregateResult(
        events_by_name=rank_by_count(
            group_count(filter_records(records, window, name=event_name), "name")
        ),
        sessions_by_variant=order_by_variant(
            group_count(filter_records(records, window, name=EventName.SESSION_STARTED), "variant"),
            "sessions",
        ),
        conversions_by_variant=order_by_variant(
            group_count(filter_records(records, window, name=CONVERSION_EVENT), "variant"),
            "conversions",
        ),
    )


def heatmap_points(
    records: Iterable[Record],
    window: TimeWindow,
    limit: int = HEATMAP_POINT_LIMIT,
) -> List[Dict[str, float]]:
    """Most recent in-window points that carry both coordinates."""
    positioned = [
        record for record in filter_records(records, window)
        if record.get("x") is not None and record.get("y") is not None
    ]
    return [{"x": record["x"], "y": record["y"]} for record in recent_first(positioned, limit)]
