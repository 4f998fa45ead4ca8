"""Time-window resolution shared by every read path.

A window is an inclusive ``[start, end]`` interval over ``created_at``. Either
bound may be missing, meaning unbounded on that side. Bounds that cannot be
parsed are treated as missing rather than rejected.
"""
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from abtrack.utils.logger import logger
from abtrack.utils.serialization import ensure_utc


@dataclass(frozen=True)
class TimeWindow:
    """Resolved, UTC-normalized time window."""
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    @property
    def is_unbounded(self) -> bool:
        return self.start is None and self.end is None

    @property
    def is_inverted(self) -> bool:
        """An inverted window is legal and simply matches nothing."""
        return self.start is not None and self.end is not None and self.start > self.end

    def matches(self, created_at: Optional[datetime]) -> bool:
        """Return True if ``created_at`` falls inside the inclusive bounds."""
        if self.is_unbounded:
            return True
        if created_at is None:
            return False
        created_at = ensure_utc(created_at)
        if self.start is not None and created_at < self.start:
            return False
        if self.end is not None and created_at > self.end:
            return False
        return True


def parse_timestamp(raw: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp into an aware UTC datetime.

    Accepts a trailing ``Z`` and date-only values (midnight UTC). Naive
    timestamps are read as UTC.

    Args:
        raw: Timestamp string from a query parameter

    Returns:
        Parsed datetime, or None when absent or malformed
    """
    if raw is None:
        return None
    text = raw.strip()
    if not text:
        return None
    if text[-1] in ("Z", "z"):
        text = text[:-1] + "+00:00"

    try:
        parsed = _from_iso(text)
        # offsets at the edges of the datetime range overflow when shifted
        return ensure_utc(parsed)
    except (ValueError, OverflowError):
        logger.debug(f"Ignoring unparsable time bound {raw!r}")
        return None


def _from_iso(text: str) -> datetime:
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return datetime.combine(date.fromisoformat(text), time.min)


def resolve_window(from_raw: Optional[str] = None, to_raw: Optional[str] = None) -> TimeWindow:
    """
    Resolve raw ``from``/``to`` query values into a TimeWindow.

    Args:
        from_raw: Lower bound (inclusive), ISO-8601
        to_raw: Upper bound (inclusive), ISO-8601

    Returns:
        The resolved window
    """
    return TimeWindow(start=parse_timestamp(from_raw), end=parse_timestamp(to_raw))


UNBOUNDED = TimeWindow()

__all__ = ["TimeWindow", "UNBOUNDED", "parse_timestamp", "resolve_window"]
