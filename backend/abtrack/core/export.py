"""Comma-separated export of raw events and feedback.

Fields containing a comma, double quote, newline or carriage return are quoted
with embedded quotes doubled, so every line reads back unchanged through
``csv.reader``.
"""
import json
from datetime import datetime
from typing import Any, Iterable, Mapping, Sequence

from abtrack.utils.serialization import serialize_datetime

EVENT_COLUMNS = ("sessionId", "variant", "name", "x", "y", "meta", "createdAt")
FEEDBACK_COLUMNS = ("rating", "text", "sessionId", "createdAt")

_NEEDS_QUOTING = (",", '"', "\n", "\r")


def format_value(value: Any) -> str:
    """Render one field as text, without quoting."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return serialize_datetime(value)
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)
    return str(value)


def escape_field(text: str) -> str:
    """Quote a field if it contains a delimiter, quote or newline."""
    if any(ch in text for ch in _NEEDS_QUOTING):
        return '"' + text.replace('"', '""') + '"'
    return text


def format_csv(rows: Iterable[Mapping[str, Any]], columns: Sequence[str]) -> str:
    """
    Serialize rows into delimited text.

    Args:
        rows: Records keyed by column name; missing keys become empty fields
        columns: Column order, also used as the header line

    Returns:
        Header plus one line per row, joined with ``\\n``
    """
    lines = [",".join(columns)]
    for row in rows:
        lines.append(",".join(escape_field(format_value(row.get(column))) for column in columns))
    return "\n".join(lines)


def event_rows(events: Iterable[Mapping[str, Any]]) -> list:
    """Map stored event records onto the export column names."""
    return [
        {
            "sessionId": event.get("session_id"),
            "variant": event.get("variant"),
            "name": event.get("name"),
            "x": event.get("x"),
            "y": event.get("y"),
            "meta": event.get("meta"),
            "createdAt": event.get("created_at"),
        }
        for event in events
    ]


def feedback_rows(items: Iterable[Mapping[str, Any]]) -> list:
    """Map stored feedback records onto the export column names."""
    return [
        {
            "rating": item.get("rating"),
            "text": item.get("text"),
            "sessionId": item.get("session_id"),
            "createdAt": item.get("created_at"),
        }
        for item in items
    ]
