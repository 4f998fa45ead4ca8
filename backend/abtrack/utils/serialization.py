"""Serialization utilities for converting models to API responses."""
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import UUID


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a datetime to timezone-aware UTC.

    Naive values are taken to already be UTC (SQLite drops tzinfo on the way
    back out).

    Args:
        value: Datetime value or None

    Returns:
        Aware UTC datetime or None
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def serialize_uuid(value: Optional[UUID]) -> Optional[str]:
    """
    Serialize UUID to string.

    Args:
        value: UUID value or None

    Returns:
        String representation or None
    """
    return str(value) if value else None


def serialize_datetime(value: Optional[datetime]) -> Optional[str]:
    """
    Serialize datetime to ISO format string in UTC.

    Args:
        value: Datetime value or None

    Returns:
        ISO format string or None
    """
    value = ensure_utc(value)
    return value.isoformat() if value else None


def serialize_model_to_dict(
    model: Any,
    exclude: Optional[list[str]] = None,
) -> Dict[str, Any]:
    """
    Serialize a SQLAlchemy model to a plain record dictionary.

    UUID columns become strings and datetimes become aware UTC datetimes.

    Args:
        model: SQLAlchemy model instance
        exclude: Column names to leave out

    Returns:
        Dictionary representation of the model
    """
    exclude = exclude or []

    result = {}
    for column in model.__table__.columns:
        if column.name in exclude:
            continue
        value = getattr(model, column.name)

        if isinstance(value, UUID):
            result[column.name] = serialize_uuid(value)
        elif isinstance(value, datetime):
            result[column.name] = ensure_utc(value)
        else:
            result[column.name] = value

    return result
