"""Event and feedback recording rules.

Records are validated here before they reach any store. Pointer positions are
normalized against a container region and clamped into ``[0, 1]`` so heatmap
consumers never see out-of-bounds coordinates.
"""
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple

from abtrack.constants import Variant
from abtrack.utils.exceptions import ValidationError

if TYPE_CHECKING:
    from abtrack.services.store import EventStore


@dataclass(frozen=True)
class PointerPosition:
    """Viewport coordinates of a pointer event."""
    client_x: float
    client_y: float


@dataclass(frozen=True)
class ContainerBounds:
    """Bounding box of the reference region clicks are measured against."""
    left: float
    top: float
    width: float
    height: float


def clamp_unit(value: float) -> float:
    """Clamp a coordinate into ``[0, 1]``."""
    return max(0.0, min(1.0, float(value)))


def normalize_position(
    pointer: PointerPosition,
    bounds: ContainerBounds,
) -> Optional[Tuple[float, float]]:
    """
    Convert a pointer position into container-relative ``(x, y)``.

    Args:
        pointer: Pointer coordinates
        bounds: Container bounding box

    Returns:
        Clamped ``(x, y)``, or None if the container has no area
    """
    if bounds.width <= 0 or bounds.height <= 0:
        return None
    x = (pointer.client_x - bounds.left) / bounds.width
    y = (pointer.client_y - bounds.top) / bounds.height
    return clamp_unit(x), clamp_unit(y)


def _require(value: Optional[str], field: str) -> str:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field} required")
    return value


def build_event(
    session_id: Optional[str],
    name: Optional[str],
    variant: Optional[str] = None,
    meta: Optional[Dict[str, Any]] = None,
    pointer: Optional[PointerPosition] = None,
    bounds: Optional[ContainerBounds] = None,
    x: Optional[float] = None,
    y: Optional[float] = None,
) -> Dict[str, Any]:
    """
    Validate an interaction event and build its storable record.

    A pointer plus container bounds takes precedence over raw ``x``/``y``.
    Raw coordinates are clamped the same way.

    Args:
        session_id: Browsing-context identifier
        name: Event name
        variant: Experiment arm, defaults to A
        meta: Open JSON mapping, stored verbatim
        pointer: Pointer position of the triggering event
        bounds: Container region the pointer is measured against
        x: Already-normalized x coordinate
        y: Already-normalized y coordinate

    Returns:
        Record dictionary without ``id``/``created_at`` (assigned by the store)

    Raises:
        ValidationError: If session_id or name is missing, or variant is unknown
    """
    _require(session_id, "sessionId")
    _require(name, "name")

    variant = variant or Variant.DEFAULT
    if variant not in Variant.ALL:
        raise ValidationError(f"variant must be one of {', '.join(Variant.ALL)}")

    if pointer is not None and bounds is not None:
        position = normalize_position(pointer, bounds)
        x, y = position if position else (None, None)

    return {
        "session_id": session_id,
        "variant": variant,
        "name": name,
        "meta": meta,
        "x": clamp_unit(x) if x is not None else None,
        "y": clamp_unit(y) if y is not None else None,
    }


def build_feedback(
    session_id: Optional[str],
    rating: Optional[int] = None,
    text: Optional[str] = None,
) -> Dict[str, Any]:
    """Validate feedback and build its storable record."""
    _require(session_id, "sessionId")
    return {"session_id": session_id, "rating": rating, "text": text}


def record_event(store: "EventStore", session_id: Optional[str], name: Optional[str], **kwargs) -> str:
    """
    Validate and persist a single event.

    Returns:
        Generated event id

    Raises:
        ValidationError: Invalid event, nothing is written
        StorageError: Persistence failed, not retried
    """
    return store.add_event(build_event(session_id, name, **kwargs))


def record_feedback(
    store: "EventStore",
    session_id: Optional[str],
    rating: Optional[int] = None,
    text: Optional[str] = None,
) -> str:
    """Validate and persist a feedback entry."""
    return store.add_feedback(build_feedback(session_id, rating, text))
