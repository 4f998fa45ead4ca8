"""Synthetic session generator for demo and development databases."""
import random
from datetime import datetime
from typing import Any, Dict, List, Optional

from abtrack.constants import EventName, Variant
from abtrack.utils.serialization import utc_now

# Per-variant probability that a seeded session converts
CONVERSION_PROBABILITY = {Variant.A: 0.55, Variant.B: 0.45}
MIN_CLICKS = 3
MAX_CLICKS = 7


def generate_seed_events(
    count: int,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    """
    Build event records for ``count`` synthetic sessions.

    Each session gets a coin-flip variant, one ``session_started`` event,
    a handful of positioned ``page_click`` events and possibly a
    ``cta_clicked`` conversion.

    Args:
        count: Number of sessions to generate
        rng: Random source, injectable for reproducible output
        now: Timestamp used for the session id prefix

    Returns:
        Event records ready for ``EventStore.add_events``
    """
    rng = rng or random.Random()
    stamp = int((now or utc_now()).timestamp() * 1000)

    records: List[Dict[str, Any]] = []
    for i in range(max(count, 0)):
        session_id = f"seed-{stamp}-{i}"
        variant = Variant.A if rng.random() < 0.5 else Variant.B

        def event(name: str, **fields: Any) -> Dict[str, Any]:
            return {"session_id": session_id, "variant": variant, "name": name, **fields}

        records.append(event(EventName.SESSION_STARTED))
        for _ in range(rng.randint(MIN_CLICKS, MAX_CLICKS)):
            records.append(event(EventName.PAGE_CLICK, x=rng.random(), y=rng.random()))
        if rng.random() < CONVERSION_PROBABILITY[variant]:
            records.append(event(EventName.CTA_CLICKED))

    return records
