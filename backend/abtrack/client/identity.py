"""Sticky session identity and A/B variant assignment.

A browsing context gets a random session id and a coin-flip variant the first
time it asks. Both are written to an injected store and reused afterwards.
"""
import json
import random
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Protocol, Tuple

from abtrack.constants import Variant
from abtrack.utils.logger import logger

SESSION_KEY = "sessionId"
VARIANT_KEY = "abVariant"


@dataclass(frozen=True)
class Identity:
    """Session id and experiment arm carried on every event from a context."""
    session_id: str
    variant: str


class IdentityStore(Protocol):
    """Durable client-side storage with string slots."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryIdentityStore:
    """Identity slots held in a dict, for one process lifetime."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._slots: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._slots.get(key)

    def set(self, key: str, value: str) -> None:
        self._slots[key] = value


class FileIdentityStore:
    """Identity slots persisted as a JSON object on disk."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Unreadable identity file {self.path}, starting fresh: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data), encoding="utf-8")


def assign_variant(rng: Optional[random.Random] = None) -> str:
    """Unbiased coin flip between the two arms."""
    roll = (rng or random).random()
    return Variant.A if roll < 0.5 else Variant.B


def resolve_identity(
    store: IdentityStore,
    rng: Optional[random.Random] = None,
) -> Tuple[Identity, bool]:
    """
    Return the context's identity, creating and persisting it if needed.

    The session id and the variant are assigned independently; a stored
    variant outside A/B is reassigned.

    Args:
        store: Identity slot storage
        rng: Random source for the variant flip

    Returns:
        Tuple of (identity, created) where created is True when a new session
        id was generated by this call
    """
    created = False
    session_id = store.get(SESSION_KEY)
    if not session_id:
        session_id = str(uuid.uuid4())
        store.set(SESSION_KEY, session_id)
        created = True

    variant = store.get(VARIANT_KEY)
    if variant not in Variant.ALL:
        variant = assign_variant(rng)
        store.set(VARIANT_KEY, variant)

    return Identity(session_id=session_id, variant=variant), created
