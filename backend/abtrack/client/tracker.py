"""HTTP client for recording interactions and reading analytics."""
import random
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple, Union

import httpx

from abtrack.client.identity import Identity, IdentityStore, resolve_identity
from abtrack.constants import EventName
from abtrack.core.aggregation import summarize_variants
from abtrack.core.recorder import ContainerBounds, PointerPosition, build_event, build_feedback
from abtrack.utils.logger import logger

Bound = Union[str, datetime, None]


def _bound(value: Bound) -> Optional[str]:
    if isinstance(value, datetime):
        return value.isoformat()
    return value or None


class AnalyticsClient:
    """
    Records events for one browsing context.

    The identity is resolved once by ``start()`` and then carried on every
    event. Events are validated locally before anything is sent.

    Args:
        http: httpx client whose base_url points at the API
        identity_store: Where the session id and variant are persisted
        container: Region clicks are measured against, if any
        rng: Random source for the variant flip
    """

    def __init__(
        self,
        http: httpx.Client,
        identity_store: IdentityStore,
        container: Optional[ContainerBounds] = None,
        rng: Optional[random.Random] = None,
    ):
        self.http = http
        self.identity_store = identity_store
        self.container = container
        self.rng = rng
        self._identity: Optional[Identity] = None
        self._resolved: Optional[Tuple[Identity, bool]] = None

    @property
    def identity(self) -> Identity:
        if self._identity is None:
            return self.start()
        return self._identity

    def start(self) -> Identity:
        """Resolve the identity and announce new sessions."""
        if self._identity is not None:
            return self._identity

        # A new session stays unannounced until session_started is delivered
        if self._resolved is None:
            self._resolved = resolve_identity(self.identity_store, self.rng)
        identity, created = self._resolved
        if created:
            logger.info(f"New session {identity.session_id} assigned variant {identity.variant}")
            self._send_event(
                build_event(identity.session_id, EventName.SESSION_STARTED, variant=identity.variant)
            )
        self._identity = identity
        return identity

    def _post(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        response = self.http.post(path, json=body)
        response.raise_for_status()
        return response.json()

    def _get(self, path: str, params: Dict[str, Any]) -> Any:
        response = self.http.get(path, params={k: v for k, v in params.items() if v not in (None, "")})
        response.raise_for_status()
        return response.json()

    def _send_event(self, record: Dict[str, Any]) -> str:
        body = {
            "sessionId": record["session_id"],
            "variant": record["variant"],
            "name": record["name"],
            "meta": record["meta"],
            "x": record["x"],
            "y": record["y"],
        }
        return self._post("/api/event", {k: v for k, v in body.items() if v is not None})["id"]

    def track(self, name: str, meta: Optional[Dict[str, Any]] = None) -> str:
        """Record an event without a position and return its id."""
        identity = self.identity
        return self._send_event(build_event(identity.session_id, name, variant=identity.variant, meta=meta))

    def click(
        self,
        name: str,
        pointer: PointerPosition,
        meta: Optional[Dict[str, Any]] = None,
        bounds: Optional[ContainerBounds] = None,
    ) -> str:
        """
        Record a click with its position relative to the container.

        Without a known container the click is recorded without a position.
        """
        identity = self.identity
        record = build_event(
            identity.session_id,
            name,
            variant=identity.variant,
            meta=meta,
            pointer=pointer,
            bounds=bounds or self.container,
        )
        return self._send_event(record)

    def submit_feedback(self, rating: Optional[int] = None, text: Optional[str] = None) -> None:
        """Send feedback for this session."""
        record = build_feedback(self.identity.session_id, rating, text)
        body = {"sessionId": record["session_id"], "rating": record["rating"], "text": record["text"]}
        self._post("/api/feedback", {k: v for k, v in body.items() if v is not None})

    def stats(self, start: Bound = None, end: Bound = None, event: Optional[str] = None) -> Dict[str, Any]:
        return self._get("/api/stats", {"from": _bound(start), "to": _bound(end), "event": event})

    def heatmap(self, start: Bound = None, end: Bound = None) -> List[Dict[str, float]]:
        return self._get("/api/heatmap", {"from": _bound(start), "to": _bound(end)})

    def events(
        self,
        start: Bound = None,
        end: Bound = None,
        name: Optional[str] = None,
        variant: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        return self._get(
            "/api/events",
            {"from": _bound(start), "to": _bound(end), "name": name, "variant": variant, "limit": limit},
        )

    def feedback(self, start: Bound = None, end: Bound = None) -> List[Dict[str, Any]]:
        return self._get("/api/feedback", {"from": _bound(start), "to": _bound(end)})

    def summary(self, start: Bound = None, end: Bound = None) -> List[Dict[str, Any]]:
        """Per-variant sessions, conversions and conversion rate for the window."""
        stats = self.stats(start, end)
        return summarize_variants(stats["sessionsByVariant"], stats["conversionsByVariant"])
