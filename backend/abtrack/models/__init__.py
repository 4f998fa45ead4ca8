"""Models package."""
from abtrack.models.event import Event
from abtrack.models.feedback import Feedback

__all__ = ["Event", "Feedback"]
