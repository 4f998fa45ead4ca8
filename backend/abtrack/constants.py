"""Application-wide constants."""


class EventName:
    """Well-known event names. Callers may record any other name."""
    SESSION_STARTED = "session_started"
    PAGE_CLICK = "page_click"
    CTA_CLICKED = "cta_clicked"
    SECONDARY_CLICKED = "secondary_clicked"


class Variant:
    """A/B experiment arms."""
    A = "A"
    B = "B"
    ALL = (A, B)
    DEFAULT = A


# Event name counted as a conversion for the experiment
CONVERSION_EVENT = EventName.CTA_CLICKED

# Read caps
HEATMAP_POINT_LIMIT = 2000
EVENTS_DEFAULT_LIMIT = 5000
EVENTS_MAX_LIMIT = 20000
FEEDBACK_LIMIT = 200

# Seeding
SEED_DEFAULT_COUNT = 40
