from .analytics_event import (
    MAX_EVENT_SKEW_MS,
    MIN_EVENT_TIMESTAMP_MS,
    AnalyticsEvent,
    IngestedEvent,
)

__all__ = [
    "AnalyticsEvent",
    "IngestedEvent",
    "MAX_EVENT_SKEW_MS",
    "MIN_EVENT_TIMESTAMP_MS",
]
