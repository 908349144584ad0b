"""
Data models for webhook events and tracker configuration
"""

from .events import (
    Event,
    EventKind,
    StatusState,
    KNOWN_EVENT_KINDS,
)
from .tracker import TrackerConfig, API_ENDPOINT

__all__ = [
    "Event",
    "EventKind",
    "StatusState",
    "KNOWN_EVENT_KINDS",
    "TrackerConfig",
    "API_ENDPOINT",
]
