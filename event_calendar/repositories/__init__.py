"""
Event storage backends.

The SQLAlchemy backend lives in event_calendar.repositories.database and is
imported on demand so the database engine is only built when configured.
"""

from event_calendar.repositories.base import (
    REPEAT_TYPES,
    Event,
    EventForm,
    EventRepository,
    RepeatInfo,
    RepeatType,
)
from event_calendar.repositories.memory import InMemoryEventRepository

__all__ = [
    "REPEAT_TYPES",
    "Event",
    "EventForm",
    "EventRepository",
    "RepeatInfo",
    "RepeatType",
    "InMemoryEventRepository",
]
