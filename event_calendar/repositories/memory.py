"""
In-memory event repository.

A key-value collection of events keyed by ID, used as the default storage
backend and in tests.
"""

import logging
import threading
from typing import Iterable, Optional, Sequence

from event_calendar.exceptions import EventCalendarError, EventNotFoundError
from event_calendar.repositories.base import Event

logger = logging.getLogger(__name__)


class InMemoryEventRepository:
    """
    Event repository backed by a dict.

    Insertion order is preserved. A lock serializes access because sync
    FastAPI endpoints run in a thread pool.
    """

    def __init__(self, initial_events: Optional[Iterable[Event]] = None):
        self._events: dict[str, Event] = {}
        self._lock = threading.Lock()
        for event in initial_events or ():
            self._events[event.id] = event

    def list_events(self) -> Sequence[Event]:
        with self._lock:
            return list(self._events.values())

    def get_event(self, event_id: str) -> Optional[Event]:
        with self._lock:
            return self._events.get(event_id)

    def create_event(self, event: Event) -> Event:
        with self._lock:
            if event.id in self._events:
                raise EventCalendarError(f"Event {event.id} already exists")
            self._events[event.id] = event
        logger.debug(f"Stored event {event.id} on {event.date}")
        return event

    def update_event(self, event: Event) -> Event:
        with self._lock:
            if event.id not in self._events:
                raise EventNotFoundError(event.id)
            self._events[event.id] = event
        return event

    def delete_event(self, event_id: str) -> None:
        with self._lock:
            if event_id not in self._events:
                raise EventNotFoundError(event_id)
            del self._events[event_id]

    def list_by_parent(self, repeat_parent_id: str) -> Sequence[Event]:
        with self._lock:
            return [
                event
                for event in self._events.values()
                if event.repeat_parent_id == repeat_parent_id
            ]

    def clear(self) -> None:
        """Remove every stored event."""
        with self._lock:
            self._events.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)
