"""
Event repository protocol and base types.

Defines the event records shared by every layer and the interface for
event storage backends (in-memory collection, SQL database).
"""

from abc import abstractmethod
from dataclasses import dataclass, field
from typing import Literal, Optional, Protocol, Sequence

RepeatType = Literal["none", "daily", "weekly", "monthly", "yearly"]

REPEAT_TYPES: tuple[str, ...] = ("none", "daily", "weekly", "monthly", "yearly")


@dataclass(frozen=True)
class RepeatInfo:
    """
    Repeat rule attached to an event.

    ``interval`` and ``end_date`` are ignored when ``type`` is "none".
    ``end_date`` is an ISO date string (YYYY-MM-DD).
    """

    type: RepeatType = "none"
    interval: int = 1
    end_date: Optional[str] = None

    @property
    def is_recurring(self) -> bool:
        """Check if the rule produces more than a single event."""
        return self.type != "none"


@dataclass(frozen=True)
class EventForm:
    """
    Event data as entered by the user, before it has an identity.

    ``date`` is an ISO date, ``start_time``/``end_time`` are HH:MM and
    ``notification_time`` is the reminder lead time in minutes.
    """

    title: str
    date: str
    start_time: str
    end_time: str
    description: str = ""
    location: str = ""
    category: str = ""
    repeat: RepeatInfo = field(default_factory=RepeatInfo)
    notification_time: int = 10


@dataclass(frozen=True, kw_only=True)
class Event(EventForm):
    """
    A stored event.

    Occurrences generated from one recurring form share ``repeat_parent_id``;
    it is None for one-off events.
    """

    id: str
    repeat_parent_id: Optional[str] = None


class EventRepository(Protocol):
    """
    Protocol for event storage backends.

    Implementations:
    - InMemoryEventRepository: dict-backed key-value collection
    - SQLAlchemyEventRepository: uses the local database

    Every call persists or reads a single event; batches are issued by
    the caller one request at a time.
    """

    @abstractmethod
    def list_events(self) -> Sequence[Event]:
        """
        Get all stored events.

        Returns:
            Sequence of events in insertion order
        """
        ...

    @abstractmethod
    def get_event(self, event_id: str) -> Optional[Event]:
        """
        Get a single event by ID.

        Args:
            event_id: Event ID

        Returns:
            Event or None if not found
        """
        ...

    @abstractmethod
    def create_event(self, event: Event) -> Event:
        """
        Store a new event.

        Args:
            event: Event to store (carries its own ID)

        Returns:
            The stored event
        """
        ...

    @abstractmethod
    def update_event(self, event: Event) -> Event:
        """
        Replace an existing event.

        Args:
            event: New event data, matched by ID

        Returns:
            The stored event

        Raises:
            EventNotFoundError: If no event has this ID
        """
        ...

    @abstractmethod
    def delete_event(self, event_id: str) -> None:
        """
        Delete an event.

        Args:
            event_id: Event ID

        Raises:
            EventNotFoundError: If no event has this ID
        """
        ...

    @abstractmethod
    def list_by_parent(self, repeat_parent_id: str) -> Sequence[Event]:
        """
        Get every occurrence generated from one recurring form.

        Args:
            repeat_parent_id: Shared series identifier

        Returns:
            Sequence of events in the series
        """
        ...
