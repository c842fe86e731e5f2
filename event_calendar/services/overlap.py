"""
Overlap detection between events.

Two events overlap when their [start, end) intervals intersect; touching
events (one ends when the other starts) do not.
"""

from datetime import datetime
from typing import Iterable

from dateutil.parser import isoparse

from event_calendar.repositories.base import Event, EventForm


def to_datetime_range(event: EventForm) -> tuple[datetime, datetime]:
    """Start and end datetimes built from the event date and times of day."""
    start = isoparse(f"{event.date}T{event.start_time}")
    end = isoparse(f"{event.date}T{event.end_time}")
    return start, end


def is_overlapping(first: EventForm, second: EventForm) -> bool:
    """Check whether two events share any time."""
    first_start, first_end = to_datetime_range(first)
    second_start, second_end = to_datetime_range(second)
    return first_start < second_end and second_start < first_end


def find_overlapping_events(new_event: EventForm, events: Iterable[Event]) -> list[Event]:
    """
    Existing events that overlap new_event.

    When new_event is itself stored (has an ID), it is not compared with
    its own stored copy.
    """
    new_id = getattr(new_event, "id", None)
    return [
        event
        for event in events
        if event.id != new_id and is_overlapping(event, new_event)
    ]
