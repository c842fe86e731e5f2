"""
Event search and calendar view filtering.

Week views run Sunday through Saturday; month views cover the calendar
month containing the reference date.
"""

from datetime import date, timedelta
from typing import Iterable, Literal, Sequence

from dateutil.relativedelta import SU, relativedelta

from event_calendar.repositories.base import Event
from event_calendar.services.recurrence import days_in_month, parse_event_date

CalendarView = Literal["week", "month"]


def search_events(events: Iterable[Event], term: str | None) -> list[Event]:
    """
    Case-insensitive substring search over title, description and location.

    An empty term matches every event.
    """
    if not term:
        return list(events)

    needle = term.strip().lower()
    return [
        event
        for event in events
        if any(needle in value.lower() for value in (event.title, event.description, event.location))
    ]


def get_week_dates(current: date) -> list[date]:
    """The seven dates, Sunday to Saturday, of the week containing current."""
    sunday = current + relativedelta(weekday=SU(-1))
    return [sunday + timedelta(days=offset) for offset in range(7)]


def filter_events_by_date_range(events: Iterable[Event], start: date, end: date) -> list[Event]:
    """Events dated between start and end, inclusive."""
    return [event for event in events if start <= parse_event_date(event.date) <= end]


def get_filtered_events(
    events: Sequence[Event],
    term: str | None,
    current_date: date,
    view: CalendarView,
) -> list[Event]:
    """
    Search events, then keep those in the week or month of current_date.

    Raises:
        ValueError: If the view is unknown
    """
    matches = search_events(events, term)

    if view == "week":
        week = get_week_dates(current_date)
        return filter_events_by_date_range(matches, week[0], week[-1])

    if view == "month":
        first = current_date.replace(day=1)
        last = current_date.replace(day=days_in_month(current_date.year, current_date.month))
        return filter_events_by_date_range(matches, first, last)

    raise ValueError(f"Unknown calendar view: {view}")
