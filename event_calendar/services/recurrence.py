"""
Recurring event generation.

Expands a recurring event form into one event per occurrence:
- daily and weekly rules step by 1 and 7 days
- monthly rules keep the anchor day-of-month and skip months too short for it
- yearly rules keep month/day; February 29 anchors only land on leap years
- every occurrence is bounded by the rule end date and a global horizon

Uses python-dateutil for ISO date parsing and month arithmetic.
"""

import calendar
import logging
import re
import uuid
from dataclasses import fields
from datetime import date, datetime, timedelta
from typing import Callable, Iterator, Optional

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta

from event_calendar.config import get_settings
from event_calendar.repositories.base import REPEAT_TYPES, Event, EventForm, RepeatInfo

logger = logging.getLogger(__name__)

IdFactory = Callable[[], str]

_FORM_FIELDS = tuple(f.name for f in fields(EventForm))

ISO_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def generate_event_id() -> str:
    """Default ID factory: a random UUID4 string."""
    return str(uuid.uuid4())


def is_leap_year(year: int) -> bool:
    """Gregorian leap year: divisible by 4, except centuries not divisible by 400."""
    return calendar.isleap(year)


def days_in_month(year: int, month: int) -> int:
    """Number of days in the given month."""
    return calendar.monthrange(year, month)[1]


def parse_event_date(value: str) -> date:
    """
    Parse a calendar date string in exactly the YYYY-MM-DD form.

    Other ISO 8601 spellings (20250115, 2025-01, 2025-W03-3,
    2025-01-15T10:00) are rejected.

    Raises:
        ValueError: If the string is not a valid YYYY-MM-DD date
    """
    if not isinstance(value, str) or not ISO_DATE_PATTERN.fullmatch(value):
        raise ValueError(f"Expected a YYYY-MM-DD date, got {value!r}")
    return isoparse(value).date()


def format_event_date(value: date) -> str:
    """Format a date (or the date part of a datetime) as YYYY-MM-DD."""
    return value.strftime("%Y-%m-%d")


def _as_date(value: date) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def _resolve_horizon(horizon: Optional[date]) -> date:
    if horizon is None:
        return get_settings().recurrence_horizon
    return horizon


def resolve_end_date(end_date: Optional[str], horizon: Optional[date] = None) -> date:
    """
    Compute the last date a series may occur on.

    Args:
        end_date: Rule end date (ISO string), or None for open-ended rules
        horizon: Global ceiling (defaults to the configured horizon)

    Returns:
        The earlier of the rule end date and the horizon
    """
    horizon = _resolve_horizon(horizon)
    if not end_date:
        return horizon
    return min(parse_event_date(end_date), horizon)


def _next_monthly(current: date, horizon: date) -> Optional[date]:
    anchor_day = current.day
    month_start = date(current.year, current.month, 1)
    while True:
        month_start += relativedelta(months=1)
        if month_start > horizon:
            return None
        if days_in_month(month_start.year, month_start.month) >= anchor_day:
            candidate = current.replace(year=month_start.year, month=month_start.month)
            if _as_date(candidate) > horizon:
                return None
            return candidate


def _next_yearly(current: date, horizon: date) -> Optional[date]:
    if (current.month, current.day) != (2, 29):
        return current.replace(year=current.year + 1)

    year = current.year + 1
    while not is_leap_year(year):
        year += 1
    candidate = current.replace(year=year)
    if _as_date(candidate) > horizon:
        return None
    return candidate


def get_next_occurrence(
    current_date: date,
    repeat_type: str,
    horizon: Optional[date] = None,
) -> Optional[date]:
    """
    Compute the next date of a recurrence.

    Monthly rules skip months that have no day matching the anchor
    (e.g. day 31 skips April). Yearly rules anchored on February 29 jump
    to the next leap year.

    Args:
        current_date: Anchor date (a datetime keeps its time of day)
        repeat_type: 'none', 'daily', 'weekly', 'monthly' or 'yearly'
        horizon: Global ceiling (defaults to the configured horizon)

    Returns:
        The next date, or None for 'none' and for monthly/yearly rules
        that cannot continue before the horizon

    Raises:
        ValueError: If the repeat type is unknown
    """
    if repeat_type == "none":
        return None
    if repeat_type == "daily":
        return current_date + timedelta(days=1)
    if repeat_type == "weekly":
        return current_date + timedelta(weeks=1)

    horizon = _resolve_horizon(horizon)
    if repeat_type == "monthly":
        return _next_monthly(current_date, horizon)
    if repeat_type == "yearly":
        return _next_yearly(current_date, horizon)

    raise ValueError(f"Unknown repeat type: {repeat_type}")


def iter_occurrence_dates(
    start_date: date,
    repeat_type: str,
    end_date: date,
    horizon: Optional[date] = None,
) -> Iterator[date]:
    """
    Yield every occurrence date from start_date through end_date.

    Nothing is yielded when end_date precedes start_date.
    """
    current: Optional[date] = start_date
    while current is not None and current <= end_date:
        yield current
        current = get_next_occurrence(current, repeat_type, horizon=horizon)


def _instantiate(
    base_event: EventForm,
    event_id: str,
    occurrence_date: Optional[date] = None,
    repeat_parent_id: Optional[str] = None,
) -> Event:
    values = {name: getattr(base_event, name) for name in _FORM_FIELDS}
    if occurrence_date is not None:
        values["date"] = format_event_date(occurrence_date)
    return Event(**values, id=event_id, repeat_parent_id=repeat_parent_id)


def generate_recurring_events(
    base_event: EventForm,
    *,
    horizon: Optional[date] = None,
    id_factory: Optional[IdFactory] = None,
) -> list[Event]:
    """
    Expand an event form into stored-event records, one per occurrence.

    Non-recurring forms yield a single event without a repeat_parent_id.
    Recurring forms yield events dated from the form date up to the rule
    end date clamped to the horizon, all sharing one repeat_parent_id.
    An end date before the start date yields no events.

    Args:
        base_event: Form data; every field but the date is copied verbatim
        horizon: Global ceiling (defaults to the configured horizon)
        id_factory: Zero-argument callable producing unique IDs

    Returns:
        Events ordered by ascending date
    """
    id_factory = id_factory or generate_event_id
    repeat_type = base_event.repeat.type

    if repeat_type == "none":
        return [_instantiate(base_event, id_factory())]

    horizon = _resolve_horizon(horizon)
    repeat_parent_id = id_factory()
    start_date = parse_event_date(base_event.date)
    end_date = resolve_end_date(base_event.repeat.end_date, horizon)

    if end_date < start_date:
        logger.debug(
            f"No occurrences for '{base_event.title}': "
            f"end {end_date} precedes start {start_date}"
        )
        return []

    events = [
        _instantiate(base_event, id_factory(), occurrence, repeat_parent_id)
        for occurrence in iter_occurrence_dates(start_date, repeat_type, end_date, horizon)
    ]

    logger.debug(
        f"Generated {len(events)} {repeat_type} occurrences of '{base_event.title}' "
        f"between {start_date} and {end_date}"
    )
    return events


def count_occurrences(base_event: EventForm, horizon: Optional[date] = None) -> int:
    """
    Count the events a form would expand to, without generating IDs.

    Useful for previewing a rule before saving it.
    """
    if not base_event.repeat.is_recurring:
        return 1

    start_date = parse_event_date(base_event.date)
    end_date = resolve_end_date(base_event.repeat.end_date, horizon)
    return sum(
        1 for _ in iter_occurrence_dates(start_date, base_event.repeat.type, end_date, horizon)
    )


def validate_repeat_info(repeat: RepeatInfo) -> tuple[bool, Optional[str]]:
    """
    Validate a repeat rule.

    Args:
        repeat: Rule to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if repeat.type not in REPEAT_TYPES:
        return False, f"Unknown repeat type: {repeat.type}"

    if not repeat.is_recurring:
        return True, None

    if repeat.interval < 1:
        return False, "Repeat interval must be at least 1"

    if repeat.end_date:
        try:
            parse_event_date(repeat.end_date)
        except (ValueError, OverflowError):
            return False, f"Invalid repeat end date: {repeat.end_date}"

    return True, None
