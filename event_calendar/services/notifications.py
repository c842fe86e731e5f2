"""
Notification lookup for upcoming events.

An event is due for notification once its start is no more than
notification_time minutes away and still in the future.
"""

import logging
from datetime import datetime
from typing import Iterable

from event_calendar.repositories.base import Event
from event_calendar.services.overlap import to_datetime_range

logger = logging.getLogger(__name__)


def get_upcoming_events(
    events: Iterable[Event],
    now: datetime,
    notified_ids: Iterable[str] = (),
) -> list[Event]:
    """
    Events whose notification window contains now.

    Args:
        events: Candidate events
        now: Current local time (naive, like event times)
        notified_ids: IDs already notified, which are skipped

    Returns:
        Events to notify about, in input order
    """
    notified = set(notified_ids)
    upcoming = []
    for event in events:
        if event.id in notified:
            continue
        start, _ = to_datetime_range(event)
        minutes_until_start = (start - now).total_seconds() / 60
        if 0 < minutes_until_start <= event.notification_time:
            upcoming.append(event)

    if upcoming:
        logger.debug(f"{len(upcoming)} event(s) due for notification at {now}")
    return upcoming


def create_notification_message(event: Event) -> str:
    """Reminder text shown to the user."""
    return f"{event.notification_time}분 후 {event.title} 일정이 시작됩니다."
