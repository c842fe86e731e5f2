"""
Service layer for Event Calendar.

Provides business logic for:
- Recurring event generation
- Event creation, series edits and deletion
- Search and calendar view filtering
- Overlap detection
- Upcoming notifications
"""

from event_calendar.services.recurrence import (
    IdFactory,
    generate_event_id,
    is_leap_year,
    days_in_month,
    parse_event_date,
    format_event_date,
    resolve_end_date,
    get_next_occurrence,
    iter_occurrence_dates,
    generate_recurring_events,
    count_occurrences,
    validate_repeat_info,
)

from event_calendar.services.events import (
    EditOption,
    EventService,
    convert_to_single_event,
)

from event_calendar.services.search import (
    CalendarView,
    search_events,
    get_week_dates,
    filter_events_by_date_range,
    get_filtered_events,
)

from event_calendar.services.overlap import (
    to_datetime_range,
    is_overlapping,
    find_overlapping_events,
)

from event_calendar.services.notifications import (
    get_upcoming_events,
    create_notification_message,
)

__all__ = [
    # Recurrence
    "IdFactory",
    "generate_event_id",
    "is_leap_year",
    "days_in_month",
    "parse_event_date",
    "format_event_date",
    "resolve_end_date",
    "get_next_occurrence",
    "iter_occurrence_dates",
    "generate_recurring_events",
    "count_occurrences",
    "validate_repeat_info",
    # Event operations
    "EditOption",
    "EventService",
    "convert_to_single_event",
    # Search
    "CalendarView",
    "search_events",
    "get_week_dates",
    "filter_events_by_date_range",
    "get_filtered_events",
    # Overlap
    "to_datetime_range",
    "is_overlapping",
    "find_overlapping_events",
    # Notifications
    "get_upcoming_events",
    "create_notification_message",
]
