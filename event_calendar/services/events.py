"""
Event service - create, edit and delete events.

Saving a recurring form expands it into occurrences and stores them one at
a time; series edits fan out to every occurrence sharing a
repeat_parent_id.
"""

import logging
from dataclasses import replace
from datetime import date
from typing import Literal, Optional, Sequence

from event_calendar.exceptions import (
    EventCalendarError,
    EventNotFoundError,
    EventSaveError,
    EventValidationError,
)
from event_calendar.repositories.base import Event, EventForm, EventRepository
from event_calendar.services.recurrence import (
    IdFactory,
    count_occurrences,
    generate_recurring_events,
    parse_event_date,
    validate_repeat_info,
)

logger = logging.getLogger(__name__)

EditOption = Literal["single", "all"]


def _sort_key(event: Event) -> tuple[str, str]:
    return (event.date, event.start_time)


def convert_to_single_event(event: Event) -> Event:
    """Detach an occurrence from its series: no repeat rule, no parent ID."""
    return replace(
        event,
        repeat=replace(event.repeat, type="none"),
        repeat_parent_id=None,
    )


class EventService:
    """
    Event operations over an EventRepository.

    Args:
        repository: Storage backend
        horizon: Recurrence horizon (defaults to the configured horizon)
        id_factory: ID generator passed to the recurrence engine
    """

    def __init__(
        self,
        repository: EventRepository,
        horizon: Optional[date] = None,
        id_factory: Optional[IdFactory] = None,
    ):
        self._repository = repository
        self._horizon = horizon
        self._id_factory = id_factory

    @property
    def repository(self) -> EventRepository:
        return self._repository

    def list_events(self) -> list[Event]:
        """All stored events ordered by date and start time."""
        return sorted(self._repository.list_events(), key=_sort_key)

    def get_event(self, event_id: str) -> Event:
        """
        Get an event by ID.

        Raises:
            EventNotFoundError: If no event has this ID
        """
        event = self._repository.get_event(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    def preview_events(self, form: EventForm) -> list[Event]:
        """Expand a form into occurrences without storing them."""
        self._validate(form)
        return generate_recurring_events(
            form, horizon=self._horizon, id_factory=self._id_factory
        )

    def count_events(self, form: EventForm) -> int:
        """Number of events a form would store, without generating them."""
        self._validate(form)
        return count_occurrences(form, horizon=self._horizon)

    def create_events(self, form: EventForm) -> list[Event]:
        """
        Expand a form and store every occurrence.

        Occurrences are stored sequentially, one create call each. If a call
        fails, the occurrences stored before it are kept.

        Returns:
            The stored events (empty when the rule yields no dates)

        Raises:
            EventValidationError: If the repeat rule is invalid
            EventSaveError: If storing an occurrence fails
        """
        events = self.preview_events(form)
        if not events:
            logger.info(f"Repeat rule for '{form.title}' produced no occurrences")
            return []

        saved: list[Event] = []
        for index, event in enumerate(events):
            try:
                saved.append(self._repository.create_event(event))
            except EventCalendarError as e:
                logger.error(
                    f"Failed to save occurrence {index + 1}/{len(events)} "
                    f"of '{form.title}': {e}"
                )
                raise EventSaveError(
                    f"Failed to save event {index + 1}",
                    index=index,
                    saved_count=len(saved),
                    original_error=e,
                ) from e

        logger.info(f"Saved {len(saved)} event(s) for '{form.title}'")
        return saved

    def update_event(
        self,
        event: Event,
        edit_option: Optional[EditOption] = None,
    ) -> list[Event]:
        """
        Update an event or its whole series.

        - "single" on a series occurrence detaches it and updates it alone
        - "all" on a series occurrence applies the edit to every occurrence,
          each keeping its own ID and date
        - otherwise the event is updated as-is

        Returns:
            The updated events

        Raises:
            EventNotFoundError: If an event to update does not exist
            EventValidationError: If the repeat rule is invalid
        """
        self._validate(event)

        if edit_option == "single" and event.repeat_parent_id:
            logger.info(f"Detaching event {event.id} from series {event.repeat_parent_id}")
            return [self._repository.update_event(convert_to_single_event(event))]

        if edit_option == "all" and event.repeat_parent_id:
            return self._update_series(event)

        return [self._repository.update_event(event)]

    def _update_series(self, event: Event) -> list[Event]:
        related = self._repository.list_by_parent(event.repeat_parent_id)
        if not related:
            raise EventNotFoundError(event.id)

        updated = []
        for occurrence in sorted(related, key=_sort_key):
            updated.append(
                self._repository.update_event(
                    replace(
                        occurrence,
                        title=event.title,
                        start_time=event.start_time,
                        end_time=event.end_time,
                        description=event.description,
                        location=event.location,
                        category=event.category,
                        repeat=event.repeat,
                        notification_time=event.notification_time,
                    )
                )
            )
        logger.info(f"Updated {len(updated)} event(s) in series {event.repeat_parent_id}")
        return updated

    def delete_event(self, event_id: str) -> None:
        """
        Delete one event.

        Raises:
            EventNotFoundError: If no event has this ID
        """
        self._repository.delete_event(event_id)
        logger.info(f"Deleted event {event_id}")

    def delete_series(self, repeat_parent_id: str) -> int:
        """
        Delete every occurrence of a series.

        Returns:
            Number of events deleted

        Raises:
            EventNotFoundError: If the series has no occurrences
        """
        related: Sequence[Event] = self._repository.list_by_parent(repeat_parent_id)
        if not related:
            raise EventNotFoundError(repeat_parent_id)

        for occurrence in related:
            self._repository.delete_event(occurrence.id)
        logger.info(f"Deleted {len(related)} event(s) in series {repeat_parent_id}")
        return len(related)

    @staticmethod
    def _validate(form: EventForm) -> None:
        try:
            parse_event_date(form.date)
        except (ValueError, OverflowError) as e:
            raise EventValidationError(f"Invalid event date: {form.date}", original_error=e) from e

        is_valid, error = validate_repeat_info(form.repeat)
        if not is_valid:
            raise EventValidationError(error)
