"""
SQLAlchemy event repository.

Stores events as EventRecord rows. Each call runs in its own session and
commits on success, so a failed call never affects earlier ones.
"""

import logging
from contextlib import contextmanager
from typing import Callable, Generator, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from event_calendar.exceptions import EventCalendarError, EventNotFoundError
from event_calendar.models.events import EventRecord
from event_calendar.repositories.base import Event, RepeatInfo
from event_calendar.services.recurrence import format_event_date, parse_event_date

logger = logging.getLogger(__name__)


def _to_record(event: Event) -> EventRecord:
    """Map an Event onto a new EventRecord row."""
    record = EventRecord(id=event.id)
    _apply_event(record, event)
    return record


def _apply_event(record: EventRecord, event: Event) -> None:
    """Copy every Event field except the ID onto a row."""
    record.title = event.title
    record.date = parse_event_date(event.date)
    record.start_time = event.start_time
    record.end_time = event.end_time
    record.description = event.description
    record.location = event.location
    record.category = event.category
    record.repeat_type = event.repeat.type
    record.repeat_interval = event.repeat.interval
    record.repeat_end_date = (
        parse_event_date(event.repeat.end_date) if event.repeat.end_date else None
    )
    record.repeat_parent_id = event.repeat_parent_id
    record.notification_time = event.notification_time


def _to_event(record: EventRecord) -> Event:
    """Map a row back to an Event."""
    return Event(
        id=record.id,
        title=record.title,
        date=format_event_date(record.date),
        start_time=record.start_time,
        end_time=record.end_time,
        description=record.description,
        location=record.location,
        category=record.category,
        repeat=RepeatInfo(
            type=record.repeat_type,
            interval=record.repeat_interval,
            end_date=format_event_date(record.repeat_end_date) if record.repeat_end_date else None,
        ),
        notification_time=record.notification_time,
        repeat_parent_id=record.repeat_parent_id,
    )


class SQLAlchemyEventRepository:
    """
    Event repository backed by the local database.

    Args:
        session_factory: Callable returning a new Session
            (defaults to event_calendar.database.SessionLocal)
    """

    def __init__(self, session_factory: Optional[Callable[[], Session]] = None):
        if session_factory is None:
            from event_calendar.database import SessionLocal

            session_factory = SessionLocal
        self._session_factory = session_factory

    @contextmanager
    def _session(self) -> Generator[Session, None, None]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Database operation failed: {e}")
            raise EventCalendarError("Database operation failed", original_error=e) from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def list_events(self) -> Sequence[Event]:
        with self._session() as session:
            records = session.scalars(
                select(EventRecord).order_by(EventRecord.date, EventRecord.start_time)
            ).all()
            return [_to_event(record) for record in records]

    def get_event(self, event_id: str) -> Optional[Event]:
        with self._session() as session:
            record = session.get(EventRecord, event_id)
            return _to_event(record) if record else None

    def create_event(self, event: Event) -> Event:
        with self._session() as session:
            session.add(_to_record(event))
        logger.debug(f"Stored event {event.id} on {event.date}")
        return event

    def update_event(self, event: Event) -> Event:
        with self._session() as session:
            record = session.get(EventRecord, event.id)
            if record is None:
                raise EventNotFoundError(event.id)
            _apply_event(record, event)
        return event

    def delete_event(self, event_id: str) -> None:
        with self._session() as session:
            record = session.get(EventRecord, event_id)
            if record is None:
                raise EventNotFoundError(event_id)
            session.delete(record)

    def list_by_parent(self, repeat_parent_id: str) -> Sequence[Event]:
        with self._session() as session:
            records = session.scalars(
                select(EventRecord)
                .where(EventRecord.repeat_parent_id == repeat_parent_id)
                .order_by(EventRecord.date)
            ).all()
            return [_to_event(record) for record in records]
