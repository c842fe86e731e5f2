"""
Unit tests for the SQLAlchemy event repository.

Runs against an in-memory SQLite database.
"""

from dataclasses import replace
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from event_calendar.exceptions import EventCalendarError, EventNotFoundError
from event_calendar.repositories.base import RepeatInfo
from event_calendar.repositories.database import SQLAlchemyEventRepository
from event_calendar.services.events import EventService


@pytest.fixture
def repository(session_factory):
    return SQLAlchemyEventRepository(session_factory)


class TestSQLAlchemyEventRepository:
    """Test SQLAlchemyEventRepository CRUD operations."""

    def test_create_and_get_round_trips_fields(self, repository, make_event):
        event = make_event(
            id="e1",
            repeat_parent_id="p1",
            repeat_type="monthly",
            repeat_end_date="2025-06-30",
            notification_time=60,
        )

        repository.create_event(event)

        assert repository.get_event("e1") == event

    def test_repeat_without_end_date(self, repository, make_event):
        repository.create_event(make_event(id="e1", repeat_type="daily"))

        assert repository.get_event("e1").repeat == RepeatInfo(type="daily")

    def test_get_missing_returns_none(self, repository):
        assert repository.get_event("missing") is None

    def test_list_ordered_by_date_and_time(self, repository, make_event):
        repository.create_event(make_event(id="late", date="2025-02-01"))
        repository.create_event(
            make_event(id="afternoon", date="2025-01-01", start_time="14:00", end_time="15:00")
        )
        repository.create_event(make_event(id="morning", date="2025-01-01"))

        assert [event.id for event in repository.list_events()] == [
            "morning",
            "afternoon",
            "late",
        ]

    def test_update(self, repository, make_event):
        event = repository.create_event(make_event(id="e1"))

        repository.update_event(replace(event, title="Renamed", date="2025-03-01"))

        stored = repository.get_event("e1")
        assert stored.title == "Renamed"
        assert stored.date == "2025-03-01"

    def test_update_missing(self, repository, make_event):
        with pytest.raises(EventNotFoundError):
            repository.update_event(make_event(id="missing"))

    def test_delete(self, repository, make_event):
        repository.create_event(make_event(id="e1"))

        repository.delete_event("e1")

        assert repository.list_events() == []

    def test_delete_missing(self, repository):
        with pytest.raises(EventNotFoundError):
            repository.delete_event("missing")

    def test_list_by_parent(self, repository, make_event):
        repository.create_event(make_event(id="b", date="2025-01-08", repeat_parent_id="p1"))
        repository.create_event(make_event(id="a", date="2025-01-01", repeat_parent_id="p1"))
        repository.create_event(make_event(id="x", repeat_parent_id="p2"))

        assert [event.id for event in repository.list_by_parent("p1")] == ["a", "b"]

    def test_duplicate_id_raises_storage_error(self, repository, make_event):
        repository.create_event(make_event(id="e1"))

        with pytest.raises(EventCalendarError, match="Database operation failed"):
            repository.create_event(make_event(id="e1"))

    def test_database_error_rolls_back(self, make_event):
        session = MagicMock()
        session.commit.side_effect = OperationalError("INSERT", {}, Exception("disk full"))
        repository = SQLAlchemyEventRepository(lambda: session)

        with pytest.raises(EventCalendarError) as exc_info:
            repository.create_event(make_event(id="e1"))

        assert isinstance(exc_info.value.original_error, OperationalError)
        session.rollback.assert_called_once()
        session.close.assert_called_once()


class TestServiceOverDatabase:
    """Test EventService with database storage."""

    def test_series_stored_and_deleted(self, repository, horizon, id_factory, make_event_form):
        service = EventService(repository, horizon=horizon, id_factory=id_factory)
        form = make_event_form(
            date="2025-01-31", repeat_type="monthly", repeat_end_date="2025-12-31"
        )

        created = service.create_events(form)

        assert [event.date for event in created] == [
            "2025-01-31",
            "2025-03-31",
            "2025-05-31",
            "2025-07-31",
            "2025-08-31",
            "2025-10-31",
            "2025-12-31",
        ]
        assert service.list_events() == created

        assert service.delete_series(created[0].repeat_parent_id) == len(created)
        assert repository.list_events() == []
