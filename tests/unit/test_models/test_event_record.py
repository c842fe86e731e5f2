"""
Unit tests for the EventRecord model.
"""

from datetime import date

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from event_calendar.models import EventRecord


def _record(**overrides) -> EventRecord:
    fields = dict(
        id="e1",
        title="Team meeting",
        date=date(2025, 10, 15),
        start_time="09:00",
        end_time="10:00",
    )
    fields.update(overrides)
    return EventRecord(**fields)


class TestEventRecord:
    """Test EventRecord persistence and defaults."""

    def test_defaults(self, db_session):
        db_session.add(_record())
        db_session.commit()

        record = db_session.get(EventRecord, "e1")

        assert record.description == ""
        assert record.location == ""
        assert record.category == ""
        assert record.repeat_type == "none"
        assert record.repeat_interval == 1
        assert record.repeat_end_date is None
        assert record.repeat_parent_id is None
        assert record.notification_time == 10
        assert record.created_at is not None

    def test_query_by_series(self, db_session):
        db_session.add_all(
            [
                _record(id="a", repeat_type="weekly", repeat_parent_id="p1"),
                _record(id="b", date=date(2025, 10, 22), repeat_type="weekly", repeat_parent_id="p1"),
                _record(id="c"),
            ]
        )
        db_session.commit()

        ids = db_session.scalars(
            select(EventRecord.id).where(EventRecord.repeat_parent_id == "p1")
        ).all()

        assert sorted(ids) == ["a", "b"]

    def test_title_required(self, db_session):
        db_session.add(_record(title=None))

        with pytest.raises(IntegrityError):
            db_session.commit()

    def test_to_dict(self, db_session):
        db_session.add(_record(repeat_end_date=date(2025, 12, 31)))
        db_session.commit()

        data = db_session.get(EventRecord, "e1").to_dict()

        assert data["title"] == "Team meeting"
        assert data["date"] == date(2025, 10, 15)
        assert data["repeat_end_date"] == date(2025, 12, 31)

    def test_repr(self):
        assert repr(_record()) == (
            "<EventRecord(title='Team meeting', date='2025-10-15', repeat='None')>"
        )
