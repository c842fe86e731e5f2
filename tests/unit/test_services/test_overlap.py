"""
Unit tests for overlap detection.
"""

from datetime import datetime

from event_calendar.services.overlap import (
    find_overlapping_events,
    is_overlapping,
    to_datetime_range,
)


class TestToDatetimeRange:
    """Test to_datetime_range function."""

    def test_builds_start_and_end(self, make_event_form):
        form = make_event_form(date="2025-10-15", start_time="09:30", end_time="10:45")

        start, end = to_datetime_range(form)

        assert start == datetime(2025, 10, 15, 9, 30)
        assert end == datetime(2025, 10, 15, 10, 45)


class TestIsOverlapping:
    """Test is_overlapping function."""

    def test_partial_overlap(self, make_event_form):
        first = make_event_form(start_time="10:00", end_time="11:00")
        second = make_event_form(start_time="10:30", end_time="11:30")
        assert is_overlapping(first, second) is True
        assert is_overlapping(second, first) is True

    def test_contained(self, make_event_form):
        outer = make_event_form(start_time="09:00", end_time="12:00")
        inner = make_event_form(start_time="10:00", end_time="10:30")
        assert is_overlapping(outer, inner) is True

    def test_touching_does_not_overlap(self, make_event_form):
        first = make_event_form(start_time="10:00", end_time="11:00")
        second = make_event_form(start_time="11:00", end_time="12:00")
        assert is_overlapping(first, second) is False

    def test_different_days(self, make_event_form):
        first = make_event_form(date="2025-10-15")
        second = make_event_form(date="2025-10-16")
        assert is_overlapping(first, second) is False


class TestFindOverlappingEvents:
    """Test find_overlapping_events function."""

    def test_finds_overlaps_with_new_event(self, make_event, make_event_form):
        existing = [
            make_event(id="1", start_time="09:00", end_time="10:30"),
            make_event(id="2", start_time="13:00", end_time="14:00"),
        ]
        draft = make_event_form(start_time="10:00", end_time="11:00")

        assert [e.id for e in find_overlapping_events(draft, existing)] == ["1"]

    def test_edited_event_not_compared_with_itself(self, make_event):
        existing = [make_event(id="1"), make_event(id="2", start_time="10:30", end_time="11:30")]
        edited = make_event(id="1", start_time="10:15", end_time="11:15")

        assert [e.id for e in find_overlapping_events(edited, existing)] == ["2"]
