"""
Event model.

Entities:
- EventRecord: a stored event or one occurrence of a recurring series
"""

import datetime
from typing import Optional

from sqlalchemy import Date, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from event_calendar.models.base import BaseModel


class EventRecord(BaseModel):
    """
    Represents a stored event.

    Recurring events are stored expanded: one row per occurrence, all rows
    of a series sharing ``repeat_parent_id``. The repeat rule is kept on
    every row so a series can be edited as a whole.
    """

    __tablename__ = "events"

    title: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        doc="Event title"
    )

    # Timing
    date: Mapped[datetime.date] = mapped_column(
        Date,
        nullable=False,
        doc="Calendar date of this occurrence"
    )

    start_time: Mapped[str] = mapped_column(
        String(5),
        nullable=False,
        doc="Start time of day (HH:MM)"
    )

    end_time: Mapped[str] = mapped_column(
        String(5),
        nullable=False,
        doc="End time of day (HH:MM)"
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        doc="Free-text description"
    )

    location: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        default="",
        doc="Event location"
    )

    category: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="",
        doc="Event category"
    )

    # Repeat rule
    repeat_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="none",
        doc="Repeat type: 'none', 'daily', 'weekly', 'monthly', 'yearly'"
    )

    repeat_interval: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
        doc="Repeat interval"
    )

    repeat_end_date: Mapped[Optional[datetime.date]] = mapped_column(
        Date,
        nullable=True,
        doc="Repeat rule end date (None means up to the recurrence horizon)"
    )

    repeat_parent_id: Mapped[Optional[str]] = mapped_column(
        String(64),
        nullable=True,
        doc="Series identifier shared by all occurrences of a recurring event"
    )

    notification_time: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=10,
        doc="Reminder lead time in minutes"
    )

    __table_args__ = (
        Index("idx_event_date", "date"),
        Index("idx_event_repeat_parent", "repeat_parent_id"),
    )

    def __repr__(self) -> str:
        """String representation showing title and date."""
        return f"<EventRecord(title='{self.title}', date='{self.date}', repeat='{self.repeat_type}')>"
