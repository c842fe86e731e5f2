"""
SQLAlchemy models for Event Calendar.

This module exports all database models for easy importing.
"""

from event_calendar.models.base import Base, BaseModel
from event_calendar.models.events import EventRecord

__all__ = [
    "Base",
    "BaseModel",
    "EventRecord",
]
