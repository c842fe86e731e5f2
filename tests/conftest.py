"""
Pytest configuration and fixtures for Event Calendar tests.

Provides event form factories, deterministic ID generation, repositories
and database session fixtures.
"""

import itertools
from dataclasses import replace
from datetime import date
from typing import Callable, Generator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from event_calendar.models.base import Base
from event_calendar.repositories.base import Event, EventForm, RepeatInfo
from event_calendar.repositories.memory import InMemoryEventRepository
from event_calendar.services.events import EventService

HORIZON = date(2025, 12, 31)


@pytest.fixture
def horizon() -> date:
    """The recurrence horizon used throughout the tests."""
    return HORIZON


@pytest.fixture
def id_factory() -> Callable[[], str]:
    """
    Deterministic ID factory producing id-1, id-2, ...

    Returns:
        Zero-argument callable returning a new ID per call
    """
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def make_event_form() -> Callable[..., EventForm]:
    """
    Factory for event forms with sensible defaults.

    Keyword arguments override fields; ``repeat_type``, ``repeat_interval``
    and ``repeat_end_date`` build the repeat rule.
    """

    def _make(
        repeat_type: str = "none",
        repeat_interval: int = 1,
        repeat_end_date: str | None = None,
        **overrides,
    ) -> EventForm:
        form = EventForm(
            title="Test Event",
            date="2025-01-01",
            start_time="10:00",
            end_time="11:00",
            description="Test description",
            location="Test location",
            category="Work",
            repeat=RepeatInfo(
                type=repeat_type,
                interval=repeat_interval,
                end_date=repeat_end_date,
            ),
            notification_time=10,
        )
        return replace(form, **overrides)

    return _make


@pytest.fixture
def make_event(make_event_form) -> Callable[..., Event]:
    """Factory for stored events; accepts ``id`` and ``repeat_parent_id``."""

    def _make(id: str = "event-1", repeat_parent_id: str | None = None, **overrides) -> Event:
        form = make_event_form(**overrides)
        return Event(**vars(form), id=id, repeat_parent_id=repeat_parent_id)

    return _make


@pytest.fixture
def memory_repository() -> InMemoryEventRepository:
    """Empty in-memory repository."""
    return InMemoryEventRepository()


@pytest.fixture
def event_service(memory_repository, horizon, id_factory) -> EventService:
    """Event service over an in-memory repository with deterministic IDs."""
    return EventService(memory_repository, horizon=horizon, id_factory=id_factory)


@pytest.fixture(scope="function")
def session_factory() -> Generator[sessionmaker, None, None]:
    """
    Session factory bound to a clean in-memory SQLite database.

    The database is torn down after each test, ensuring test isolation.

    Yields:
        sessionmaker: factory creating sessions on the test database
    """
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    factory = sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )

    try:
        yield factory
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def db_session(session_factory) -> Generator[Session, None, None]:
    """
    Database session for direct model tests.

    Yields:
        Session: SQLAlchemy session for database operations
    """
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
