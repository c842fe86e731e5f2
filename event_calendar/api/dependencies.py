"""
FastAPI dependency injection providers.

Provides the event service backed by the configured storage backend.
"""

import logging
from typing import Optional

from event_calendar.config import get_settings
from event_calendar.repositories.base import EventRepository
from event_calendar.repositories.memory import InMemoryEventRepository
from event_calendar.services.events import EventService

logger = logging.getLogger(__name__)

# Global service instance (initialized at startup or on first use)
_event_service: Optional[EventService] = None


def _create_repository() -> EventRepository:
    """Build the repository for the configured storage backend."""
    settings = get_settings()

    if settings.uses_database:
        from event_calendar.database import init_db
        from event_calendar.repositories.database import SQLAlchemyEventRepository

        init_db()
        logger.info("Using database event storage")
        return SQLAlchemyEventRepository()

    logger.info("Using in-memory event storage")
    return InMemoryEventRepository()


def init_event_service(repository: Optional[EventRepository] = None) -> EventService:
    """Initialize the event service at application startup."""
    global _event_service
    _event_service = EventService(
        repository or _create_repository(),
        horizon=get_settings().recurrence_horizon,
    )
    logger.info("Event service initialized")
    return _event_service


def get_event_service() -> EventService:
    """
    Dependency injection for the event service.

    Returns the singleton service, creating it on first use.
    """
    if _event_service is None:
        return init_event_service()
    return _event_service


def reset_event_service() -> None:
    """Reset the event service (useful for testing)."""
    global _event_service
    _event_service = None
