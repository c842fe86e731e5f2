"""
FastAPI application for Event Calendar.

This is the main entry point for the HTTP API, providing:
- Event CRUD endpoints, including recurring series creation and edits
- Recurrence preview and overlap checking
- Upcoming notification lookup
- Health and status endpoints
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Literal, Optional

from dateutil.parser import isoparse
from fastapi import Depends, FastAPI, HTTPException, Query, status
from fastapi.responses import JSONResponse

from event_calendar import __version__
from event_calendar.api.dependencies import get_event_service
from event_calendar.api.middleware import RequestLoggingMiddleware, get_request_id
from event_calendar.api.models import (
    DeleteEventResponse,
    DeleteSeriesResponse,
    EventBatchResponse,
    EventFormModel,
    EventListResponse,
    ErrorResponse,
    EventModel,
    HealthResponse,
    NotificationListResponse,
    NotificationModel,
    OccurrenceCountResponse,
    OverlapResponse,
    UpdateEventRequest,
)
from event_calendar.config import configure_logging, get_settings
from event_calendar.exceptions import (
    EventCalendarError,
    EventNotFoundError,
    EventSaveError,
    EventValidationError,
)
from event_calendar.repositories.base import Event
from event_calendar.services.events import EventService
from event_calendar.services.notifications import (
    create_notification_message,
    get_upcoming_events,
)
from event_calendar.services.overlap import find_overlapping_events
from event_calendar.services.recurrence import format_event_date, parse_event_date
from event_calendar.services.search import get_filtered_events, search_events

logger = logging.getLogger(__name__)


# =============================================================================
# Application Lifecycle
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    configure_logging()
    logger.info("Starting Event Calendar API")
    get_event_service()
    logger.info("Event Calendar API started")

    yield

    logger.info("Shutting down Event Calendar API")


app = FastAPI(
    title="Event Calendar API",
    description="""
# Event Calendar API

Calendar event storage with recurring-event generation.

## Recurring events

**POST /api/events** with a repeat rule stores one event per occurrence.
All occurrences share a `repeatParentId`. Occurrences never go past the
rule's `endDate` or the configured recurrence horizon.

- Monthly rules skip months without the anchor day (e.g. the 31st)
- Yearly rules anchored on February 29 only land on leap years

## Error Handling

- **201** - Events created
- **404** - Event not found
- **422** - Validation error
- **500** - Saving a series failed part-way (earlier occurrences are kept)
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)


# =============================================================================
# Exception Handlers
# =============================================================================


def _error_response(
    status_code: int,
    error_type: str,
    message: str,
    retryable: bool,
    details: Optional[dict] = None,
) -> JSONResponse:
    error = ErrorResponse(
        error_type=error_type,
        message=message,
        details=details,
        retryable=retryable,
        request_id=get_request_id() or None,
    )
    return JSONResponse(status_code=status_code, content=error.model_dump(exclude_none=True))


@app.exception_handler(EventNotFoundError)
async def not_found_handler(request, exc: EventNotFoundError):
    return _error_response(
        status.HTTP_404_NOT_FOUND, "not_found", exc.message, exc.retryable
    )


@app.exception_handler(EventValidationError)
async def validation_error_handler(request, exc: EventValidationError):
    return _error_response(422, "validation_error", exc.message, exc.retryable)


@app.exception_handler(EventSaveError)
async def save_error_handler(request, exc: EventSaveError):
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "save_error",
        exc.message,
        exc.retryable,
        details={"index": exc.index, "saved_count": exc.saved_count},
    )


@app.exception_handler(EventCalendarError)
async def storage_error_handler(request, exc: EventCalendarError):
    logger.error(f"Storage error: {exc.message}", exc_info=exc.original_error)
    return _error_response(
        status.HTTP_503_SERVICE_UNAVAILABLE, "storage_error", exc.message, True
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc: HTTPException):
    """Handle HTTP exceptions with consistent format."""
    return _error_response(
        exc.status_code, "http_error", exc.detail, exc.status_code >= 500
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "internal_error",
        "An unexpected error occurred",
        True,
    )


def _to_models(events: list[Event]) -> list[EventModel]:
    return [EventModel.from_domain(event) for event in events]


# =============================================================================
# Health & Status Endpoints
# =============================================================================


@app.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    tags=["System"],
)
def health_check() -> HealthResponse:
    """Check API health status, including the database when it stores events."""
    settings = get_settings()
    healthy = True
    if settings.uses_database:
        from event_calendar.database import check_connection

        healthy = check_connection()

    return HealthResponse(
        status="healthy" if healthy else "unhealthy",
        version=__version__,
        storage_backend=settings.storage_backend,
        recurrence_horizon=format_event_date(settings.recurrence_horizon),
    )


# =============================================================================
# Event Endpoints
# =============================================================================


@app.get(
    "/api/events",
    response_model=EventListResponse,
    response_model_exclude_none=True,
    summary="List events",
    description="List events, optionally filtered by a search term and a week or month view.",
    tags=["Events"],
)
def list_events(
    q: Optional[str] = Query(None, description="Search title, description and location"),
    on: Optional[str] = Query(None, alias="date", description="Reference date for the view (YYYY-MM-DD)"),
    view: Literal["week", "month"] = Query("month", description="Calendar view around the reference date"),
    service: EventService = Depends(get_event_service),
) -> EventListResponse:
    events = service.list_events()

    if on:
        try:
            current_date = parse_event_date(on)
        except (ValueError, OverflowError):
            raise HTTPException(status_code=400, detail=f"Invalid date format: {on}")
        events = get_filtered_events(events, q, current_date, view)
    else:
        events = search_events(events, q)

    return EventListResponse(events=_to_models(events), total=len(events))


@app.get(
    "/api/events/{event_id}",
    response_model=EventModel,
    response_model_exclude_none=True,
    summary="Get event details",
    tags=["Events"],
)
def get_event(
    event_id: str,
    service: EventService = Depends(get_event_service),
) -> EventModel:
    return EventModel.from_domain(service.get_event(event_id))


@app.post(
    "/api/events",
    response_model=EventBatchResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Create event or recurring series",
    description="""
Create an event. With a repeat rule, one event is stored per occurrence,
sequentially; all share a `repeatParentId`. A rule whose end date precedes
the event date creates nothing.
    """,
    tags=["Events"],
)
def create_event(
    request: EventFormModel,
    service: EventService = Depends(get_event_service),
) -> EventBatchResponse:
    events = service.create_events(request.to_domain())
    return EventBatchResponse(events=_to_models(events), count=len(events))


@app.post(
    "/api/events/preview",
    response_model=EventBatchResponse,
    response_model_exclude_none=True,
    summary="Preview recurring occurrences",
    description="Expand a repeat rule into occurrences without storing them.",
    tags=["Events"],
)
def preview_events(
    request: EventFormModel,
    service: EventService = Depends(get_event_service),
) -> EventBatchResponse:
    events = service.preview_events(request.to_domain())
    return EventBatchResponse(events=_to_models(events), count=len(events))


@app.post(
    "/api/events/count",
    response_model=OccurrenceCountResponse,
    summary="Count recurring occurrences",
    description="Number of events a repeat rule would create, without generating them.",
    tags=["Events"],
)
def count_events(
    request: EventFormModel,
    service: EventService = Depends(get_event_service),
) -> OccurrenceCountResponse:
    return OccurrenceCountResponse(count=service.count_events(request.to_domain()))


@app.post(
    "/api/events/overlaps",
    response_model=OverlapResponse,
    response_model_exclude_none=True,
    summary="Check overlaps",
    description="List stored events whose time overlaps the submitted event.",
    tags=["Events"],
)
def check_overlaps(
    request: EventFormModel,
    event_id: Optional[str] = Query(None, description="ID of the event being edited, excluded from the check"),
    service: EventService = Depends(get_event_service),
) -> OverlapResponse:
    draft = request.to_domain()
    if event_id:
        draft = Event(**vars(draft), id=event_id)
    overlapping = find_overlapping_events(draft, service.list_events())
    return OverlapResponse(has_overlap=bool(overlapping), events=_to_models(overlapping))


@app.put(
    "/api/events/{event_id}",
    response_model=EventBatchResponse,
    response_model_exclude_none=True,
    summary="Update event",
    description="""
Update an event. For occurrences of a recurring series:
- `editOption: "single"` detaches the occurrence from its series
- `editOption: "all"` applies the change to every occurrence, keeping dates
    """,
    tags=["Events"],
)
def update_event(
    event_id: str,
    request: UpdateEventRequest,
    service: EventService = Depends(get_event_service),
) -> EventBatchResponse:
    events = service.update_event(request.to_event(event_id), request.edit_option)
    return EventBatchResponse(events=_to_models(events), count=len(events))


@app.delete(
    "/api/events/{event_id}",
    response_model=DeleteEventResponse,
    summary="Delete event",
    tags=["Events"],
)
def delete_event(
    event_id: str,
    service: EventService = Depends(get_event_service),
) -> DeleteEventResponse:
    service.delete_event(event_id)
    return DeleteEventResponse(
        success=True,
        event_id=event_id,
        message=f"Event {event_id} deleted",
    )


@app.delete(
    "/api/recurring-events/{repeat_parent_id}",
    response_model=DeleteSeriesResponse,
    summary="Delete recurring series",
    tags=["Events"],
)
def delete_series(
    repeat_parent_id: str,
    service: EventService = Depends(get_event_service),
) -> DeleteSeriesResponse:
    deleted = service.delete_series(repeat_parent_id)
    return DeleteSeriesResponse(
        success=True,
        repeat_parent_id=repeat_parent_id,
        deleted_count=deleted,
    )


# =============================================================================
# Notification Endpoints
# =============================================================================


def parse_reference_time(value: str) -> datetime:
    """
    Parse an ISO 8601 time as naive local time, the clock event times use.

    Values with a UTC offset are converted to local time first.
    """
    parsed = isoparse(value)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed



@app.get(
    "/api/notifications",
    response_model=NotificationListResponse,
    summary="Upcoming notifications",
    description="Reminders for events starting within their notification lead time.",
    tags=["Notifications"],
)
def list_notifications(
    now: Optional[str] = Query(None, description="Reference time (ISO 8601, defaults to now)"),
    notified: Optional[list[str]] = Query(None, description="Event IDs already notified"),
    service: EventService = Depends(get_event_service),
) -> NotificationListResponse:
    try:
        reference = parse_reference_time(now) if now else datetime.now()
    except (ValueError, OverflowError):
        raise HTTPException(status_code=400, detail=f"Invalid datetime format: {now}")

    upcoming = get_upcoming_events(service.list_events(), reference, notified or [])
    return NotificationListResponse(
        notifications=[
            NotificationModel(event_id=event.id, message=create_notification_message(event))
            for event in upcoming
        ]
    )


# =============================================================================
# Run with Uvicorn
# =============================================================================


def run_server(host: str = "0.0.0.0", port: int = 8000, reload: bool = False):
    """Run the API server with Uvicorn."""
    import uvicorn

    uvicorn.run(
        "event_calendar.api.main:app",
        host=host,
        port=port,
        reload=reload,
    )


if __name__ == "__main__":
    settings = get_settings()
    run_server(host=settings.api_host, port=settings.api_port, reload=settings.api_reload)
