"""
Pydantic request and response models for the Event Calendar API.

JSON bodies use camelCase keys (startTime, repeatParentId, ...); fields
that are unset are omitted from responses.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from event_calendar.repositories.base import Event, EventForm, RepeatInfo, RepeatType
from event_calendar.services.recurrence import parse_event_date

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


def _check_iso_date(value: str) -> str:
    try:
        parse_event_date(value)
    except (ValueError, OverflowError):
        raise ValueError(f"Invalid date '{value}', expected YYYY-MM-DD")
    return value


class ApiModel(BaseModel):
    """Base model with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Event Models
# =============================================================================


class RepeatInfoModel(ApiModel):
    """Repeat rule."""

    type: RepeatType = Field(default="none", description="Repeat type")
    interval: int = Field(
        default=1,
        ge=0,
        description="Repeat interval (must be at least 1 for recurring events)",
    )
    end_date: Optional[str] = Field(
        None,
        description="Last date the series may occur on (YYYY-MM-DD)",
    )

    @field_validator("end_date")
    @classmethod
    def validate_end_date(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return _check_iso_date(v.strip())

    @model_validator(mode="after")
    def validate_interval(self) -> "RepeatInfoModel":
        if self.type != "none" and self.interval < 1:
            raise ValueError("Repeat interval must be at least 1")
        return self

    def to_domain(self) -> RepeatInfo:
        return RepeatInfo(type=self.type, interval=self.interval, end_date=self.end_date)

    @classmethod
    def from_domain(cls, repeat: RepeatInfo) -> "RepeatInfoModel":
        return cls(type=repeat.type, interval=repeat.interval, end_date=repeat.end_date)


class EventFormModel(ApiModel):
    """Event data submitted to create an event or series."""

    title: str = Field(..., min_length=1, max_length=200, description="Event title")
    date: str = Field(..., description="Event date (YYYY-MM-DD)", examples=["2025-01-15"])
    start_time: str = Field(..., pattern=TIME_PATTERN, description="Start time (HH:MM)")
    end_time: str = Field(..., pattern=TIME_PATTERN, description="End time (HH:MM)")
    description: str = Field(default="", description="Event description")
    location: str = Field(default="", description="Event location")
    category: str = Field(default="", description="Event category")
    repeat: RepeatInfoModel = Field(default_factory=RepeatInfoModel)
    notification_time: int = Field(
        default=10,
        ge=0,
        description="Reminder lead time in minutes",
    )

    @field_validator("title")
    @classmethod
    def validate_title_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title cannot be empty")
        return v.strip()

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: str) -> str:
        return _check_iso_date(v)

    @model_validator(mode="after")
    def validate_time_range(self) -> "EventFormModel":
        if self.start_time >= self.end_time:
            raise ValueError("Start time must be before end time")
        return self

    def _domain_fields(self) -> dict:
        return {
            "title": self.title,
            "date": self.date,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "description": self.description,
            "location": self.location,
            "category": self.category,
            "repeat": self.repeat.to_domain(),
            "notification_time": self.notification_time,
        }

    def to_domain(self) -> EventForm:
        return EventForm(**self._domain_fields())


class EventModel(EventFormModel):
    """A stored event."""

    id: str = Field(..., description="Event ID")
    repeat_parent_id: Optional[str] = Field(
        None,
        description="Series ID shared by occurrences of a recurring event",
    )

    def to_domain(self) -> Event:
        return Event(
            **self._domain_fields(),
            id=self.id,
            repeat_parent_id=self.repeat_parent_id,
        )

    @classmethod
    def from_domain(cls, event: Event) -> "EventModel":
        return cls(
            id=event.id,
            title=event.title,
            date=event.date,
            start_time=event.start_time,
            end_time=event.end_time,
            description=event.description,
            location=event.location,
            category=event.category,
            repeat=RepeatInfoModel.from_domain(event.repeat),
            notification_time=event.notification_time,
            repeat_parent_id=event.repeat_parent_id,
        )


class UpdateEventRequest(EventModel):
    """Request to update an event, or every event of its series."""

    id: Optional[str] = Field(None, description="Ignored; the path ID is used")
    edit_option: Optional[Literal["single", "all"]] = Field(
        None,
        description="'single' detaches an occurrence, 'all' edits the whole series",
    )

    def to_event(self, event_id: str) -> Event:
        return Event(
            **self._domain_fields(),
            id=event_id,
            repeat_parent_id=self.repeat_parent_id,
        )


# =============================================================================
# Response Models
# =============================================================================


class EventListResponse(ApiModel):
    """Response for listing events."""

    events: list[EventModel] = Field(..., description="List of events")
    total: int = Field(..., description="Number of events returned")


class EventBatchResponse(ApiModel):
    """Events created, updated or previewed by one request."""

    events: list[EventModel] = Field(..., description="Affected events in date order")
    count: int = Field(..., description="Number of events")


class OccurrenceCountResponse(ApiModel):
    """Number of events a form would create."""

    count: int = Field(..., description="Number of occurrences")


class OverlapResponse(ApiModel):
    """Existing events overlapping a draft."""

    has_overlap: bool = Field(..., description="Whether any event overlaps")
    events: list[EventModel] = Field(default_factory=list, description="Overlapping events")


class NotificationModel(ApiModel):
    """A reminder for an upcoming event."""

    event_id: str = Field(..., description="Event ID")
    message: str = Field(..., description="Reminder text")


class NotificationListResponse(ApiModel):
    """Reminders due at the requested time."""

    notifications: list[NotificationModel] = Field(default_factory=list)


class DeleteEventResponse(ApiModel):
    """Response for deleting an event."""

    success: bool = Field(..., description="Whether deletion was successful")
    event_id: str = Field(..., description="ID of deleted event")
    message: str = Field(..., description="Status message")


class DeleteSeriesResponse(ApiModel):
    """Response for deleting a recurring series."""

    success: bool = Field(..., description="Whether deletion was successful")
    repeat_parent_id: str = Field(..., description="Series ID")
    deleted_count: int = Field(..., description="Number of events deleted")


class ErrorResponse(BaseModel):
    """Error information for failed requests."""

    error_type: Literal[
        "validation_error",
        "not_found",
        "save_error",
        "storage_error",
        "http_error",
        "internal_error",
    ] = Field(..., description="Type of error")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[dict] = Field(None, description="Additional error details")
    retryable: bool = Field(default=False, description="Whether request can be retried")
    request_id: Optional[str] = Field(None, description="ID of the failed request (matches X-Request-ID)")


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["healthy", "unhealthy"] = Field(..., description="Health status")
    version: str = Field(..., description="API version")
    storage_backend: str = Field(..., description="Configured storage backend")
    recurrence_horizon: str = Field(..., description="Last date recurring events may reach")
