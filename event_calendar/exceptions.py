"""
Custom exceptions for event operations.

Provides structured error handling with retryable flags.
"""


class EventCalendarError(Exception):
    """Base exception for event operations."""

    retryable: bool = False

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class EventNotFoundError(EventCalendarError):
    """
    Event not found.

    Causes:
    - Event was deleted
    - Event ID is invalid
    """

    retryable = False

    def __init__(self, event_id: str, original_error: Exception | None = None):
        super().__init__(f"Event {event_id} not found", original_error)
        self.event_id = event_id


class EventValidationError(EventCalendarError):
    """
    Invalid event data.

    Causes:
    - Unknown repeat type
    - Non-positive repeat interval
    - Unparseable repeat end date
    """

    retryable = False


class EventSaveError(EventCalendarError):
    """
    Persisting an occurrence failed part-way through a batch.

    Occurrences are saved one at a time, so the events before ``index``
    remain stored. Retryable once the storage backend recovers.
    """

    retryable = True

    def __init__(
        self,
        message: str,
        index: int,
        saved_count: int,
        original_error: Exception | None = None,
    ):
        super().__init__(message, original_error)
        self.index = index
        self.saved_count = saved_count
