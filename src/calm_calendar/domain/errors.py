from __future__ import annotations

from typing import Optional


class CalendarError(Exception):
    """Base class for calendar errors."""


class ValidationError(CalendarError):
    """Raised when an event draft or patch is rejected before persistence."""


class NotFoundError(CalendarError):
    """Raised when an operation targets an unknown event id."""

    def __init__(self, event_id: str) -> None:
        super().__init__(f"Event {event_id} not found.")
        self.event_id = event_id


class TransportError(CalendarError):
    """Raised by the remote client when a call fails for any reason."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
