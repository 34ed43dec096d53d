"""Domain models for calendar scheduling."""

from __future__ import annotations

from .enums import DEFAULT_EVENT_TYPE, EventType, NavigationDirection, SyncState, ViewMode
from .errors import CalendarError, NotFoundError, TransportError, ValidationError
from .models import CalendarEvent, DayCell

__all__ = [
    "CalendarError",
    "CalendarEvent",
    "DEFAULT_EVENT_TYPE",
    "DayCell",
    "EventType",
    "NavigationDirection",
    "NotFoundError",
    "SyncState",
    "TransportError",
    "ValidationError",
    "ViewMode",
]
