from __future__ import annotations

from enum import Enum


class EventType(str, Enum):
    MEETING = "meeting"
    REMINDER = "reminder"
    TASK = "task"
    EVENT = "event"
    PERSONAL = "personal"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def coerce(cls, value: object) -> "EventType":
        """Map any tag, known or not, onto a member. Unknown tags become meetings."""

        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return DEFAULT_EVENT_TYPE


DEFAULT_EVENT_TYPE = EventType.MEETING


class ViewMode(str, Enum):
    MONTH = "month"
    WEEK = "week"
    DAY = "day"


class NavigationDirection(str, Enum):
    NEXT = "next"
    PREVIOUS = "previous"
    TODAY = "today"


class SyncState(str, Enum):
    ONLINE = "online"
    OFFLINE = "offline"
