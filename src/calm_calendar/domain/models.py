from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import List, Optional

from .enums import DEFAULT_EVENT_TYPE, EventType

DEFAULT_DURATION = timedelta(hours=1)


@dataclass(slots=True)
class CalendarEvent:
    id: str
    title: str
    created_at: datetime
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    description: str = ""
    location: str = ""
    type: EventType = DEFAULT_EVENT_TYPE

    @property
    def anchor(self) -> datetime:
        """Instant used for placement and filtering."""
        return self.start or self.created_at

    @property
    def effective_end(self) -> datetime:
        return self.end or self.anchor + DEFAULT_DURATION


@dataclass(slots=True)
class DayCell:
    day: date
    is_current_month: bool
    events: List[CalendarEvent] = field(default_factory=list)

    def preview(self, limit: int) -> List[CalendarEvent]:
        return self.events[:limit]

    def hidden_count(self, limit: int) -> int:
        return max(len(self.events) - limit, 0)
