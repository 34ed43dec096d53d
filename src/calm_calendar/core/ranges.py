from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Iterable, List, Tuple

from ..domain import CalendarEvent, DayCell, ViewMode
from .grid import bucket_events, month_grid, sunday_weekday
from .timefmt import date_key


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def week_bounds(anchor: date | datetime) -> Tuple[datetime, datetime]:
    """Sunday 00:00:00.000 through Saturday 23:59:59.999 of the anchor's week."""

    start_day = _as_date(anchor) - timedelta(days=sunday_weekday(_as_date(anchor)))
    end_day = start_day + timedelta(days=6)
    return datetime.combine(start_day, time.min), datetime.combine(end_day, time(23, 59, 59, 999000))


def day_bounds(anchor: date | datetime) -> Tuple[datetime, datetime]:
    day = _as_date(anchor)
    return datetime.combine(day, time.min), datetime.combine(day, time(23, 59, 59, 999000))


def in_day(event: CalendarEvent, anchor: date | datetime) -> bool:
    return date_key(event.anchor) == date_key(anchor)


def in_week(event: CalendarEvent, anchor: date | datetime) -> bool:
    start, end = week_bounds(anchor)
    return start <= event.anchor <= end


@dataclass(frozen=True)
class ViewWindow:
    mode: ViewMode
    anchor: date

    def bounds(self) -> Tuple[datetime, datetime]:
        if self.mode is ViewMode.DAY:
            return day_bounds(self.anchor)
        if self.mode is ViewMode.WEEK:
            return week_bounds(self.anchor)
        cells = month_grid(self.anchor)
        return datetime.combine(cells[0].day, time.min), datetime.combine(cells[-1].day, time(23, 59, 59, 999000))

    def contains(self, event: CalendarEvent) -> bool:
        if self.mode is ViewMode.DAY:
            return in_day(event, self.anchor)
        if self.mode is ViewMode.WEEK:
            return in_week(event, self.anchor)
        start, end = self.bounds()
        return start <= event.anchor <= end

    def filter(self, events: Iterable[CalendarEvent]) -> List[CalendarEvent]:
        return sorted((event for event in events if self.contains(event)), key=lambda item: item.anchor)

    def cells(self, events: Iterable[CalendarEvent] = ()) -> List[DayCell]:
        if self.mode is ViewMode.MONTH:
            return month_grid(self.anchor, events)
        start, end = self.bounds()
        span = (end.date() - start.date()).days + 1
        days = [start.date() + timedelta(days=index) for index in range(span)]
        cells = [DayCell(day=day, is_current_month=day.month == self.anchor.month) for day in days]
        return bucket_events(cells, events)


__all__ = ["ViewWindow", "day_bounds", "in_day", "in_week", "week_bounds"]
