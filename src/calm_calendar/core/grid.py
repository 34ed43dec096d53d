from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Iterable, List

from ..domain import CalendarEvent, DayCell
from .timefmt import date_key

GRID_SIZE = 42


def sunday_weekday(day: date) -> int:
    """Weekday index with Sunday as 0."""
    return (day.weekday() + 1) % 7


def month_grid(anchor: date | datetime, events: Iterable[CalendarEvent] = ()) -> List[DayCell]:
    """Return the fixed 6x7 month grid around ``anchor`` with events bucketed per day."""

    first = date(anchor.year, anchor.month, 1)
    days_in_month = calendar.monthrange(anchor.year, anchor.month)[1]
    leading = sunday_weekday(first)

    cells: list[DayCell] = []
    for offset in range(leading, 0, -1):
        cells.append(DayCell(day=first - timedelta(days=offset), is_current_month=False))
    for index in range(days_in_month):
        cells.append(DayCell(day=first + timedelta(days=index), is_current_month=True))
    following = first + timedelta(days=days_in_month)
    for index in range(GRID_SIZE - len(cells)):
        cells.append(DayCell(day=following + timedelta(days=index), is_current_month=False))

    return bucket_events(cells, events)


def bucket_events(cells: List[DayCell], events: Iterable[CalendarEvent]) -> List[DayCell]:
    by_key = {date_key(cell.day): cell for cell in cells}
    for event in sorted(events, key=lambda item: item.anchor):
        cell = by_key.get(date_key(event.anchor))
        if cell is not None:
            cell.events.append(event)
    return cells


__all__ = ["GRID_SIZE", "bucket_events", "month_grid", "sunday_weekday"]
