from __future__ import annotations

from typing import List

from ..core.timefmt import format_long_date, format_time
from ..domain import CalendarEvent, ViewMode
from .calendar import CalendarView

_WEEKDAY_HEADER = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


def describe_event(event: CalendarEvent) -> str:
    span = f"{format_time(event.anchor)} - {format_time(event.effective_end)}"
    label = f"{span}  {event.title} [{event.type.label}]"
    if event.location:
        label += f" @ {event.location}"
    return f"{label}  ({event.id})"


def _day_label(day: int, current: bool) -> str:
    # out-of-month days are starred
    return str(day) if current else f"{day}*"


def _month_lines(view: CalendarView) -> List[str]:
    lines = ["  ".join(f"{name:>10}" for name in _WEEKDAY_HEADER)]
    for row in range(0, len(view.cells), 7):
        week = view.cells[row : row + 7]
        lines.append("  ".join(f"{_day_label(cell.day.day, cell.is_current_month):>10}" for cell in week))
        depth = max((len(cell.preview(view.cell_limit)) for cell in week), default=0)
        for index in range(depth):
            parts = []
            for cell in week:
                shown = cell.preview(view.cell_limit)
                parts.append(f"{shown[index].title[:10]:>10}" if index < len(shown) else " " * 10)
            lines.append("  ".join(parts))
        overflow = [cell.hidden_count(view.cell_limit) for cell in week]
        if any(overflow):
            lines.append("  ".join(f"{f'+{count} more' if count else '':>10}" for count in overflow))
    return lines


def render_view(view: CalendarView) -> str:
    lines = [view.heading, "=" * len(view.heading)]
    if view.notice:
        lines.append(f"! {view.notice}")

    if view.mode is ViewMode.MONTH:
        lines.extend(_month_lines(view))
        return "\n".join(lines)

    for cell in view.cells:
        if not cell.events:
            continue
        lines.append(format_long_date(cell.day))
        lines.extend(f"  {describe_event(event)}" for event in cell.events)
    if view.is_empty:
        lines.append(f"No events scheduled. This {view.mode.value} is clear.")
    return "\n".join(lines)


__all__ = ["describe_event", "render_view"]
