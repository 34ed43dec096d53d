"""Locale independent date and time formatting helpers."""

from __future__ import annotations

from datetime import date, datetime, time
from typing import List, Union

from ..domain.enums import ViewMode

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

TimeLike = Union[str, time, datetime]


def format_12h(hour: int, minute: int) -> str:
    """Render a 24-hour clock reading as ``h:MM AM/PM``."""

    if not 0 <= hour <= 23 or not 0 <= minute <= 59:
        raise ValueError(f"Invalid clock reading {hour}:{minute}")
    hour12 = 12 if hour % 12 == 0 else hour % 12
    suffix = "PM" if hour >= 12 else "AM"
    return f"{hour12}:{minute:02d} {suffix}"


def format_time(value: TimeLike | None) -> str:
    if value is None or value == "":
        return ""
    if isinstance(value, (datetime, time)):
        return format_12h(value.hour, value.minute)
    hours, _, minutes = value.partition(":")
    return format_12h(int(hours), int(minutes or 0))


def date_key(value: date | datetime | str) -> str:
    """Canonical ``YYYY-MM-DD`` key used for every calendar-date comparison."""

    if isinstance(value, str):
        value = parse_instant(value)
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def to_local_naive(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def parse_instant(value: datetime | date | str) -> datetime:
    if isinstance(value, datetime):
        return to_local_naive(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("Empty datetime value")
        return to_local_naive(datetime.fromisoformat(text.replace("Z", "+00:00")))
    raise ValueError(f"Unsupported datetime value: {value!r}")


def combine_form_fields(day: date | str, clock: str) -> datetime:
    """Build an instant from separate ``YYYY-MM-DD`` and ``HH:MM`` form fields."""

    day_value = date.fromisoformat(day) if isinstance(day, str) else day
    return datetime.combine(day_value, time.fromisoformat(clock))


def format_long_date(value: date | datetime) -> str:
    return f"{WEEKDAY_NAMES[value.weekday()]}, {MONTH_NAMES[value.month - 1]} {value.day}, {value.year}"


def format_heading(anchor: date | datetime, mode: ViewMode) -> str:
    month = MONTH_NAMES[anchor.month - 1]
    if mode is ViewMode.DAY:
        return f"{month} {anchor.day}, {anchor.year}"
    return f"{month} {anchor.year}"


def time_slots() -> List[str]:
    return [f"{hour:02d}:00" for hour in range(24)]


__all__ = [
    "MONTH_NAMES",
    "WEEKDAY_NAMES",
    "combine_form_fields",
    "date_key",
    "format_12h",
    "format_heading",
    "format_long_date",
    "format_time",
    "parse_instant",
    "time_slots",
    "to_local_naive",
]
