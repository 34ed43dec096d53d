"""Date windowing, formatting, and data directory utilities."""

from .config import APP_NAME, DATA_DIR, ensure_data_dir
from .grid import GRID_SIZE, month_grid
from .ranges import ViewWindow, in_day, in_week, week_bounds
from .timefmt import date_key, format_12h, format_heading, format_long_date, format_time, parse_instant, time_slots

__all__ = [
    "APP_NAME",
    "DATA_DIR",
    "GRID_SIZE",
    "ViewWindow",
    "date_key",
    "ensure_data_dir",
    "format_12h",
    "format_heading",
    "format_long_date",
    "format_time",
    "in_day",
    "in_week",
    "month_grid",
    "parse_instant",
    "time_slots",
    "week_bounds",
]
