"""Application services orchestrating data access and view state."""

from __future__ import annotations

from .calendar import OFFLINE_NOTICE, CalendarController, CalendarView
from .context import ServiceContext
from .render import render_view

__all__ = ["CalendarController", "CalendarView", "OFFLINE_NOTICE", "ServiceContext", "render_view"]
