from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Callable, List, Mapping, Optional

from ..core import ViewWindow, format_heading
from ..data.repositories import EventRepository
from ..domain import CalendarEvent, DayCell, NavigationDirection, SyncState, ViewMode

logger = logging.getLogger(__name__)

OFFLINE_NOTICE = "Offline mode: changes stored locally"


@dataclass(slots=True)
class CalendarView:
    """Render-ready snapshot of the active view window."""

    mode: ViewMode
    anchor: date
    heading: str
    cells: List[DayCell]
    events: List[CalendarEvent]
    sync_state: SyncState
    notice: Optional[str] = None
    cell_limit: int = field(default=3)

    @property
    def is_empty(self) -> bool:
        return not self.events


def shift_month(anchor: date, months: int) -> date:
    """Move by whole months, clamping the day to the target month's length."""

    index = anchor.year * 12 + (anchor.month - 1) + months
    year, month = divmod(index, 12)
    last_day = calendar.monthrange(year, month + 1)[1]
    return date(year, month + 1, min(anchor.day, last_day))


class CalendarController:
    """Long-lived view state machine over month, week, and day windows."""

    def __init__(
        self,
        repository: EventRepository,
        *,
        mode: ViewMode = ViewMode.MONTH,
        anchor: Optional[date] = None,
        clock: Callable[[], datetime] = datetime.now,
        cell_limit: int = 3,
    ) -> None:
        self.repository = repository
        self._clock = clock
        self._mode = ViewMode(mode)
        self._anchor = anchor or clock().date()
        self.cell_limit = cell_limit

    @property
    def view_mode(self) -> ViewMode:
        return self._mode

    @property
    def anchor(self) -> date:
        return self._anchor

    @property
    def view_window(self) -> ViewWindow:
        return ViewWindow(mode=self._mode, anchor=self._anchor)

    # -- intents -----------------------------------------------------------

    def load(self) -> List[CalendarEvent]:
        return self.repository.load_all()

    def set_view_mode(self, mode: ViewMode | str) -> ViewWindow:
        self._mode = ViewMode(mode)
        logger.debug("View mode set to %s", self._mode.value)
        return self.view_window

    def set_anchor(self, anchor: date | datetime) -> ViewWindow:
        self._anchor = anchor.date() if isinstance(anchor, datetime) else anchor
        return self.view_window

    def navigate(self, direction: NavigationDirection | str) -> ViewWindow:
        direction = NavigationDirection(direction)
        if direction is NavigationDirection.TODAY:
            self._anchor = self._clock().date()
            return self.view_window

        step = 1 if direction is NavigationDirection.NEXT else -1
        if self._mode is ViewMode.MONTH:
            self._anchor = shift_month(self._anchor, step)
        elif self._mode is ViewMode.WEEK:
            self._anchor = self._anchor + timedelta(weeks=step)
        else:
            self._anchor = self._anchor + timedelta(days=step)
        return self.view_window

    def create(self, draft: Mapping[str, Any]) -> CalendarEvent:
        return self.repository.create(draft)

    def update(self, event_id: str, patch: Mapping[str, Any]) -> CalendarEvent:
        return self.repository.update(event_id, patch)

    def delete(self, event_id: str) -> None:
        self.repository.delete(event_id)

    # -- queries -----------------------------------------------------------

    def visible_events(self) -> List[CalendarEvent]:
        return self.view_window.filter(self.repository.list_events())

    def visible_cells(self) -> List[DayCell]:
        return self.view_window.cells(self.repository.list_events())

    def current_sync_state(self) -> SyncState:
        return self.repository.sync.state

    @property
    def notice(self) -> Optional[str]:
        return OFFLINE_NOTICE if self.current_sync_state() is SyncState.OFFLINE else None

    def snapshot(self) -> CalendarView:
        return CalendarView(
            mode=self._mode,
            anchor=self._anchor,
            heading=format_heading(self._anchor, self._mode),
            cells=self.visible_cells(),
            events=self.visible_events(),
            sync_state=self.current_sync_state(),
            notice=self.notice,
            cell_limit=self.cell_limit,
        )

    def close(self) -> None:
        self.repository.close()


__all__ = ["CalendarController", "CalendarView", "OFFLINE_NOTICE", "shift_month"]
