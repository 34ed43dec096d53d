from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..config import AppSettings, get_settings
from ..data import FileCacheStorage, MirrorDispatcher, RemoteEventStore, SyncController
from ..data.repositories import EventRepository
from ..domain import ViewMode
from .calendar import CalendarController


@dataclass(slots=True)
class ServiceContext:
    """Aggregate root wiring settings, storage, remote, and sync state together."""

    settings: AppSettings = field(default_factory=get_settings)
    sync: SyncController = field(init=False)
    remote: Optional[RemoteEventStore] = field(init=False)
    events: EventRepository = field(init=False)

    def __post_init__(self) -> None:
        self.sync = SyncController()
        self.remote = RemoteEventStore(self.settings.remote) if self.settings.remote.is_configured else None
        if self.remote is None:
            self.sync.record_failure("remote store is not configured")
        self.events = EventRepository(
            storage=FileCacheStorage(self.settings.cache.directory),
            sync=self.sync,
            remote=self.remote,
            dispatcher=MirrorDispatcher(),
            cache_key=self.settings.cache.key,
        )

    def calendar(self) -> CalendarController:
        try:
            mode = ViewMode(self.settings.view.default_mode)
        except ValueError:
            mode = ViewMode.MONTH
        return CalendarController(self.events, mode=mode, cell_limit=self.settings.view.month_cell_limit)

    def close(self) -> None:
        self.events.close()
        if self.remote is not None:
            self.remote.close()
