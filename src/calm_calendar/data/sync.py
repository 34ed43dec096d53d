from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

from ..domain import SyncState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncTransition:
    previous: SyncState
    current: SyncState
    reason: str
    at: datetime


class SyncController:
    """Two-state online/offline machine gating remote calls.

    Any recorded failure moves to ``OFFLINE``. Only a successful full reload
    (``record_success(..., reload=True)``) moves back to ``ONLINE``; there is no
    retry timer, so an offline session stays offline until the next reload.
    """

    def __init__(self, *, clock: Callable[[], datetime] = datetime.now) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._state = SyncState.ONLINE
        self._history: List[SyncTransition] = []
        self._last_reason: Optional[str] = None

    @property
    def state(self) -> SyncState:
        with self._lock:
            return self._state

    @property
    def history(self) -> List[SyncTransition]:
        with self._lock:
            return list(self._history)

    @property
    def last_reason(self) -> Optional[str]:
        with self._lock:
            return self._last_reason

    def is_online(self) -> bool:
        return self.state is SyncState.ONLINE

    def record_failure(self, reason: str) -> None:
        self._transition(SyncState.OFFLINE, reason)

    def record_success(self, reason: str, *, reload: bool = False) -> None:
        if reload:
            self._transition(SyncState.ONLINE, reason)
        else:
            logger.debug("Remote call succeeded: %s", reason)

    def _transition(self, target: SyncState, reason: str) -> None:
        with self._lock:
            self._last_reason = reason
            if self._state is target:
                return
            transition = SyncTransition(previous=self._state, current=target, reason=reason, at=self._clock())
            self._history.append(transition)
            self._state = target
        if target is SyncState.OFFLINE:
            logger.warning("Switching to offline mode: %s", reason)
        else:
            logger.info("Remote reachable again: %s", reason)


__all__ = ["SyncController", "SyncTransition"]
