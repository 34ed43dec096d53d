"""
Background mirroring of local mutations to the remote store.

Each mutation becomes one cancellable ``MirrorTask`` on a single worker thread,
so remote calls run in submission order and never block the caller.
Completion callbacks run on the worker thread and are dropped once the
dispatcher is shut down.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional
from uuid import uuid4

logger = logging.getLogger(__name__)


@dataclass
class MirrorTask:
    ticket: str
    operation: str
    event_id: str
    future: Optional[Future] = None
    skipped: bool = False
    error: Optional[BaseException] = field(default=None, repr=False)

    def cancel(self) -> bool:
        """Cancel the task if it has not started yet."""
        return self.future.cancel() if self.future is not None else False

    @property
    def done(self) -> bool:
        return self.future is not None and self.future.done()


SuccessCallback = Callable[[MirrorTask], None]
FailureCallback = Callable[[MirrorTask, Exception], None]


class MirrorDispatcher:
    def __init__(self, max_workers: int = 1) -> None:
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="mirror")
        self._pending: Dict[str, MirrorTask] = {}
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def submit(
        self,
        operation: str,
        event_id: str,
        func: Callable[[], object],
        *,
        on_success: SuccessCallback,
        on_failure: FailureCallback,
        guard: Optional[Callable[[], bool]] = None,
    ) -> Optional[MirrorTask]:
        if self._closed:
            logger.debug("Dispatcher closed; dropping %s mirror for %s", operation, event_id)
            return None
        task = MirrorTask(ticket=str(uuid4()), operation=operation, event_id=event_id)
        with self._lock:
            self._pending[task.ticket] = task
        task.future = self._executor.submit(self._run, task, func, on_success, on_failure, guard)
        task.future.add_done_callback(lambda _: self._forget(task))
        return task

    def _run(
        self,
        task: MirrorTask,
        func: Callable[[], object],
        on_success: SuccessCallback,
        on_failure: FailureCallback,
        guard: Optional[Callable[[], bool]],
    ) -> None:
        if self._closed:
            return
        if guard is not None and not guard():
            task.skipped = True
            logger.debug("Skipping %s mirror for %s", task.operation, task.event_id)
            return
        try:
            func()
        except Exception as exc:  # noqa: BLE001 - reported through on_failure
            task.error = exc
            if not self._closed:
                on_failure(task, exc)
        else:
            if not self._closed:
                on_success(task)

    def _forget(self, task: MirrorTask) -> None:
        with self._lock:
            self._pending.pop(task.ticket, None)

    def pending(self) -> List[MirrorTask]:
        with self._lock:
            return list(self._pending.values())

    def drain(self, timeout: Optional[float] = None) -> bool:
        """Block until every submitted task settles. Returns ``False`` on timeout."""

        futures = [task.future for task in self.pending() if task.future is not None]
        if not futures:
            return True
        _, not_done = wait(futures, timeout=timeout)
        return not not_done

    def cancel_pending(self) -> int:
        cancelled = sum(1 for task in self.pending() if task.cancel())
        if cancelled:
            logger.info("Cancelled %d queued mirror task(s)", cancelled)
        return cancelled

    def shutdown(self, *, cancel_pending: bool = True) -> None:
        if cancel_pending:
            self.cancel_pending()
        self._closed = True
        self._executor.shutdown(wait=False)


__all__ = ["MirrorDispatcher", "MirrorTask"]
