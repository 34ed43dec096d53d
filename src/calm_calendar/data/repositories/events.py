from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional
from uuid import uuid4

from ...api import dump_events, load_records, parse_payload, serialize_event
from ...domain import CalendarEvent, NotFoundError, TransportError, ValidationError
from ..cache import CacheStorage
from ..mirror import MirrorDispatcher, MirrorTask
from ..remote import RemoteEventStore
from ..sync import SyncController

logger = logging.getLogger(__name__)

DEFAULT_CACHE_KEY = "calendar_events"
FORM_FIELDS = ("date", "startTime", "endTime")


class EventRepository:
    """Owns the event collection and its local cache copy.

    Writes land in memory and in the cache synchronously; the remote store only
    receives best-effort mirrors while the sync controller reports online. Mirror
    results never flow back into the collection; only ``load_all`` replaces it.
    """

    def __init__(
        self,
        *,
        storage: CacheStorage,
        sync: SyncController,
        remote: Optional[RemoteEventStore] = None,
        dispatcher: Optional[MirrorDispatcher] = None,
        cache_key: str = DEFAULT_CACHE_KEY,
        clock: Callable[[], datetime] = datetime.now,
        id_factory: Callable[[], str] = lambda: str(uuid4()),
    ) -> None:
        self.storage = storage
        self.sync = sync
        self.remote = remote
        self.dispatcher = dispatcher or MirrorDispatcher()
        self.cache_key = cache_key
        self._clock = clock
        self._new_id = id_factory
        self._events: List[CalendarEvent] = self._read_cache()

    # -- reads -------------------------------------------------------------

    def list_events(self) -> List[CalendarEvent]:
        return list(self._events)

    def get(self, event_id: str) -> CalendarEvent:
        index = self._index_of(event_id)
        return self._events[index]

    def _index_of(self, event_id: str) -> int:
        for index, event in enumerate(self._events):
            if event.id == event_id:
                return index
        raise NotFoundError(event_id)

    # -- reload ------------------------------------------------------------

    def load_all(self) -> List[CalendarEvent]:
        """Reload from the remote, falling back to the cached collection on any failure."""

        self.flush()
        if self.remote is None:
            self.sync.record_failure("remote store is not configured")
            return self._reload_from_cache()
        try:
            records = self.remote.fetch_all()
            events = self._materialize(records, strict=True)
        except TransportError as exc:
            self.sync.record_failure(str(exc))
            return self._reload_from_cache()
        except ValidationError as exc:
            self.sync.record_failure(f"remote returned malformed events: {exc}")
            return self._reload_from_cache()

        self._events = events
        self._persist()
        self.sync.record_success("loaded events from remote", reload=True)
        logger.info("Loaded %d event(s) from remote", len(events))
        return self.list_events()

    def _reload_from_cache(self) -> List[CalendarEvent]:
        self._events = self._read_cache()
        logger.info("Using %d cached event(s)", len(self._events))
        return self.list_events()

    def _read_cache(self) -> List[CalendarEvent]:
        blob = self.storage.get(self.cache_key)
        if not blob:
            return []
        try:
            records = load_records(blob)
        except ValueError:
            logger.exception("Local event cache is unreadable; starting empty")
            return []
        return self._materialize(records, strict=False)

    def _materialize(self, records: List[Any], *, strict: bool) -> List[CalendarEvent]:
        events: list[CalendarEvent] = []
        seen: set[str] = set()
        for record in records:
            try:
                payload = parse_payload(record)
            except ValidationError:
                if strict:
                    raise
                logger.warning("Skipping unreadable cached event: %r", record)
                continue
            if payload.id is None:
                payload.id = self._new_id()
            if payload.created_at is None:
                payload.created_at = payload.start or self._clock()
            if payload.id in seen:
                logger.warning("Dropping duplicate event id %s", payload.id)
                continue
            seen.add(payload.id)
            events.append(payload.to_domain())
        return events

    # -- mutations ---------------------------------------------------------

    def create(self, draft: Mapping[str, Any]) -> CalendarEvent:
        payload = parse_payload(draft)
        if payload.start is None:
            raise ValidationError("Event start is required.")
        event = CalendarEvent(
            id=self._new_id(),
            title=_validated_title(payload.title),
            created_at=self._clock(),
            start=payload.start,
            end=payload.end,
            description=payload.description,
            location=payload.location,
            type=payload.type,
        )
        self._events.append(event)
        self._persist()
        logger.debug("Created event %s", event.id)

        record = serialize_event(event)
        self._mirror("create", event.id, lambda: self.remote.create(record))
        return event

    def update(self, event_id: str, patch: Mapping[str, Any]) -> CalendarEvent:
        index = self._index_of(event_id)
        patch = _complete_form_patch(patch, self._events[index])
        changes: Dict[str, Any] = parse_payload(patch).changes()
        if "title" in changes:
            changes["title"] = _validated_title(changes["title"])
        if "start" in changes and changes["start"] is None:
            raise ValidationError("Event start is required.")
        updated = replace(self._events[index], **changes)
        self._events[index] = updated
        self._persist()
        logger.debug("Updated event %s (%s)", event_id, ", ".join(sorted(changes)) or "no changes")

        record = serialize_event(updated)
        self._mirror("update", event_id, lambda: self.remote.update(event_id, record))
        return updated

    def delete(self, event_id: str) -> None:
        index = self._index_of(event_id)
        del self._events[index]
        self._persist()
        logger.debug("Deleted event %s", event_id)

        self._mirror("delete", event_id, lambda: self.remote.delete(event_id))

    def _persist(self) -> None:
        self.storage.set(self.cache_key, dump_events(self._events))

    # -- remote mirroring --------------------------------------------------

    def _mirror(self, operation: str, event_id: str, call: Callable[[], None]) -> Optional[MirrorTask]:
        if self.remote is None or not self.sync.is_online():
            logger.debug("Offline; %s of %s stored locally only", operation, event_id)
            return None
        return self.dispatcher.submit(
            operation,
            event_id,
            call,
            on_success=self._on_mirror_success,
            on_failure=self._on_mirror_failure,
            guard=self.sync.is_online,
        )

    def _on_mirror_success(self, task: MirrorTask) -> None:
        self.sync.record_success(f"{task.operation} {task.event_id} mirrored")

    def _on_mirror_failure(self, task: MirrorTask, exc: Exception) -> None:
        if not isinstance(exc, TransportError):
            logger.error("Unexpected error mirroring %s of %s", task.operation, task.event_id, exc_info=exc)
        self.sync.record_failure(f"{task.operation} {task.event_id} failed: {exc}")

    def flush(self, timeout: Optional[float] = None) -> bool:
        return self.dispatcher.drain(timeout)

    def close(self) -> None:
        self.dispatcher.shutdown(cancel_pending=True)


def _complete_form_patch(patch: Mapping[str, Any], current: CalendarEvent) -> Mapping[str, Any]:
    """Fill the form fields a patch leaves out from the stored event, so any of them rebuilds both instants."""

    if not any(patch.get(key) for key in FORM_FIELDS):
        return patch
    defaults = {
        "date": current.anchor.date().isoformat(),
        "startTime": current.anchor.strftime("%H:%M"),
        "endTime": current.effective_end.strftime("%H:%M"),
    }
    completed = dict(patch)
    for key, value in defaults.items():
        if not completed.get(key):
            completed[key] = value
    return completed


def _validated_title(title: str) -> str:
    cleaned = (title or "").strip()
    if not cleaned:
        raise ValidationError("Event title must not be empty.")
    return cleaned


__all__ = ["DEFAULT_CACHE_KEY", "EventRepository"]
