from __future__ import annotations

from typing import Any, Dict, Iterable, List

import orjson
from pydantic import ValidationError as SchemaError

from ..domain import CalendarEvent, ValidationError
from .models import EventPayload


def serialize_event(event: CalendarEvent) -> Dict[str, Any]:
    return EventPayload.from_domain(event).model_dump(mode="json", by_alias=True)


def dump_events(events: Iterable[CalendarEvent]) -> bytes:
    return orjson.dumps([serialize_event(event) for event in events])


def parse_payload(data: Any) -> EventPayload:
    """Normalize one inbound record, raising ``ValidationError`` when it cannot be read."""

    try:
        return EventPayload.model_validate(data)
    except SchemaError as exc:
        raise ValidationError(f"Invalid event data: {exc.errors()[0]['msg']}") from exc


def load_records(blob: bytes) -> List[Any]:
    records = orjson.loads(blob)
    if not isinstance(records, list):
        raise ValueError("Serialized event collection must be a JSON array.")
    return records


__all__ = ["dump_events", "load_records", "parse_payload", "serialize_event"]
