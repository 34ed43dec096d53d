from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..core.timefmt import combine_form_fields, parse_instant
from ..domain import DEFAULT_EVENT_TYPE, CalendarEvent, EventType

# Canonical field -> accepted inbound keys, first non-empty wins.
FIELD_ALIASES: Dict[str, tuple[str, ...]] = {
    "id": ("id", "_id"),
    "title": ("title", "name"),
    "description": ("description", "notes"),
    "start": ("start", "datetime", "starts_at"),
    "end": ("end", "endDatetime", "ends_at"),
    "location": ("location",),
    "type": ("type", "category"),
    "created_at": ("createdAt", "created_at"),
}
IMMUTABLE_FIELDS = frozenset({"id", "created_at"})


def _first_present(data: Mapping[str, Any], keys: tuple[str, ...]) -> tuple[bool, Any]:
    found = False
    for key in keys:
        if key not in data:
            continue
        found = True
        value = data[key]
        if value not in (None, ""):
            return True, value
    return found, None


class EventPayload(BaseModel):
    """Flat wire shape of an event, shared by the REST remote and the local cache.

    Inbound data may use any of the legacy field names listed in ``FIELD_ALIASES``
    or the form-style ``date``/``startTime``/``endTime`` triple; validation maps it
    onto the canonical fields exactly once.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(default=None)
    title: str = Field(default="")
    description: str = Field(default="")
    start: Optional[datetime] = Field(default=None)
    end: Optional[datetime] = Field(default=None)
    location: str = Field(default="")
    type: EventType = Field(default=DEFAULT_EVENT_TYPE)
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")

    @model_validator(mode="before")
    @classmethod
    def _canonicalize(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data

        canonical: Dict[str, Any] = {}
        for name, keys in FIELD_ALIASES.items():
            found, value = _first_present(data, keys)
            if found:
                canonical[name] = value

        form_day = data.get("date")
        if form_day:
            if canonical.get("start") is None and data.get("startTime"):
                canonical["start"] = combine_form_fields(form_day, data["startTime"])
            if canonical.get("end") is None and data.get("endTime"):
                canonical["end"] = combine_form_fields(form_day, data["endTime"])

        for name in ("title", "description", "location"):
            if name in canonical:
                value = canonical[name]
                canonical[name] = "" if value is None else value
        if "id" in canonical and canonical["id"] is not None:
            canonical["id"] = str(canonical["id"])
        if "type" in canonical:
            canonical["type"] = EventType.coerce(canonical["type"])
        for name in ("start", "end", "created_at"):
            if canonical.get(name) is not None:
                canonical[name] = parse_instant(canonical[name])
        return canonical

    @classmethod
    def from_domain(cls, event: CalendarEvent) -> "EventPayload":
        return cls(
            id=event.id,
            title=event.title,
            description=event.description,
            start=event.start,
            end=event.end,
            location=event.location,
            type=event.type,
            created_at=event.created_at,
        )

    def to_domain(self) -> CalendarEvent:
        if self.id is None or self.created_at is None:
            raise ValueError("Event payload is missing its id or creation time.")
        return CalendarEvent(
            id=self.id,
            title=self.title.strip(),
            created_at=self.created_at,
            start=self.start,
            end=self.end,
            description=self.description,
            location=self.location,
            type=self.type,
        )

    def changes(self) -> Dict[str, Any]:
        """Mutable fields explicitly present in the inbound data."""

        return {
            name: getattr(self, name)
            for name in self.model_fields_set
            if name not in IMMUTABLE_FIELDS
        }
