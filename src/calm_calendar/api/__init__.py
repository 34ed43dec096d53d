"""Wire schema shared by the REST remote and the local cache."""

from __future__ import annotations

from .models import FIELD_ALIASES, EventPayload
from .serializers import dump_events, load_records, parse_payload, serialize_event

__all__ = ["EventPayload", "FIELD_ALIASES", "dump_events", "load_records", "parse_payload", "serialize_event"]
