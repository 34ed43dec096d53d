"""Repositories owning first-class domain collections."""

from __future__ import annotations

from .events import DEFAULT_CACHE_KEY, EventRepository

__all__ = ["DEFAULT_CACHE_KEY", "EventRepository"]
