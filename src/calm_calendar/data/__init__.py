"""Data access layer."""

from __future__ import annotations

from .cache import CacheStorage, FileCacheStorage, MemoryCacheStorage
from .mirror import MirrorDispatcher, MirrorTask
from .remote import RemoteEventStore
from .sync import SyncController, SyncTransition

__all__ = [
    "CacheStorage",
    "FileCacheStorage",
    "MemoryCacheStorage",
    "MirrorDispatcher",
    "MirrorTask",
    "RemoteEventStore",
    "SyncController",
    "SyncTransition",
]
