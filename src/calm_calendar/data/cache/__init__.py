"""Durable local cache backends."""

from __future__ import annotations

from .storage import CacheStorage, FileCacheStorage, MemoryCacheStorage

__all__ = ["CacheStorage", "FileCacheStorage", "MemoryCacheStorage"]
