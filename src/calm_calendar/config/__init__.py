"""Configuration models and helpers."""

from __future__ import annotations

from .settings import AppSettings, CacheSettings, LoggingSettings, RemoteSettings, ViewSettings, get_settings

__all__ = ["AppSettings", "CacheSettings", "LoggingSettings", "RemoteSettings", "ViewSettings", "get_settings"]
