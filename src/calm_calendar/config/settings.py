from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from ..core.config import DATA_DIR

load_dotenv()

DEFAULT_REMOTE_URL = "http://localhost:3001/api"


@dataclass(frozen=True)
class RemoteSettings:
    base_url: Optional[str]
    timeout: float

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url)

    @property
    def events_url(self) -> str:
        return f"{(self.base_url or '').rstrip('/')}/events"


@dataclass(frozen=True)
class CacheSettings:
    directory: Path
    key: str


@dataclass(frozen=True)
class ViewSettings:
    default_mode: str
    month_cell_limit: int


@dataclass(frozen=True)
class LoggingSettings:
    level: str
    directory: Path


@dataclass(frozen=True)
class AppSettings:
    remote: RemoteSettings
    cache: CacheSettings
    view: ViewSettings
    logging: LoggingSettings


def _float_from_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    remote = RemoteSettings(
        base_url=os.getenv("CALM_REMOTE_URL", DEFAULT_REMOTE_URL) or None,
        timeout=_float_from_env("CALM_REMOTE_TIMEOUT", 5.0),
    )

    cache = CacheSettings(
        directory=Path(os.getenv("CALM_CACHE_DIR", str(DATA_DIR))),
        key=os.getenv("CALM_CACHE_KEY", "calendar_events"),
    )

    view = ViewSettings(
        default_mode=os.getenv("CALM_DEFAULT_VIEW", "month").lower(),
        month_cell_limit=_int_from_env("CALM_MONTH_CELL_LIMIT", 3),
    )

    logging_settings = LoggingSettings(
        level=os.getenv("CALM_LOG_LEVEL", "INFO").upper(),
        directory=Path(os.getenv("CALM_LOG_DIR", str(DATA_DIR / "logs"))),
    )

    return AppSettings(remote=remote, cache=cache, view=view, logging=logging_settings)
