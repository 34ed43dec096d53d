from __future__ import annotations

import logging
from datetime import date
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from ..config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
QUIET_LOGGERS = ("urllib3",)

_INITIALIZED: Optional[Path] = None


def log_file_for(directory: Path, day: Optional[date] = None) -> Path:
    """Return the per-day log file inside ``directory``."""

    stamp = (day or date.today()).strftime("%Y%m%d")
    return directory / f"calm_calendar-{stamp}.log"


def configure_logging(level: Optional[str] = None, *, log_dir: Optional[Path] = None) -> Path:
    """Route records to a dated rotating file; only warnings reach the console.

    Repeated calls are no-ops and return the file chosen by the first call.
    """

    global _INITIALIZED
    if _INITIALIZED is not None:
        return _INITIALIZED

    settings = get_settings().logging
    directory = log_dir or settings.directory
    directory.mkdir(parents=True, exist_ok=True)
    log_file = log_file_for(directory)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    file_handler = RotatingFileHandler(str(log_file), maxBytes=1_000_000, backupCount=5, encoding="utf-8")
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(logging.WARNING)

    root = logging.getLogger()
    root.setLevel(getattr(logging, (level or settings.level).upper(), logging.INFO))
    root.addHandler(file_handler)
    root.addHandler(console_handler)

    # Connection-pool chatter from the REST client would drown out mirror results.
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _INITIALIZED = log_file
    logging.getLogger(__name__).info("Logging to %s", log_file)
    return log_file
