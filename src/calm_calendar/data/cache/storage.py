from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Protocol

from ...core.config import ensure_data_dir


class CacheStorage(Protocol):
    """Key/blob storage holding the serialized event collection."""

    def get(self, key: str) -> Optional[bytes]: ...

    def set(self, key: str, blob: bytes) -> None: ...


@dataclass
class MemoryCacheStorage:
    """In-process storage, used by tests and throwaway sessions."""

    blobs: Dict[str, bytes] = field(default_factory=dict)

    def get(self, key: str) -> Optional[bytes]:
        return self.blobs.get(key)

    def set(self, key: str, blob: bytes) -> None:
        self.blobs[key] = bytes(blob)


class FileCacheStorage:
    """One JSON file per key inside ``directory``; writes replace the file atomically."""

    def __init__(self, directory: Path) -> None:
        self._directory = directory

    def path_for(self, key: str) -> Path:
        return self._directory / f"{key}.json"

    def get(self, key: str) -> Optional[bytes]:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_bytes() or None

    def set(self, key: str, blob: bytes) -> None:
        ensure_data_dir(self._directory)
        target = self.path_for(key)
        fd, tmp_name = tempfile.mkstemp(dir=self._directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(blob + b"\n")
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


__all__ = ["CacheStorage", "FileCacheStorage", "MemoryCacheStorage"]
