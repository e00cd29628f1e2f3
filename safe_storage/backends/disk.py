from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any

from ..errors import BackendError
from .interfaces import SyncStorageBackend
from .json_store import atomic_write_json, read_json

logger = logging.getLogger(__name__)

# Backends sharing a document serialize their read-modify-write cycles on it.
_path_locks: dict[Path, threading.Lock] = {}
_path_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    key = path.resolve()
    with _path_locks_guard:
        return _path_locks.setdefault(key, threading.Lock())


class DiskJsonBackend(SyncStorageBackend):
    """
    Flat synchronous store: every key lives in one JSON document on disk.

    - `prefix` namespaces keys inside the document; `keys()` and `clear()` only
      see and touch keys under this prefix.
    - Writes are atomic (temp file + replace) and serialized per path.
    - A document that is not a JSON object raises BackendError.
    """

    def __init__(self, path: Path, *, prefix: str = ""):
        self._path = path
        self._prefix = prefix

    @property
    def path(self) -> Path:
        return self._path

    @property
    def prefix(self) -> str:
        return self._prefix

    def _load(self) -> dict[str, Any]:
        raw = read_json(self._path)
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            raise BackendError(f"{self._path} does not hold a JSON object")
        return raw

    def _save(self, doc: dict[str, Any]) -> None:
        atomic_write_json(self._path, doc)

    def get(self, key: str) -> Any | None:
        with _lock_for(self._path):
            return self._load().get(self._prefix + key)

    def set(self, key: str, value: Any) -> None:
        with _lock_for(self._path):
            doc = self._load()
            doc[self._prefix + key] = value
            self._save(doc)
        logger.debug("DISK STORE: wrote %s to %s", key, self._path)

    def delete(self, key: str) -> None:
        with _lock_for(self._path):
            doc = self._load()
            if self._prefix + key in doc:
                del doc[self._prefix + key]
                self._save(doc)

    def clear(self) -> None:
        with _lock_for(self._path):
            if not self._prefix:
                self._save({})
                return
            doc = self._load()
            kept = {k: v for k, v in doc.items() if not k.startswith(self._prefix)}
            if len(kept) != len(doc):
                self._save(kept)

    def keys(self) -> list[str]:
        with _lock_for(self._path):
            doc = self._load()
        n = len(self._prefix)
        return [k[n:] for k in doc if k.startswith(self._prefix)]
