from __future__ import annotations

from .adapters import AsyncBackendAdapter
from .disk import DiskJsonBackend
from .interfaces import StorageBackend, SyncStorageBackend
from .memory import MemoryBackend

__all__ = [
    "StorageBackend",
    "SyncStorageBackend",
    "MemoryBackend",
    "DiskJsonBackend",
    "AsyncBackendAdapter",
]
