from __future__ import annotations

import asyncio
from typing import Any

from .interfaces import StorageBackend, SyncStorageBackend


class AsyncBackendAdapter(StorageBackend):
    """
    Async wrapper around a blocking backend.
    Uses asyncio.to_thread to avoid blocking the event loop on file I/O.
    """

    def __init__(self, backend: SyncStorageBackend) -> None:
        self._backend = backend

    @property
    def wrapped(self) -> SyncStorageBackend:
        return self._backend

    async def get(self, key: str) -> Any | None:
        return await asyncio.to_thread(self._backend.get, key)

    async def set(self, key: str, value: Any) -> None:
        await asyncio.to_thread(self._backend.set, key, value)

    async def delete(self, key: str) -> None:
        await asyncio.to_thread(self._backend.delete, key)

    async def clear(self) -> None:
        await asyncio.to_thread(self._backend.clear)

    async def keys(self) -> list[str]:
        return await asyncio.to_thread(self._backend.keys)
