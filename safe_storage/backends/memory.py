from __future__ import annotations

from typing import Any

from .interfaces import StorageBackend


class MemoryBackend(StorageBackend):
    """
    Volatile in-process store. Nothing survives the process.

    Values are kept as given; StorageMap already hands over fresh JSON-compatible copies.
    """

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(initial or {})

    async def get(self, key: str) -> Any | None:
        return self._data.get(key)

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def clear(self) -> None:
        self._data.clear()

    async def keys(self) -> list[str]:
        return list(self._data)
