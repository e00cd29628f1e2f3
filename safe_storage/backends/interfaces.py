from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class StorageBackend(Protocol):
    """
    The narrow port StorageMap needs from a store. Values are JSON-compatible;
    `None` from `get` means the key is absent.
    """

    async def get(self, key: str) -> Any | None:
        """Raw stored value, or None when the key is absent."""
        ...

    async def set(self, key: str, value: Any) -> None:
        """Store `value` under `key`, replacing any previous value."""
        ...

    async def delete(self, key: str) -> None:
        """Remove `key`. No-op if it does not exist."""
        ...

    async def clear(self) -> None:
        """Remove every key this backend owns."""
        ...

    async def keys(self) -> list[str]:
        """Snapshot of the stored keys."""
        ...


@runtime_checkable
class SyncStorageBackend(Protocol):
    """Blocking counterpart of StorageBackend (flat stores, files)."""

    def get(self, key: str) -> Any | None: ...
    def set(self, key: str, value: Any) -> None: ...
    def delete(self, key: str) -> None: ...
    def clear(self) -> None: ...
    def keys(self) -> list[str]: ...
