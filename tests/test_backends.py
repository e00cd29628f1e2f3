from __future__ import annotations

import asyncio
import json
import math

import pytest

from safe_storage.backends import disk
from safe_storage.backends import (
    AsyncBackendAdapter,
    DiskJsonBackend,
    MemoryBackend,
    StorageBackend,
    SyncStorageBackend,
)
from safe_storage.errors import BackendError


def test_backends_satisfy_the_ports(document_path):
    assert isinstance(MemoryBackend(), StorageBackend)
    assert isinstance(DiskJsonBackend(document_path), SyncStorageBackend)
    assert isinstance(AsyncBackendAdapter(DiskJsonBackend(document_path)), StorageBackend)


def test_memory_backend_basic_flow():
    async def _run():
        backend = MemoryBackend({"a": 1})
        assert await backend.get("a") == 1
        assert await backend.get("b") is None

        await backend.set("b", [1, 2])
        assert await backend.keys() == ["a", "b"]

        await backend.delete("a")
        await backend.delete("missing")
        assert await backend.keys() == ["b"]

        await backend.clear()
        assert await backend.keys() == []

    asyncio.run(_run())


def test_disk_backend_roundtrip(document_path):
    backend = DiskJsonBackend(document_path)
    assert backend.get("missing") is None
    assert backend.keys() == []

    backend.set("count", 5)
    backend.set("tags", ["a", "b"])
    assert backend.get("count") == 5
    assert sorted(backend.keys()) == ["count", "tags"]

    on_disk = json.loads(document_path.read_text(encoding="utf-8"))
    assert on_disk == {"count": 5, "tags": ["a", "b"]}

    backend.delete("count")
    assert backend.get("count") is None
    backend.clear()
    assert backend.keys() == []


def test_disk_backend_prefix_isolation(document_path):
    first = DiskJsonBackend(document_path, prefix="app1:")
    second = DiskJsonBackend(document_path, prefix="app2:")

    first.set("theme", "dark")
    second.set("theme", "light")
    assert first.get("theme") == "dark"
    assert second.get("theme") == "light"
    assert first.keys() == ["theme"]

    first.clear()
    assert first.keys() == []
    assert second.get("theme") == "light"

    on_disk = json.loads(document_path.read_text(encoding="utf-8"))
    assert on_disk == {"app2:theme": "light"}


def test_disk_backend_rejects_corrupted_documents(document_path):
    document_path.parent.mkdir(parents=True)

    document_path.write_text("{not json", encoding="utf-8")
    with pytest.raises(BackendError):
        DiskJsonBackend(document_path).get("a")

    document_path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(BackendError):
        DiskJsonBackend(document_path).keys()


def test_disk_backend_empty_file_reads_as_empty(document_path):
    document_path.parent.mkdir(parents=True)
    document_path.write_text("\n", encoding="utf-8")
    assert DiskJsonBackend(document_path).keys() == []


@pytest.mark.parametrize("value", [{1, 2}, math.nan, object()])
def test_disk_backend_write_of_non_json_value_leaves_document_untouched(document_path, value):
    backend = DiskJsonBackend(document_path)
    backend.set("kept", "yes")
    before = document_path.read_text(encoding="utf-8")

    with pytest.raises(BackendError):
        backend.set("bad", value)

    assert document_path.read_text(encoding="utf-8") == before
    assert not document_path.with_suffix(".json.tmp").exists()


def test_async_adapter_runs_blocking_backend(document_path):
    async def _run():
        backend = AsyncBackendAdapter(DiskJsonBackend(document_path))
        await backend.set("a", {"b": [1, 2]})
        assert await backend.get("a") == {"b": [1, 2]}
        assert await backend.keys() == ["a"]
        await backend.delete("a")
        assert await backend.get("a") is None
        await backend.set("x", 1)
        await backend.clear()
        assert await backend.keys() == []

    asyncio.run(_run())


def test_async_adapter_concurrent_writes_do_not_lose_keys(document_path):
    async def _run():
        backend = AsyncBackendAdapter(DiskJsonBackend(document_path))
        await asyncio.gather(*(backend.set(f"k{i}", i) for i in range(20)))
        assert sorted(await backend.keys()) == sorted(f"k{i}" for i in range(20))

    asyncio.run(_run())


def test_backends_on_one_document_share_a_lock(document_path):
    document_path.parent.mkdir(parents=True)
    same_file = document_path.parent / "." / document_path.name
    assert disk._lock_for(document_path) is disk._lock_for(same_file)
    assert disk._lock_for(document_path) is not disk._lock_for(document_path.with_name("other.json"))
