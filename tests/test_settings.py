from __future__ import annotations

import asyncio
from pathlib import Path

import safe_storage
from safe_storage import AsyncBackendAdapter, DiskJsonBackend, MemoryBackend, open_storage_map
from safe_storage.settings import Settings, get_settings


def test_defaults(sandbox_project: Path):
    settings = get_settings()
    assert settings.persist_to_disk is False
    assert settings.data_dir == Path.cwd() / "data"
    assert settings.data_dir.parent.samefile(sandbox_project)
    assert settings.document_path == settings.data_dir / "storage.json"
    assert settings.key_prefix == ""
    assert settings.debug_log is True


def test_default_data_dir_is_outside_the_package(sandbox_project: Path, monkeypatch):
    monkeypatch.setenv("SAFE_STORAGE_PERSIST_TO_DISK", "true")
    package_dir = Path(safe_storage.__file__).resolve().parent

    storage = open_storage_map(env_file=str(sandbox_project / "missing.env"))
    backend = storage.backend
    assert isinstance(backend, AsyncBackendAdapter)
    disk = backend.wrapped
    assert isinstance(disk, DiskJsonBackend)

    assert disk.path.parent.samefile(sandbox_project / "data")
    assert package_dir.parent not in disk.path.resolve().parents


def test_environment_overrides(sandbox_project: Path, monkeypatch):
    monkeypatch.setenv("SAFE_STORAGE_PERSIST_TO_DISK", "yes")
    monkeypatch.setenv("SAFE_STORAGE_DATA_DIR", str(sandbox_project / "elsewhere"))
    monkeypatch.setenv("SAFE_STORAGE_DOCUMENT", "prefs.json")
    monkeypatch.setenv("SAFE_STORAGE_PREFIX", "myapp:")
    monkeypatch.setenv("SAFE_STORAGE_DEBUG_LOG", "off")

    settings = get_settings()
    assert settings.persist_to_disk is True
    assert settings.document_path == sandbox_project / "elsewhere" / "prefs.json"
    assert settings.key_prefix == "myapp:"
    assert settings.debug_log is False


def test_open_storage_map_defaults_to_memory(sandbox_project: Path):
    storage = open_storage_map(env_file=str(sandbox_project / "missing.env"))
    assert isinstance(storage.backend, MemoryBackend)


def test_open_storage_map_reads_env_file(sandbox_project: Path):
    env_file = sandbox_project / "local.env"
    env_file.write_text(
        "SAFE_STORAGE_PERSIST_TO_DISK=true\n"
        f"SAFE_STORAGE_DATA_DIR={sandbox_project / 'store'}\n"
        "SAFE_STORAGE_PREFIX=app:\n",
        encoding="utf-8",
    )

    storage = open_storage_map(env_file=str(env_file))
    backend = storage.backend
    assert isinstance(backend, AsyncBackendAdapter)
    disk = backend.wrapped
    assert isinstance(disk, DiskJsonBackend)
    assert disk.path == sandbox_project / "store" / "storage.json"
    assert disk.prefix == "app:"

    async def _run():
        await storage.set("count", {"type": "integer"}, 3)
        assert await storage.get("count", {"type": "integer"}) == 3

    asyncio.run(_run())
    assert '"app:count": 3' in disk.path.read_text(encoding="utf-8")


def test_open_storage_map_with_explicit_settings(tmp_path: Path):
    settings = Settings(
        persist_to_disk=True,
        data_dir=tmp_path / "explicit",
        document_name="doc.json",
        key_prefix="",
        debug_log=False,
    )
    storage = open_storage_map(settings)
    assert (tmp_path / "explicit").is_dir()
    assert isinstance(storage.backend, AsyncBackendAdapter)
