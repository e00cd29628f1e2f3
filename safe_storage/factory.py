from __future__ import annotations

import logging

from dotenv import load_dotenv

from .backends import AsyncBackendAdapter, DiskJsonBackend, MemoryBackend, StorageBackend
from .paths import ensure_dir
from .settings import Settings, get_settings
from .storage_map import StorageMap

logger = logging.getLogger(__name__)


def open_storage_map(settings: Settings | None = None, *, env_file: str = "local.env") -> StorageMap:
    """
    Build a StorageMap over the backend the settings ask for.

    When no settings are given, `env_file` is loaded first (missing file is fine)
    and settings are read from the environment.
    """
    if settings is None:
        load_dotenv(env_file)
        settings = get_settings()

    backend: StorageBackend
    if settings.persist_to_disk:
        ensure_dir(settings.data_dir)
        backend = AsyncBackendAdapter(DiskJsonBackend(settings.document_path, prefix=settings.key_prefix))
        logger.info("STORAGE: disk backend at %s (prefix=%r)", settings.document_path, settings.key_prefix)
    else:
        backend = MemoryBackend()
        logger.info("STORAGE: memory backend")

    return StorageMap(backend, debug_log=settings.debug_log)
