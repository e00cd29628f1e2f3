from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from . import paths


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    # Backend
    persist_to_disk: bool
    data_dir: Path
    document_name: str
    key_prefix: str

    # Debug
    debug_log: bool

    @property
    def document_path(self) -> Path:
        return self.data_dir / self.document_name


def get_settings() -> Settings:
    # Default is the volatile memory backend; disk needs an explicit opt-in.
    persist_to_disk = _env_bool("SAFE_STORAGE_PERSIST_TO_DISK", False)

    raw_dir = os.getenv("SAFE_STORAGE_DATA_DIR", "").strip()
    data_dir = Path(raw_dir).expanduser() if raw_dir else paths.default_data_dir()

    document_name = os.getenv("SAFE_STORAGE_DOCUMENT", "storage.json").strip() or "storage.json"
    key_prefix = os.getenv("SAFE_STORAGE_PREFIX", "")

    debug_log = _env_bool("SAFE_STORAGE_DEBUG_LOG", True)

    return Settings(
        persist_to_disk=persist_to_disk,
        data_dir=data_dir,
        document_name=document_name,
        key_prefix=key_prefix,
        debug_log=debug_log,
    )
