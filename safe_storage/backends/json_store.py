from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ..errors import BackendError


def read_json(path: Path) -> Any | None:
    """
    Read JSON from disk.

    Returns None for missing or empty files. Unreadable files and invalid JSON
    raise BackendError: a corrupted document must not read as an empty store.
    """
    try:
        if not path.exists():
            return None
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise BackendError(f"cannot read {path}: {e}") from e
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except ValueError as e:
        raise BackendError(f"{path} is not valid JSON: {e}") from e


def atomic_write_json(path: Path, payload: Any, *, indent: int = 2, sort_keys: bool = True) -> None:
    """
    Atomically write JSON to disk by writing to a temp file then replacing.

    The payload is serialized before the temp file is opened, so a value that
    is not JSON-compatible leaves the previous document untouched.
    """
    try:
        text = json.dumps(payload, indent=indent, sort_keys=sort_keys, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise BackendError(f"value is not JSON-compatible: {e}") from e

    tmp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tmp_path.open("w", encoding="utf-8") as f:
            f.write(text)
            f.write("\n")
        tmp_path.replace(path)
    except OSError as e:
        raise BackendError(f"cannot write {path}: {e}") from e
