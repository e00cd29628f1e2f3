from __future__ import annotations

from pathlib import Path


def default_data_dir() -> Path:
    # Relative to the working directory, never to the installed package.
    return Path.cwd() / "data"


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path
