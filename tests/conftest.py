from __future__ import annotations

from pathlib import Path
import sys

import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


ENV_VARS = (
    "SAFE_STORAGE_PERSIST_TO_DISK",
    "SAFE_STORAGE_DATA_DIR",
    "SAFE_STORAGE_DOCUMENT",
    "SAFE_STORAGE_PREFIX",
    "SAFE_STORAGE_DEBUG_LOG",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Remove every SAFE_STORAGE_* variable for the test and restore the previous
    state afterwards, including variables a test loads from a dotenv file.
    """
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


@pytest.fixture
def sandbox_project(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, clean_env) -> Path:
    """
    Run the test from a temp working directory so tests never touch a real ./data.
    """
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def document_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "storage.json"
