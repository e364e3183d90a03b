from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Sample locale directories on disk.
3. In-memory filesystem and virtual clock doubles for reconciliation tests.
"""

import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Set

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from langmanager.core.scheduler import ManualScheduler  # noqa: E402
from langmanager.infra.fs import FileSystem  # noqa: E402

EN_RESOURCES: Dict[str, Any] = {
    "greeting": "Hello {name}!",
    "buttons": {
        "cancel": "Cancel",
        "confirm": "Confirm",
    },
}

FR_RESOURCES: Dict[str, Any] = {
    "greeting": "Bonjour {name} !",
    "buttons": {
        "cancel": "Annuler",
    },
}


# -----------------------------------------------------------------------------
# Test Doubles
# -----------------------------------------------------------------------------
class MemoryFileSystem(FileSystem):
    """
    In-memory FileSystem double keyed by absolute path.

    'broken' paths raise PermissionError on every access, which lets tests
    exercise the non-'not found' failure branches.
    """

    def __init__(self, root: str = "/res"):
        super().__init__()
        self.root = root
        self.files: Dict[str, str] = {}
        self.broken: Set[str] = set()
        self.reads = 0

    def path(self, name: str) -> str:
        return os.path.join(self.root, name)

    def write(self, name: str, content: Any) -> None:
        text = content if isinstance(content, str) else json.dumps(content)
        self.files[self.path(name)] = text

    def delete(self, name: str) -> None:
        self.files.pop(self.path(name), None)

    def validate_directory(self, path: str) -> str:
        return path

    def exists(self, path: str) -> bool:
        if path in self.broken:
            raise PermissionError(13, "Permission denied", path)
        return path in self.files

    def list_entries(self, path: str) -> list:
        prefix = path.rstrip("/") + "/"
        return sorted(p[len(prefix):] for p in self.files if p.startswith(prefix))

    def read_text(self, path: str) -> str:
        if path in self.broken:
            raise PermissionError(13, "Permission denied", path)
        if path not in self.files:
            raise FileNotFoundError(2, "No such file or directory", path)
        self.reads += 1
        return self.files[path]


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def memory_fs() -> MemoryFileSystem:
    """Provide an in-memory filesystem pre-populated with en/fr resources."""
    fs = MemoryFileSystem()
    fs.write("en.json", EN_RESOURCES)
    fs.write("fr.json", FR_RESOURCES)
    return fs


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def locale_dir(tmp_path: Path) -> Path:
    """
    Create a resource directory on disk with en.json and fr.json.

    Returns:
        Path: The directory path.
    """
    root = tmp_path / "locales"
    root.mkdir()
    write_json(root / "en.json", EN_RESOURCES)
    write_json(root / "fr.json", FR_RESOURCES)
    (root / "README.md").write_text("# not a resource", encoding="utf-8")
    return root


def write_json(path: Path, data: Any, indent: Optional[int] = 2) -> None:
    path.write_text(json.dumps(data, ensure_ascii=False, indent=indent), encoding="utf-8")
