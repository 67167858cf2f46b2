from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Isolation of the user data directory so no test touches the real one.
3. Shared fixtures for trees, workspaces and media payloads.
"""

import base64
import itertools
import os
import sys
from pathlib import Path
from typing import Callable, Generator

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from sketchpad.core.vfs.file_tree import FileTree  # noqa: E402
from sketchpad.core.workspace import Workspace  # noqa: E402
from sketchpad.domain.file_models import ResourceHandle  # noqa: E402

# Smallest valid PNG (1x1 transparent pixel)
PNG_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def isolated_user_data(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """
    Redirect the application data directory into a temporary location.

    Returns:
        Path: The temporary data directory.
    """
    home = tmp_path / "sketchpad_home"
    monkeypatch.setenv("SKETCHPAD_HOME", str(home))
    return home


@pytest.fixture
def id_factory() -> Callable[[], str]:
    """Deterministic node id generator (n1, n2, ...)."""
    counter = itertools.count(1)
    return lambda: f"n{next(counter)}"


@pytest.fixture
def tree(id_factory: Callable[[], str]) -> FileTree:
    """A fresh tree holding only the default entry script."""
    return FileTree(id_factory=id_factory)


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES


@pytest.fixture
def image_handle() -> Callable[[str], ResourceHandle]:
    """Factory of image handles that do not go through a resource store."""
    counter = itertools.count(1)

    def _make(handle_id: str = "") -> ResourceHandle:
        hid = handle_id or f"h{next(counter)}"
        return ResourceHandle(hid, f"data:image/png;base64,{hid}", "image/png", 4)

    return _make


@pytest.fixture
def workspace() -> Generator[Workspace, None, None]:
    """A default workspace, closed after the test."""
    ws = Workspace()
    yield ws
    ws.close()
