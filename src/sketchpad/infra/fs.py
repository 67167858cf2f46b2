from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Locates the per-user directory that holds configuration and diagnostic logs,
and expands user-supplied paths.
"""

import os
from typing import Optional

APP_DIR_NAME = "Sketchpad"
UNIX_APP_DIR_NAME = ".sketchpad"
DATA_DIR_ENV_VAR = "SKETCHPAD_HOME"


def _platform_data_dir() -> str:
    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            return os.path.join(base, APP_DIR_NAME)
    return os.path.join(os.path.expanduser("~"), UNIX_APP_DIR_NAME)


def get_user_data_dir() -> str:
    """
    Resolve the directory for persistent application data, creating it on
    first use.

    Resolution order: $SKETCHPAD_HOME, then %LOCALAPPDATA%/Sketchpad on
    Windows, then ~/.sketchpad.

    Returns:
        str: Absolute path to the application data directory.
    """
    path = os.environ.get(DATA_DIR_ENV_VAR, "").strip() or _platform_data_dir()
    path = os.path.abspath(path)
    try:
        os.makedirs(path, exist_ok=True)
    except OSError:
        # Read-only home: callers fail later with a precise error
        pass
    return path


def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Expand '~' and environment variables and make the path absolute.

    Args:
        path: Raw path from the command line or configuration.
        fallback: Used when the raw path is empty.

    Returns:
        str: Absolute path.
    """
    raw = (path or "").strip() or fallback
    return os.path.abspath(os.path.expandvars(os.path.expanduser(raw)))
