from __future__ import annotations

"""
Handler Factories.

Every handler built here carries a marker attribute so that reconfiguration
and shutdown only ever touch handlers this package installed, never those
added by libraries or by the test runner.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

_HANDLER_TAG_ATTR: str = "_sketchpad_handler"


def mark_managed(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _HANDLER_TAG_ATTR, True)
    return handler


def is_managed(handler: logging.Handler) -> bool:
    return getattr(handler, _HANDLER_TAG_ATTR, False) is True


def stream_handler(level: int, fmt: str) -> logging.Handler:
    """stderr handler with a plain formatter."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    return mark_managed(handler)


def rotating_file_handler(
        path: str,
        level: int,
        fmt: str,
        datefmt: str,
        max_bytes: int,
        backup_count: int,
) -> Optional[logging.Handler]:
    """
    Open a size-rotated UTF-8 log file, creating its directory.

    Returns:
        Optional[logging.Handler]: None when the file cannot be opened; the
        reason is written to stderr since logging is not available yet.
    """
    try:
        os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
        handler = RotatingFileHandler(
            path,
            maxBytes=int(max_bytes),
            backupCount=int(backup_count),
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"WARNING: log file '{path}' unavailable: {e}\n")
        return None

    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return mark_managed(handler)
