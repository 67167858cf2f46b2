from __future__ import annotations

"""
Logging Lifecycle.

The root logger gets a single QueueHandler; a QueueListener thread forwards
records to the real stream and file handlers. Workspace actions therefore
never block on log I/O. Configuration is idempotent and reversible through
shutdown_logging().
"""

import atexit
import logging
import os
import queue
from collections import deque
from logging.handlers import QueueHandler, QueueListener
from typing import List, Optional

from sketchpad.infra.fs import get_user_data_dir
from sketchpad.infra.logging.config import LoggingConfig
from sketchpad.infra.logging.handlers import (
    is_managed,
    mark_managed,
    rotating_file_handler,
    stream_handler,
)

# Markers stored on the root logger
_CONFIGURED_FLAG_ATTR: str = "_sketchpad_configured"
_QUEUE_LISTENER_ATTR: str = "_sketchpad_queue_listener"

DEFAULT_LOG_FILE = "sketchpad.log"
_FALLBACK_FMT = "CRITICAL FALLBACK | %(levelname)s | %(message)s"


# ==============================================================================
# PUBLIC API
# ==============================================================================

def get_default_log_path(file_name: str = DEFAULT_LOG_FILE) -> str:
    """Location of the diagnostic log inside the user data directory."""
    return os.path.join(get_user_data_dir(), "logs", file_name)


def configure_logging(cfg: LoggingConfig, *, force: bool = False) -> logging.Logger:
    """
    Install the queue-based handler chain on the root logger.

    A second call is a no-op unless force is set, in which case the previous
    chain is torn down first.

    Args:
        cfg: Logging settings.
        force: Rebuild an existing configuration.

    Returns:
        logging.Logger: The root logger.
    """
    root = logging.getLogger()
    if getattr(root, _CONFIGURED_FLAG_ATTR, False) and not force:
        return root

    try:
        _teardown(root)
        root.setLevel(cfg.level_value)

        targets = _build_targets(cfg)
        if not targets:
            return root

        log_queue: queue.Queue = queue.Queue(-1)
        listener = QueueListener(log_queue, *targets, respect_handler_level=True)
        listener.start()
        root.addHandler(mark_managed(QueueHandler(log_queue)))

        setattr(root, _QUEUE_LISTENER_ATTR, listener)
        setattr(root, _CONFIGURED_FLAG_ATTR, True)
        atexit.register(_stop_listener, listener)
    except Exception:
        _install_fallback(root)
    return root


def shutdown_logging() -> None:
    """Flush pending records and remove every managed handler."""
    _teardown(logging.getLogger())


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def get_recent_logs(n_lines: int = 100, log_path: Optional[str] = None) -> str:
    """
    Return the last lines of the log file.

    Args:
        n_lines: Number of trailing lines.
        log_path: File to read; the default log when omitted.

    Returns:
        str: The tail, or a short explanation when it cannot be read.
    """
    path = log_path or get_default_log_path()
    if not os.path.isfile(path):
        return "Log file not found."
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            return "".join(deque(f, maxlen=max(0, n_lines)))
    except OSError as e:
        return f"Error retrieving logs: {e}"


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _build_targets(cfg: LoggingConfig) -> List[logging.Handler]:
    targets: List[logging.Handler] = []
    if cfg.console:
        targets.append(stream_handler(cfg.level_value, cfg.console_fmt))
    if cfg.log_file:
        fh = rotating_file_handler(
            cfg.log_file,
            cfg.level_value,
            cfg.file_fmt,
            cfg.datefmt,
            cfg.max_bytes,
            cfg.backup_count,
        )
        if fh is not None:
            targets.append(fh)
    return targets


def _teardown(root: logging.Logger) -> None:
    listener = getattr(root, _QUEUE_LISTENER_ATTR, None)
    if listener is not None:
        _stop_listener(listener)
        setattr(root, _QUEUE_LISTENER_ATTR, None)

    for handler in [h for h in root.handlers if is_managed(h)]:
        root.removeHandler(handler)
        handler.close()

    if hasattr(root, _CONFIGURED_FLAG_ATTR):
        delattr(root, _CONFIGURED_FLAG_ATTR)


def _install_fallback(root: logging.Logger) -> None:
    """Plain stderr logging when the queue chain cannot be built."""
    for handler in [h for h in root.handlers if is_managed(h)]:
        root.removeHandler(handler)
    root.setLevel(logging.INFO)
    root.addHandler(stream_handler(logging.INFO, _FALLBACK_FMT))
    root.warning("Diagnostic infrastructure failed. Switched to emergency console.")


def _stop_listener(listener: QueueListener) -> None:
    # stop() on an already stopped listener fails on older interpreters
    if getattr(listener, "_thread", None) is not None:
        listener.stop()
