from __future__ import annotations

"""
Preview Session and Host Console.

Host-side consumer of the bridge. A session runs one bundle; messages that
carry the configured origin tag are appended to the console in arrival order.
Stopping a session is immediate and any later message from its context is
discarded. The console is append-only and cleared only on explicit request.
"""

import itertools
import logging
import time
from typing import Iterator, List, Optional

from sketchpad.core.preview.channel import BridgeChannel
from sketchpad.domain.bundle_models import BridgeMessage, Bundle, LogEntry
from sketchpad.domain.constants import BRIDGE_ORIGIN_TAG, SEVERITY_ERROR

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# CONSOLE
# -----------------------------------------------------------------------------

class ConsoleLog:
    """
    Ordered, append-only log of preview output.
    """

    def __init__(self) -> None:
        self._entries: List[LogEntry] = []
        self._ids = itertools.count(1)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(list(self._entries))

    @property
    def entries(self) -> List[LogEntry]:
        return list(self._entries)

    @property
    def has_errors(self) -> bool:
        return any(e.severity == SEVERITY_ERROR for e in self._entries)

    def append(self, severity: str, text: str) -> LogEntry:
        entry = LogEntry(id=next(self._ids), severity=severity, text=text, timestamp=time.time())
        self._entries.append(entry)
        return entry

    def clear(self) -> None:
        self._entries.clear()


# -----------------------------------------------------------------------------
# SESSION
# -----------------------------------------------------------------------------

class PreviewSession:
    """
    Lifecycle of one preview run and its message channel.
    """

    def __init__(self, console: ConsoleLog, origin_tag: str = BRIDGE_ORIGIN_TAG) -> None:
        self.console = console
        self.origin_tag = origin_tag
        self.channel = BridgeChannel()
        self.bundle: Optional[Bundle] = None
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self, bundle: Bundle) -> None:
        """Hand the bundle over to the preview host and begin accepting messages."""
        self.bundle = bundle
        self._running = True
        logger.info(f"Preview started: {bundle.entry_path}")

    def stop(self) -> None:
        """End the run immediately. Pending and future messages are discarded."""
        if not self._running:
            return
        self._running = False
        self.channel.close()
        logger.info("Preview stopped.")

    def pump(self) -> List[LogEntry]:
        """
        Move pending bridge messages into the console.

        Payloads from a foreign origin or with an unrecognized shape are
        ignored. A user-program error is an ordinary log entry and never ends
        the session.

        Returns:
            List[LogEntry]: Entries appended by this call.
        """
        if not self._running:
            return []

        appended: List[LogEntry] = []
        for payload in self.channel.drain():
            message = BridgeMessage.from_payload(payload)
            if message is None or message.source != self.origin_tag:
                continue
            appended.append(self.console.append(message.severity, message.text))
        return appended
