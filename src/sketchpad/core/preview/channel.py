from __future__ import annotations

"""
One-Way Bridge Channel.

Models the cross-boundary message path between a sandboxed preview (producer)
and the host (consumer). Delivery is FIFO. Once closed, the channel silently
drops everything the dead context still posts.
"""

import queue
import threading
from typing import Any, List


class BridgeChannel:
    """
    Unbounded FIFO with a producer side and a consumer side.
    """

    def __init__(self) -> None:
        self._queue: queue.Queue[Any] = queue.Queue()
        self._closed = threading.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def post(self, payload: Any) -> bool:
        """
        Producer side. Never blocks.

        Returns:
            bool: False if the channel was already closed and the payload dropped.
        """
        if self._closed.is_set():
            return False
        self._queue.put_nowait(payload)
        return True

    def drain(self) -> List[Any]:
        """Consumer side. Return every pending payload in posting order."""
        if self._closed.is_set():
            return []
        items: List[Any] = []
        while True:
            try:
                items.append(self._queue.get_nowait())
            except queue.Empty:
                return items

    def close(self) -> None:
        """Stop delivery and discard anything still pending."""
        self._closed.set()
        while True:
            try:
                self._queue.get_nowait()
            except queue.Empty:
                return
