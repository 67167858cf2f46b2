from __future__ import annotations

"""
Per-File Edit History.

Maintains undo/redo stacks keyed by file id. The store keeps its own copies of
superseded text and never reads the live tree, so replacing a node's content
cannot corrupt its history.
"""

import logging
from typing import Dict, Optional

from sketchpad.domain.history_models import HistoryEntry

logger = logging.getLogger(__name__)


class HistoryStore:
    """
    Linear undo/redo history for every edited file.
    """

    def __init__(self, limit: int = 0) -> None:
        """
        Args:
            limit: Maximum number of past states kept per file (0 = unbounded).
                Trimming only happens on commit.
        """
        self._entries: Dict[str, HistoryEntry] = {}
        self._limit = max(0, int(limit))

    def __contains__(self, file_id: object) -> bool:
        return file_id in self._entries

    def entry(self, file_id: str) -> HistoryEntry:
        """Return a copy of a file's stacks (empty if the file was never edited)."""
        current = self._entries.get(file_id)
        if current is None:
            return HistoryEntry()
        return HistoryEntry(past=list(current.past), future=list(current.future))

    def can_undo(self, file_id: str) -> bool:
        current = self._entries.get(file_id)
        return bool(current and current.past)

    def can_redo(self, file_id: str) -> bool:
        current = self._entries.get(file_id)
        return bool(current and current.future)

    def commit(self, file_id: str, prior_content: str) -> None:
        """
        Record the content that is about to be superseded.

        Must be called before the new content is applied. Any redo states are
        discarded, since a fresh edit forks the timeline.

        Args:
            file_id: Edited file.
            prior_content: Content being replaced.
        """
        current = self._entries.setdefault(file_id, HistoryEntry())
        current.past.append(prior_content)
        current.future.clear()

        if self._limit and len(current.past) > self._limit:
            del current.past[: len(current.past) - self._limit]

    def undo(self, file_id: str, current_content: str) -> Optional[str]:
        """
        Step one state back.

        Args:
            file_id: File to rewind.
            current_content: Live content, pushed onto the redo stack.

        Returns:
            Optional[str]: Content to restore, or None when there is nothing
            to undo.
        """
        current = self._entries.get(file_id)
        if not current or not current.past:
            return None
        restored = current.past.pop()
        current.future.insert(0, current_content)
        return restored

    def redo(self, file_id: str, current_content: str) -> Optional[str]:
        """
        Step one state forward.

        Args:
            file_id: File to replay.
            current_content: Live content, pushed onto the undo stack.

        Returns:
            Optional[str]: Content to restore, or None when there is nothing
            to redo.
        """
        current = self._entries.get(file_id)
        if not current or not current.future:
            return None
        restored = current.future.pop(0)
        current.past.append(current_content)
        return restored

    def discard(self, file_id: str) -> None:
        """Forget the history of a deleted file."""
        if self._entries.pop(file_id, None) is not None:
            logger.debug(f"History discarded for {file_id!r}")

    def clear(self) -> None:
        self._entries.clear()
