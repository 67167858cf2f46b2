from __future__ import annotations

"""
Edit History Data Models.

The history of one file is two ordered sequences around the live content:
past ++ [current] ++ future is the complete edit timeline.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class HistoryEntry:
    """
    Undo/redo stacks of a single file.

    Attributes:
        past: Superseded contents, oldest first.
        future: Undone contents, next redo target first.
    """
    past: List[str] = field(default_factory=list)
    future: List[str] = field(default_factory=list)

    @property
    def timeline_length(self) -> int:
        """Number of states in the timeline including the live content."""
        return len(self.past) + len(self.future) + 1
