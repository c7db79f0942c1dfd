"""
History Stack - Linear undo/redo history of committed prompt snapshots

Entries are append-only except that committing while the cursor is not at the
tail discards everything after the cursor first (branching truncates redo).

Cursor semantics:
- index == -1 means "before the first entry", i.e. the empty prompt
- otherwise 0 <= index <= len(entries) - 1
"""

import time
from typing import List, Optional

from models.prompt_history import HistoryEntry


class HistoryStack:
    """Ordered prompt snapshots with a cursor"""

    def __init__(self):
        self._entries: List[HistoryEntry] = []
        self._index: int = -1
        self._last_timestamp: int = 0

    # ---- Read-only views ----

    @property
    def entries(self) -> List[HistoryEntry]:
        return list(self._entries)

    @property
    def index(self) -> int:
        return self._index

    @property
    def can_undo(self) -> bool:
        return self._index >= 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._entries) - 1

    def __len__(self) -> int:
        return len(self._entries)

    def current(self) -> Optional[HistoryEntry]:
        """Entry under the cursor, None when the cursor is at -1"""
        if self._index < 0:
            return None
        return self._entries[self._index]

    def current_prompt(self) -> str:
        entry = self.current()
        return entry.prompt if entry else ""

    # ---- Transitions ----

    def commit(self, prompt: str) -> HistoryEntry:
        """Truncate the redo suffix, append a snapshot and move the cursor to it"""
        del self._entries[self._index + 1:]
        entry = HistoryEntry(prompt=prompt, timestamp=self._next_timestamp())
        self._entries.append(entry)
        self._index = len(self._entries) - 1
        return entry

    def undo(self) -> Optional[str]:
        """
        Step the cursor back.

        Returns the prompt now under the cursor ("" when stepping off the first
        entry), or None when there is nothing to undo.
        """
        if self._index > 0:
            self._index -= 1
            return self._entries[self._index].prompt
        if self._index == 0:
            self._index = -1
            return ""
        return None

    def redo(self) -> Optional[str]:
        """Step the cursor forward; None when already at the tail"""
        if self._index < len(self._entries) - 1:
            self._index += 1
            return self._entries[self._index].prompt
        return None

    def jump_to(self, index: int) -> str:
        """Move the cursor to an arbitrary entry and return its prompt"""
        if index < 0 or index >= len(self._entries):
            raise IndexError(f"History index out of range: {index}")
        self._index = index
        return self._entries[index].prompt

    def clear(self):
        self._entries.clear()
        self._index = -1

    def _next_timestamp(self) -> int:
        # Unique within the session even when two commits land in the same tick
        now = time.monotonic_ns()
        if now <= self._last_timestamp:
            now = self._last_timestamp + 1
        self._last_timestamp = now
        return now
