"""Undo / redo history.

The history is a plain list of note snapshots plus a cursor. It never
branches : pushing a snapshot while the cursor is not on the last entry
throws away everything after the cursor first."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, List, Optional

from susedit.timeline import NotesSnapshot

HISTORY_CAPACITY = 200


def copy_snapshot(snapshot: Iterable) -> NotesSnapshot:
    return tuple(replace(n) for n in snapshot)


class ChartHistory:
    def __init__(self, capacity: int = HISTORY_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"History capacity has to be at least 1 : {capacity}")
        self.capacity = capacity
        self._entries: List[NotesSnapshot] = []
        self._index = -1

    @classmethod
    def from_entries(
        cls,
        entries: Iterable[NotesSnapshot],
        index: int,
        capacity: int = HISTORY_CAPACITY,
    ) -> ChartHistory:
        """Rebuild a history, typically a saved one. Only the last `capacity`
        entries are kept and the index is brought back in range"""
        history = cls(capacity)
        all_entries = [copy_snapshot(e) for e in entries]
        evicted = max(0, len(all_entries) - capacity)
        history._entries = all_entries[evicted:]
        history._index = min(max(index - evicted, 0), len(history._entries) - 1)
        return history

    @property
    def entries(self) -> List[NotesSnapshot]:
        return list(self._entries)

    @property
    def index(self) -> int:
        """Position of the current snapshot, -1 when the history is empty"""
        return self._index

    @property
    def current(self) -> Optional[NotesSnapshot]:
        if self._index < 0:
            return None
        return self._entries[self._index]

    @property
    def steps_behind_head(self) -> int:
        """How many undos away from the newest snapshot we are, 0 means we
        are at the head"""
        return max(0, len(self._entries) - 1 - self._index)

    @property
    def at_head(self) -> bool:
        return self.steps_behind_head == 0

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._entries) - 1

    def push(self, snapshot: Iterable) -> bool:
        """Record a snapshot, returns False if it was the same as the current
        one and nothing was recorded. Either way the snapshots after the
        current one are gone and the history is back at its head"""
        snapshot = copy_snapshot(snapshot)
        del self._entries[self._index + 1 :]
        if self._index >= 0 and snapshot == self._entries[self._index]:
            return False

        self._entries.append(snapshot)
        if len(self._entries) > self.capacity:
            del self._entries[0]
        self._index = len(self._entries) - 1
        return True

    def undo(self) -> Optional[NotesSnapshot]:
        if not self.can_undo:
            return None
        self._index -= 1
        return self.current

    def redo(self) -> Optional[NotesSnapshot]:
        if not self.can_redo:
            return None
        self._index += 1
        return self.current

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return (
            f"ChartHistory(capacity={self.capacity}, entries={len(self._entries)}, "
            f"index={self._index})"
        )
