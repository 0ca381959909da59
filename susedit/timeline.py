from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterable, Iterator, Optional, Tuple

from sortedcontainers import SortedKeyList

from susedit.chart import LANE_COUNT, BeatsTime, Note

NotesSnapshot = Tuple[Note, ...]


def note_sort_key(note: Note) -> Tuple[BeatsTime, int]:
    return (note.beat, note.lane)


class NoteTimeline:
    """Notes of a chart, always kept sorted by (beat, lane).

    Every note stored here has an id handed out by the timeline itself, ids
    are never given out twice, even after the note they were given to gets
    removed"""

    def __init__(self, notes: Iterable[Note] = ()) -> None:
        self._notes: SortedKeyList[Note, Tuple[BeatsTime, int]] = SortedKeyList(
            key=note_sort_key
        )
        self._by_id: Dict[int, Note] = {}
        self._last_id = 0
        for note in notes:
            self.insert(note)

    @classmethod
    def from_notes(cls, notes: Iterable[Note]) -> NoteTimeline:
        """Create a timeline from already identified notes, keeping their
        ids when possible"""
        timeline = cls()
        timeline.restore(notes)
        return timeline

    def _next_id(self) -> int:
        self._last_id += 1
        return self._last_id

    @property
    def last_id(self) -> int:
        """Highest id ever handed out"""
        return self._last_id

    def reserve_ids(self, last_id: int) -> None:
        """Never hand out ids up to last_id"""
        self._last_id = max(self._last_id, last_id)

    def insert(self, note: Note) -> Note:
        """Store a copy of the note under a fresh id and return it"""
        stored = replace(note, id=self._next_id())
        self._add(stored)
        return stored

    def _add(self, note: Note) -> None:
        assert note.id is not None
        self._notes.add(note)
        self._by_id[note.id] = note

    def remove(self, note_id: int) -> Optional[Note]:
        note = self._by_id.pop(note_id, None)
        if note is not None:
            self._notes.remove(note)
        return note

    def move(self, note_id: int, lane: int, beat: BeatsTime) -> Optional[Note]:
        note = self._by_id.get(note_id)
        if note is None:
            return None

        # raises ValueError on a bad lane or beat
        moved = replace(note, lane=lane, beat=beat)
        self._notes.remove(note)
        note.lane = moved.lane
        note.beat = moved.beat
        self._notes.add(note)
        return note

    def get(self, note_id: int) -> Optional[Note]:
        return self._by_id.get(note_id)

    def nearest_by_beat_lane(
        self, beat: BeatsTime, lane: int, max_beat_distance: BeatsTime
    ) -> Optional[Note]:
        """Closest note in the given lane that's at most max_beat_distance
        beats away, the earliest one wins in case of a tie"""
        beat = BeatsTime(beat)
        candidates = self._notes.irange_key(
            min_key=(beat - max_beat_distance, -1),
            max_key=(beat + max_beat_distance, LANE_COUNT),
        )
        in_lane = (n for n in candidates if n.lane == lane)
        return min(in_lane, key=lambda n: abs(n.beat - beat), default=None)

    def clear(self) -> None:
        self._notes.clear()
        self._by_id.clear()

    def snapshot(self) -> NotesSnapshot:
        """Value copies of the notes, in order"""
        return tuple(replace(n) for n in self._notes)

    def restore(self, notes: Iterable[Note]) -> None:
        """Replace every note with copies of the given ones. Notes that
        already have an id keep it unless it's taken, the id counter is then
        moved past every id in use so that it never hands out one of them"""
        self.clear()
        pending = []
        for note in notes:
            if note.id is None or note.id in self._by_id:
                pending.append(note)
            else:
                self._add(replace(note))

        self._last_id = max(self._last_id, max(self._by_id, default=0))
        for note in pending:
            self.insert(note)

    def copy(self) -> NoteTimeline:
        clone = NoteTimeline.from_notes(self.snapshot())
        clone.reserve_ids(self._last_id)
        return clone

    def __deepcopy__(self, memo: dict) -> NoteTimeline:
        return self.copy()

    def __iter__(self) -> Iterator[Note]:
        return iter(self._notes)

    def __len__(self) -> int:
        return len(self._notes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NoteTimeline):
            return NotImplemented
        return list(self) == list(other)

    def __repr__(self) -> str:
        return f"NoteTimeline({list(self._notes)!r})"
