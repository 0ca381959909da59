"""Editor session : the document being edited, its undo history, the
selected note and the note type new notes are created with.

A presentation layer only ever talks to a session, which turns every action
into a command from susedit.commands"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional

from susedit import commands
from susedit.beatclock import BeatClock
from susedit.chart import BeatsTime, Note, NoteType
from susedit.document import ChartDocument
from susedit.formats.interchange import decode_interchange, encode_interchange
from susedit.formats.sus import decode_sus, encode_sus
from susedit.history import ChartHistory
from susedit.persistence import Storage, load_state, save_state

# How far away from a click a note can be and still get selected
DEFAULT_SELECTION_DISTANCE = BeatsTime(1, 2)


class EditorSession:
    def __init__(
        self,
        document: Optional[ChartDocument] = None,
        history: Optional[ChartHistory] = None,
        note_type: NoteType = NoteType.TAP,
    ) -> None:
        self.document = ChartDocument() if document is None else document
        self.history = ChartHistory() if history is None else history
        self.note_type = note_type
        self.selected_note_id: Optional[int] = None
        # pushing what is already current would drop a restored redo branch
        initial = self.document.timeline.snapshot()
        if self.history.current != initial:
            self.history.push(initial)

    @classmethod
    def from_storage(cls, storage: Storage) -> EditorSession:
        document, history = load_state(storage)
        return cls(document, history)

    def save(self, storage: Storage) -> None:
        save_state(storage, self.document, self.history)

    def run(self, command: commands.Command) -> ChartDocument:
        self.document = commands.apply(self.document, command, self.history)
        return self.document

    @property
    def selected_note(self) -> Optional[Note]:
        if self.selected_note_id is None:
            return None
        return self.document.timeline.get(self.selected_note_id)

    def select(self, note_id: Optional[int]) -> Optional[Note]:
        """Select a note by id, selecting an id that's not in the chart
        clears the selection"""
        note = None if note_id is None else self.document.timeline.get(note_id)
        self.selected_note_id = None if note is None else note.id
        return note

    def select_nearest(
        self,
        beat: BeatsTime,
        lane: int,
        max_beat_distance: BeatsTime = DEFAULT_SELECTION_DISTANCE,
    ) -> Optional[Note]:
        note = self.document.timeline.nearest_by_beat_lane(
            BeatsTime(beat), lane, BeatsTime(max_beat_distance)
        )
        self.selected_note_id = None if note is None else note.id
        return note

    def add_note(
        self, beat: BeatsTime, lane: int, type: Optional[NoteType] = None
    ) -> Note:
        """Add a note of the active type (unless told otherwise) and select
        it"""
        note_type = self.note_type if type is None else type
        self.run(commands.AddNote(beat=beat, lane=lane, type=note_type))
        note = self.document.timeline.get(self.document.timeline.last_id)
        assert note is not None
        self.selected_note_id = note.id
        return note

    def delete_note(self, note_id: int) -> None:
        self.run(commands.DeleteNote(note_id))
        if self.selected_note_id == note_id:
            self.selected_note_id = None

    def delete_selected(self) -> None:
        if self.selected_note_id is not None:
            self.delete_note(self.selected_note_id)

    def move_note(self, note_id: int, lane: int, beat: BeatsTime) -> None:
        self.run(commands.MoveNote(note_id=note_id, lane=lane, beat=beat))

    def move_selected(self, lane: int, beat: BeatsTime) -> None:
        if self.selected_note_id is not None:
            self.move_note(self.selected_note_id, lane, beat)

    def clear(self) -> None:
        self.run(commands.ClearNotes())
        self.selected_note_id = None

    def update_metadata(self, **kwargs: Any) -> None:
        self.run(commands.UpdateMetadata(**kwargs))

    def import_document(self, document: ChartDocument) -> None:
        self.run(commands.Import(document))
        self.selected_note_id = None

    def import_sus(self, text: str) -> None:
        self.import_document(decode_sus(text))

    def import_json(self, text: str) -> None:
        """Raises a FormatError and leaves the session untouched if the text
        is not a valid chart"""
        self.import_document(decode_interchange(text))

    def undo(self) -> None:
        self.run(commands.Undo())
        self.selected_note_id = None

    def redo(self) -> None:
        self.run(commands.Redo())
        self.selected_note_id = None

    def export_sus(self) -> str:
        return encode_sus(self.document)

    def export_json(self) -> str:
        return encode_interchange(self.document)

    def playback_beat(self, elapsed_seconds: Decimal) -> float:
        return BeatClock.from_document(self.document).playback_beat(elapsed_seconds)
