"""Editing commands.

Everything a user can do to a chart is expressed as one of the command
values below and goes through `apply`, which never touches the document it
is given : it works on a copy and returns it. Commands that change the notes
record the result in the history"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from functools import singledispatch
from typing import Any, Optional, Union

from susedit.chart import LANE_COUNT, BeatsTime, BPMEvent, Note, NoteType
from susedit.document import (
    MAX_BEATS_PER_MEASURE,
    MAX_BPM,
    MAX_MEASURES,
    MIN_BEATS_PER_MEASURE,
    MIN_BPM,
    MIN_MEASURES,
    ChartDocument,
)
from susedit.history import ChartHistory
from susedit.utils import clamp, single_line


@dataclass(frozen=True)
class AddNote:
    beat: BeatsTime
    lane: int
    type: NoteType = NoteType.TAP


@dataclass(frozen=True)
class DeleteNote:
    note_id: int


@dataclass(frozen=True)
class MoveNote:
    note_id: int
    lane: int
    beat: BeatsTime


@dataclass(frozen=True)
class ClearNotes:
    pass


@dataclass(frozen=True)
class UpdateMetadata:
    """Fields left to None are not changed"""

    title: Optional[str] = None
    artist: Optional[str] = None
    designer: Optional[str] = None
    difficulty: Optional[int] = None
    playlevel: Optional[int] = None
    bpm: Optional[Decimal] = None
    measures: Optional[int] = None
    beats_per_measure: Optional[int] = None


@dataclass(frozen=True)
class Import:
    document: ChartDocument


@dataclass(frozen=True)
class Undo:
    pass


@dataclass(frozen=True)
class Redo:
    pass


Command = Union[
    AddNote, DeleteNote, MoveNote, ClearNotes, UpdateMetadata, Import, Undo, Redo
]


def apply(
    document: ChartDocument, command: Command, history: ChartHistory
) -> ChartDocument:
    return _apply(command, document.copy(), history)


@singledispatch
def _apply(
    command: Any, document: ChartDocument, history: ChartHistory
) -> ChartDocument:
    raise TypeError(f"Unknown command : {command!r}")


@_apply.register
def _add_note(
    command: AddNote, document: ChartDocument, history: ChartHistory
) -> ChartDocument:
    document.timeline.insert(
        Note(
            beat=clamp_beat(command.beat, document),
            lane=clamp_lane(command.lane),
            type=command.type,
        )
    )
    history.push(document.timeline.snapshot())
    return document


@_apply.register
def _delete_note(
    command: DeleteNote, document: ChartDocument, history: ChartHistory
) -> ChartDocument:
    if document.timeline.remove(command.note_id) is not None:
        history.push(document.timeline.snapshot())
    return document


@_apply.register
def _move_note(
    command: MoveNote, document: ChartDocument, history: ChartHistory
) -> ChartDocument:
    moved = document.timeline.move(
        command.note_id,
        lane=clamp_lane(command.lane),
        beat=clamp_beat(command.beat, document),
    )
    if moved is not None:
        history.push(document.timeline.snapshot())
    return document


@_apply.register
def _clear_notes(
    command: ClearNotes, document: ChartDocument, history: ChartHistory
) -> ChartDocument:
    document.timeline.clear()
    history.push(document.timeline.snapshot())
    return document


@_apply.register
def _update_metadata(
    command: UpdateMetadata, document: ChartDocument, history: ChartHistory
) -> ChartDocument:
    for name in ("title", "artist", "designer"):
        value = getattr(command, name)
        if value is not None:
            setattr(document, name, single_line(str(value)))

    if command.difficulty is not None:
        document.difficulty = int(command.difficulty)
    if command.playlevel is not None:
        document.playlevel = int(command.playlevel)
    if command.bpm is not None:
        bpm = clamp(Decimal(command.bpm), MIN_BPM, MAX_BPM)
        document.bpm_list = [BPMEvent(BeatsTime(0), bpm), *document.bpm_list[1:]]
    if command.measures is not None:
        document.measures = clamp(int(command.measures), MIN_MEASURES, MAX_MEASURES)
    if command.beats_per_measure is not None:
        document.beats_per_measure = clamp(
            int(command.beats_per_measure),
            MIN_BEATS_PER_MEASURE,
            MAX_BEATS_PER_MEASURE,
        )

    # notes past the new end of the chart are brought back to it, as on import
    if clamp_notes_to_end(document):
        history.push(document.timeline.snapshot())

    return document


@_apply.register
def _import(
    command: Import, document: ChartDocument, history: ChartHistory
) -> ChartDocument:
    imported = command.document.copy()
    # ids of the replaced notes may come back through undo
    imported.timeline.reserve_ids(document.timeline.last_id)
    history.push(imported.timeline.snapshot())
    return imported


@_apply.register
def _undo(
    command: Undo, document: ChartDocument, history: ChartHistory
) -> ChartDocument:
    snapshot = history.undo()
    if snapshot is not None:
        document.timeline.restore(snapshot)
    return document


@_apply.register
def _redo(
    command: Redo, document: ChartDocument, history: ChartHistory
) -> ChartDocument:
    snapshot = history.redo()
    if snapshot is not None:
        document.timeline.restore(snapshot)
    return document


def clamp_lane(lane: int) -> int:
    return clamp(int(lane), 0, LANE_COUNT - 1)


def clamp_beat(beat: Any, document: ChartDocument) -> BeatsTime:
    return clamp(BeatsTime(beat), BeatsTime(0), document.total_beats)


def clamp_notes_to_end(document: ChartDocument) -> bool:
    """Returns True if some notes had to be moved"""
    end = document.total_beats
    past_the_end = [n for n in document.notes if n.beat > end]
    for note in past_the_end:
        assert note.id is not None
        document.timeline.move(note.id, lane=note.lane, beat=end)
    return bool(past_the_end)
