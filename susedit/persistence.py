"""Saving and restoring the editor state.

The state is written as three independent values under three keys of a
key / value storage : the current document, the undo history and the
position in the history. The storage itself is provided by the caller, all
this module asks from it is to store and give back strings.

Values are json. Beats are written as (integer part, numerator, denominator)
triplets so that they come back exactly"""

from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Tuple

import simplejson as json
from marshmallow import ValidationError
from marshmallow.validate import OneOf, Range
from marshmallow_dataclass import NewType, class_schema

from susedit.chart import (
    LANE_COUNT,
    BeatsTime,
    BPMEvent,
    Note,
    NoteType,
    TimeSignature,
)
from susedit.document import ChartDocument
from susedit.formats.interchange.schema import BaseSchema
from susedit.formats.load_tools import FormatError
from susedit.history import HISTORY_CAPACITY, ChartHistory
from susedit.timeline import NotesSnapshot, NoteTimeline

DOCUMENT_KEY = "susedit-document"
HISTORY_KEY = "susedit-history"
HISTORY_INDEX_KEY = "susedit-history-index"

STORAGE_VERSION = 1


class Storage(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryStorage:
    def __init__(self, values: Optional[Dict[str, str]] = None) -> None:
        self.values: Dict[str, str] = dict(values or {})

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value


class FolderStorage:
    """One file per key inside a folder"""

    def __init__(self, folder: Path) -> None:
        self.folder = folder

    def path_for(self, key: str) -> Path:
        return self.folder / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.is_file():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self.folder.mkdir(parents=True, exist_ok=True)
        self.path_for(key).write_text(value, encoding="utf-8")


PositiveInt = NewType("PositiveInt", int, validate=Range(min=0))
StrictlyPositiveInt = NewType("StrictlyPositiveInt", int, validate=Range(min=1))
StrictlyPositiveDecimal = NewType(
    "StrictlyPositiveDecimal", Decimal, validate=Range(min=0, min_inclusive=False)
)
Lane = NewType("Lane", int, validate=Range(min=0, max=LANE_COUNT - 1))
StoredBeat = Tuple[PositiveInt, PositiveInt, StrictlyPositiveInt]


@dataclass
class StoredNote:
    id: StrictlyPositiveInt
    lane: Lane
    beat: StoredBeat
    type: str = field(metadata={"validate": OneOf([t.value for t in NoteType])})
    sourceChar: Optional[str] = None


@dataclass
class StoredBPMEvent:
    beat: StoredBeat
    bpm: StrictlyPositiveDecimal


@dataclass
class StoredTimeSignature:
    measure: PositiveInt
    numerator: StrictlyPositiveInt
    denominator: StrictlyPositiveInt


@dataclass
class StoredDocument:
    version: int
    title: str
    artist: str
    designer: str
    difficulty: int
    playlevel: int
    bpmList: List[StoredBPMEvent]
    timeSignatures: List[StoredTimeSignature]
    measures: StrictlyPositiveInt
    beatsPerMeasure: StrictlyPositiveInt
    lastNoteId: PositiveInt
    notes: List[StoredNote]


DOCUMENT_SCHEMA = class_schema(StoredDocument, base_schema=BaseSchema)()
NOTE_SCHEMA = class_schema(StoredNote, base_schema=BaseSchema)()


def beats_to_tuple(b: BeatsTime) -> Tuple[int, int, int]:
    integer_part = int(b)
    remainder = b % 1
    return (
        integer_part,
        remainder.numerator,
        remainder.denominator,
    )


def tuple_to_beats(b: Tuple[int, int, int]) -> BeatsTime:
    return b[0] + BeatsTime(b[1], b[2])


def dump_note(note: Note) -> StoredNote:
    if note.id is None:
        raise ValueError(f"{note} has no id, it does not belong to a timeline")

    return StoredNote(
        id=note.id,
        lane=note.lane,
        beat=beats_to_tuple(note.beat),
        type=note.type.value,
        sourceChar=note.source_char,
    )


def load_note(stored: StoredNote) -> Note:
    return Note(
        beat=tuple_to_beats(stored.beat),
        lane=stored.lane,
        type=NoteType(stored.type),
        source_char=stored.sourceChar,
        id=stored.id,
    )


def dump_document(document: ChartDocument) -> StoredDocument:
    return StoredDocument(
        version=STORAGE_VERSION,
        title=document.title,
        artist=document.artist,
        designer=document.designer,
        difficulty=document.difficulty,
        playlevel=document.playlevel,
        bpmList=[
            StoredBPMEvent(beat=beats_to_tuple(e.beat), bpm=e.BPM)
            for e in document.bpm_list
        ],
        timeSignatures=[
            StoredTimeSignature(
                measure=t.measure, numerator=t.numerator, denominator=t.denominator
            )
            for t in document.time_signatures
        ],
        measures=document.measures,
        beatsPerMeasure=document.beats_per_measure,
        lastNoteId=document.timeline.last_id,
        notes=[dump_note(n) for n in document.notes],
    )


def load_document(stored: StoredDocument) -> ChartDocument:
    timeline = NoteTimeline.from_notes(load_note(n) for n in stored.notes)
    timeline.reserve_ids(stored.lastNoteId)
    return ChartDocument(
        title=stored.title,
        artist=stored.artist,
        designer=stored.designer,
        difficulty=stored.difficulty,
        playlevel=stored.playlevel,
        bpm_list=[BPMEvent(tuple_to_beats(e.beat), e.bpm) for e in stored.bpmList],
        time_signatures=[
            TimeSignature(t.measure, t.numerator, t.denominator)
            for t in stored.timeSignatures
        ],
        measures=stored.measures,
        beats_per_measure=stored.beatsPerMeasure,
        timeline=timeline,
    )


def encode_document(document: ChartDocument) -> str:
    return json.dumps(DOCUMENT_SCHEMA.dump(dump_document(document)), use_decimal=True)


def decode_document(text: str) -> ChartDocument:
    raw = parse_json(text, DOCUMENT_KEY)
    try:
        stored = DOCUMENT_SCHEMA.load(raw)
    except ValidationError as e:
        raise FormatError(f"Invalid saved document : {e.messages}") from None
    return load_document(stored)


def encode_history(history: ChartHistory) -> str:
    entries = [
        NOTE_SCHEMA.dump([dump_note(n) for n in entry], many=True)
        for entry in history.entries
    ]
    return json.dumps(entries, use_decimal=True)


def decode_history_entries(text: str) -> List[NotesSnapshot]:
    raw = parse_json(text, HISTORY_KEY)
    if not isinstance(raw, list):
        raise FormatError("Invalid saved history : not a list of snapshots")

    entries = []
    for raw_entry in raw:
        try:
            stored_notes = NOTE_SCHEMA.load(raw_entry, many=True)
        except ValidationError as e:
            raise FormatError(f"Invalid saved history : {e.messages}") from None
        entries.append(tuple(load_note(n) for n in stored_notes))

    return entries


def decode_history_index(text: str) -> int:
    try:
        return int(text.strip())
    except ValueError:
        raise FormatError(f"Invalid saved history index : {text!r}") from None


def parse_json(text: str, key: str) -> Any:
    try:
        return json.loads(text, use_decimal=True)
    except json.JSONDecodeError as e:
        raise FormatError(f"Invalid json stored under {key} : {e}") from None


def save_state(
    storage: Storage, document: ChartDocument, history: ChartHistory
) -> None:
    storage.set(DOCUMENT_KEY, encode_document(document))
    storage.set(HISTORY_KEY, encode_history(history))
    storage.set(HISTORY_INDEX_KEY, str(history.index))


def load_state(
    storage: Storage, capacity: int = HISTORY_CAPACITY
) -> Tuple[ChartDocument, ChartHistory]:
    """Values missing from the storage are replaced by defaults : an empty
    document, an empty history, the newest history entry. Corrupt values
    raise a FormatError"""
    raw_document = storage.get(DOCUMENT_KEY)
    raw_history = storage.get(HISTORY_KEY)
    raw_index = storage.get(HISTORY_INDEX_KEY)

    if raw_document is None:
        document = ChartDocument()
    else:
        document = decode_document(raw_document)
    entries = [] if raw_history is None else decode_history_entries(raw_history)
    index = len(entries) - 1 if raw_index is None else decode_history_index(raw_index)
    history = ChartHistory.from_entries(entries, index, capacity)
    return document, history
