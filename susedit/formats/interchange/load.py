"""Loading of the JSON chart interchange format.

The file structure is checked strictly : a file without a metadata object
and a notes array is rejected as a whole. The values themselves are treated
leniently : numbers are coerced and clamped into range, defaults are used
for what's missing and notes without a usable position are dropped."""

import math
import warnings
from decimal import Decimal, InvalidOperation
from fractions import Fraction
from pathlib import Path
from typing import Any, List, Optional, Set

import simplejson as json
from marshmallow import ValidationError

from susedit.chart import (
    LANE_COUNT,
    BeatsTime,
    BPMEvent,
    Note,
    NoteType,
    TimeSignature,
)
from susedit.document import (
    MAX_BEATS_PER_MEASURE,
    MAX_BPM,
    MAX_MEASURES,
    MIN_BEATS_PER_MEASURE,
    MIN_BPM,
    MIN_MEASURES,
    ChartDocument,
)
from susedit.formats.load_tools import FormatError, make_folder_loader, single_file
from susedit.timeline import NoteTimeline, note_sort_key
from susedit.utils import clamp

from .schema import RAW_FILE_SCHEMA

DEFAULT_TITLE = "Untitled"
DEFAULT_BPM = Decimal(160)
DEFAULT_MEASURES = 32
DEFAULT_BEATS_PER_MEASURE = 4

# largest integer a javascript number holds exactly
MAX_NOTE_ID = 2**53 - 1


def decode_interchange(text: str) -> ChartDocument:
    try:
        raw = json.loads(text, use_decimal=True)
    except json.JSONDecodeError as e:
        raise FormatError(f"Invalid chart json : {e}") from None

    return load_interchange_dict(raw)


def load_interchange_dict(raw: Any) -> ChartDocument:
    try:
        file = RAW_FILE_SCHEMA.load(raw)
    except ValidationError as e:
        raise FormatError(f"Invalid chart json : {e.messages}") from None

    metadata = file["metadata"]
    bpm = clamp(coerce_number(metadata.get("bpm"), DEFAULT_BPM), MIN_BPM, MAX_BPM)
    measures = clamp_to_int(
        coerce_number(metadata.get("measures"), DEFAULT_MEASURES),
        MIN_MEASURES,
        MAX_MEASURES,
    )
    beats_per_measure = clamp_to_int(
        coerce_number(metadata.get("beatsPerMeasure"), DEFAULT_BEATS_PER_MEASURE),
        MIN_BEATS_PER_MEASURE,
        MAX_BEATS_PER_MEASURE,
    )
    title = metadata.get("songTitle")
    total_beats = BeatsTime(measures * beats_per_measure)
    return ChartDocument(
        title=DEFAULT_TITLE if title is None else str(title),
        bpm_list=[BPMEvent(BeatsTime(0), bpm)],
        time_signatures=[TimeSignature(0, beats_per_measure, 4)],
        measures=measures,
        beats_per_measure=beats_per_measure,
        timeline=NoteTimeline.from_notes(load_notes(file["notes"], total_beats)),
    )


def load_notes(raw_notes: List[Any], total_beats: BeatsTime) -> List[Note]:
    notes = []
    used_ids: Set[int] = set()
    dropped = 0
    for raw_note in raw_notes:
        note = load_note(raw_note, total_beats)
        if note is None:
            dropped += 1
            continue

        # ids that are not usable are left to the timeline to hand out
        if note.id is not None and note.id in used_ids:
            note.id = None
        if note.id is not None:
            used_ids.add(note.id)
        notes.append(note)

    if dropped:
        warnings.warn(
            f"{dropped} note(s) had no usable lane or beat and were not imported"
        )

    return sorted(notes, key=note_sort_key)


def load_note(raw_note: Any, total_beats: BeatsTime) -> Optional[Note]:
    if not isinstance(raw_note, dict):
        return None

    lane = coerce_number(raw_note.get("lane"))
    beat = coerce_number(raw_note.get("beat"))
    if lane is None or beat is None:
        return None

    return Note(
        beat=Fraction(clamp(beat, Decimal(0), Decimal(total_beats))),
        lane=clamp_to_int(lane, 0, LANE_COUNT - 1),
        type=load_note_type(raw_note.get("type")),
        id=load_id(raw_note.get("id")),
    )


def load_note_type(raw_type: Any) -> NoteType:
    try:
        return NoteType(raw_type)
    except (ValueError, TypeError):
        return NoteType.TAP


def load_id(raw_id: Any) -> Optional[int]:
    value = coerce_number(raw_id)
    if value is None or value != value.to_integral_value():
        return None
    if not 1 <= value <= MAX_NOTE_ID:
        return None
    return int(value)


def clamp_to_int(value: Decimal, low: int, high: int) -> int:
    """Clamp first so that huge exponents never get turned into huge ints"""
    return math.floor(clamp(value, Decimal(low), Decimal(high)))


def coerce_number(value: Any, default: Any = None) -> Any:
    """Make a finite Decimal out of whatever json gave us, or return the
    default if that's not possible"""
    if isinstance(value, bool) or value is None:
        return default

    try:
        if isinstance(value, (int, Decimal)):
            number = Decimal(value)
        elif isinstance(value, float):
            number = Decimal(repr(value))
        elif isinstance(value, str):
            number = Decimal(value.strip())
        else:
            return default
    except InvalidOperation:
        return default

    if not number.is_finite():
        return default

    return number


def load_file(path: Path) -> str:
    return path.read_text(encoding="utf-8")


load_folder = make_folder_loader("*.json", load_file)


def load_interchange(path: Path, **kwargs: Any) -> ChartDocument:
    files = load_folder(path)
    return decode_interchange(single_file(files, path))
