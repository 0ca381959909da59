"""Provides the ChartDocument class, the central model of the editor.
Every input format is converted to a ChartDocument instance, every output
format is created from one.

A document is handled as a value : importing, undoing or redoing replaces it
as a whole with an independent copy, nothing outside of it keeps references
to its insides"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, List

from susedit.chart import (
    BeatsTime,
    BPMEvent,
    Note,
    TimeSignature,
    normalize_bpm_list,
    normalize_time_signatures,
)
from susedit.timeline import NoteTimeline, note_sort_key
from susedit.utils import single_line

DEFAULT_MEASURES = 32
DEFAULT_BEATS_PER_MEASURE = 4

# Editable ranges, values outside of them get clamped
MIN_BPM = Decimal(40)
MAX_BPM = Decimal(300)
MIN_MEASURES = 4
MAX_MEASURES = 300
MIN_BEATS_PER_MEASURE = 2
MAX_BEATS_PER_MEASURE = 12


@dataclass
class ChartDocument:
    title: str = ""
    artist: str = ""
    designer: str = ""
    difficulty: int = 0
    playlevel: int = 0
    bpm_list: List[BPMEvent] = field(default_factory=list)
    time_signatures: List[TimeSignature] = field(default_factory=list)
    measures: int = DEFAULT_MEASURES
    beats_per_measure: int = DEFAULT_BEATS_PER_MEASURE
    timeline: NoteTimeline = field(default_factory=NoteTimeline)

    def __post_init__(self) -> None:
        # SUS stores each of these on a single line
        self.title = single_line(self.title)
        self.artist = single_line(self.artist)
        self.designer = single_line(self.designer)
        self.bpm_list = normalize_bpm_list(self.bpm_list)
        self.time_signatures = normalize_time_signatures(self.time_signatures)

    @classmethod
    def with_notes(cls, notes: Iterable[Note], **kwargs: object) -> ChartDocument:
        """Build a document from notes that don't have ids yet, they get
        numbered in timeline order"""
        timeline = NoteTimeline()
        for note in sorted(notes, key=note_sort_key):
            timeline.insert(note)
        return cls(timeline=timeline, **kwargs)  # type: ignore[arg-type]

    @property
    def notes(self) -> List[Note]:
        return list(self.timeline)

    @property
    def bpm(self) -> Decimal:
        """Tempo used by the playback clock"""
        return self.bpm_list[0].BPM

    @property
    def total_beats(self) -> BeatsTime:
        return BeatsTime(self.measures * self.beats_per_measure)

    def copy(self) -> ChartDocument:
        return deepcopy(self)
