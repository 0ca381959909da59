"""Provides the building blocks of a chart : notes, tempo breakpoints and time
signatures. Both the SUS text format and the JSON interchange format are
loaded to and dumped from these classes.

Every timing-related value is stored as a beat fraction, tempo values are
decimal numbers of beats per minute"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from typing import Dict, Iterable, List, Optional

BeatsTime = Fraction

LANE_COUNT = 12

DEFAULT_BPM = Decimal(120)


class NoteType(str, Enum):
    TAP = "tap"
    FLICK = "flick"
    SLIDE = "slide"
    HOLD = "hold"
    SLIDE_END = "slideEnd"
    DAMAGE_FLICK = "damageFlick"


@dataclass
class Note:
    """A single note on the timeline. source_char is the character the note
    was written with in a SUS file, notes created in the editor don't have
    one"""

    beat: BeatsTime
    lane: int
    type: NoteType = NoteType.TAP
    source_char: Optional[str] = None
    id: Optional[int] = None

    def __post_init__(self) -> None:
        self.beat = BeatsTime(self.beat)
        if self.beat < 0:
            raise ValueError(f"Negative beat : {self.beat}")
        if not 0 <= self.lane < LANE_COUNT:
            raise ValueError(f"lane out of [0, {LANE_COUNT - 1}] range : {self.lane}")


@dataclass(frozen=True)
class BPMEvent:
    beat: BeatsTime
    BPM: Decimal


@dataclass(frozen=True)
class TimeSignature:
    measure: int
    numerator: int = 4
    denominator: int = 4


def normalize_bpm_list(events: Iterable[BPMEvent]) -> List[BPMEvent]:
    """Sort by beat, keep the last event for a given beat and make sure
    there is a breakpoint on beat zero"""
    by_beat: Dict[BeatsTime, BPMEvent] = {}
    for event in events:
        by_beat[BeatsTime(event.beat)] = event

    if BeatsTime(0) not in by_beat:
        by_beat[BeatsTime(0)] = BPMEvent(BeatsTime(0), DEFAULT_BPM)

    return [by_beat[beat] for beat in sorted(by_beat)]


def normalize_time_signatures(
    signatures: Iterable[TimeSignature],
) -> List[TimeSignature]:
    res = sorted(signatures, key=lambda t: t.measure)
    if not res:
        res.insert(0, TimeSignature(0, 4, 4))

    return res
