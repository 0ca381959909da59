"""Beat / measure / seconds conversions.

Positions in SUS files are given as (measure, index in the measure string,
length of the measure string) triples. Measures are always 4 beats long when
decoding, whatever the time signature says : time signatures are kept around
and written back but they never change where a note lands."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction
from typing import TYPE_CHECKING, Iterable, Tuple, Union

from more_itertools import windowed
from sortedcontainers import SortedKeyList

from susedit.chart import BeatsTime, BPMEvent, normalize_bpm_list
from susedit.utils import group_by

if TYPE_CHECKING:
    from susedit.document import ChartDocument

BEATS_PER_MEASURE = 4


def beat_at(measure: int, index: int, subdivision: int) -> BeatsTime:
    """Beat of the index-th character of a measure string that is
    subdivision characters long"""
    if subdivision < 1:
        raise ValueError(f"subdivision has to be strictly positive : {subdivision}")
    if not 0 <= index < subdivision:
        raise ValueError(f"index out of [0, {subdivision - 1}] range : {index}")

    return (measure + BeatsTime(index, subdivision)) * BEATS_PER_MEASURE


def measure_of(beat: BeatsTime) -> int:
    return int(BeatsTime(beat) // BEATS_PER_MEASURE)


def position_in_measure(beat: BeatsTime) -> Tuple[int, Fraction]:
    """Measure the beat falls in and where in that measure, as a fraction of
    the measure in [0, 1)"""
    measure = measure_of(beat)
    offset = (BeatsTime(beat) - measure * BEATS_PER_MEASURE) / BEATS_PER_MEASURE
    return measure, offset


@dataclass
class BPMChange:
    beats: BeatsTime
    seconds: Fraction
    BPM: Fraction


@dataclass
class BeatClock:
    """Tempo map built from the BPM breakpoints of a chart, converts beats to
    seconds and back. Beat zero happens at zero seconds"""

    events_by_beats: SortedKeyList[BPMChange, BeatsTime]
    events_by_seconds: SortedKeyList[BPMChange, Fraction]

    @classmethod
    def from_document(cls, document: ChartDocument) -> BeatClock:
        return cls.from_bpm_list(document.bpm_list)

    @classmethod
    def from_bpm_list(cls, events: Iterable[BPMEvent]) -> BeatClock:
        events = list(events)
        grouped_by_time = group_by(events, key=lambda e: e.beat)
        for time, events_at_time in grouped_by_time.items():
            if len(events_at_time) > 1:
                raise ValueError(f"Multiple BPMs defined at beat {time} : {events}")

        sorted_events = normalize_bpm_list(events)
        for event in sorted_events:
            if event.BPM <= 0:
                raise ValueError(f"BPM has to be strictly positive : {event}")

        first_event = sorted_events[0]
        current_second = Fraction(0)
        bpm_changes = [
            BPMChange(first_event.beat, current_second, Fraction(first_event.BPM))
        ]
        for previous, current in windowed(sorted_events, 2):
            if previous is None or current is None:
                continue

            beats_since_last_event = current.beat - previous.beat
            seconds_since_last_event = (60 * beats_since_last_event) / Fraction(
                previous.BPM
            )
            current_second += seconds_since_last_event
            bpm_change = BPMChange(current.beat, current_second, Fraction(current.BPM))
            bpm_changes.append(bpm_change)

        return cls(
            events_by_beats=SortedKeyList(bpm_changes, key=lambda b: b.beats),
            events_by_seconds=SortedKeyList(bpm_changes, key=lambda b: b.seconds),
        )

    def _change_at_beat(self, beat: BeatsTime) -> BPMChange:
        index = self.events_by_beats.bisect_key_right(beat)
        first_or_previous_index = max(0, index - 1)
        bpm_change: BPMChange = self.events_by_beats[first_or_previous_index]
        return bpm_change

    def bpm_at(self, beat: BeatsTime) -> Fraction:
        return self._change_at_beat(BeatsTime(beat)).BPM

    def seconds_at(self, beat: BeatsTime) -> Fraction:
        """Before the first bpm change, compute backwards from the first bpm,
        after the first bpm change, compute forwards from the previous bpm
        change"""
        beat = BeatsTime(beat)
        bpm_change = self._change_at_beat(beat)
        beats_since_last_event = beat - bpm_change.beats
        seconds_since_last_event = (60 * beats_since_last_event) / bpm_change.BPM
        return bpm_change.seconds + seconds_since_last_event

    def beats_at(self, seconds: Union[Decimal, Fraction, int]) -> BeatsTime:
        frac_seconds = Fraction(seconds)
        index = self.events_by_seconds.bisect_key_right(frac_seconds)
        first_or_previous_index = max(0, index - 1)
        bpm_change: BPMChange = self.events_by_seconds[first_or_previous_index]
        seconds_since_last_event = frac_seconds - bpm_change.seconds
        beats_since_last_event = (bpm_change.BPM * seconds_since_last_event) / Fraction(
            60
        )
        return bpm_change.beats + beats_since_last_event

    def playback_beat(self, elapsed_seconds: Union[float, Decimal, Fraction]) -> float:
        """Beat reached after playing for elapsed_seconds, the playback clock
        only ever uses the first tempo"""
        first_bpm = self.events_by_beats[0].BPM
        return float(elapsed_seconds) * float(first_bpm) / 60
