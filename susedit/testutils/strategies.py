"""
Hypothesis strategies to generate notes and charts
"""

from decimal import Decimal
from typing import List, Optional

import hypothesis.strategies as st

from susedit.chart import LANE_COUNT, BeatsTime, BPMEvent, Note, NoteType
from susedit.document import ChartDocument
from susedit.formats.sus.symbols import CHAR_TO_NOTE_TYPE, note_type_of


@st.composite
def beat_time(
    draw: st.DrawFn,
    min_measure: int = 0,
    max_measure: Optional[int] = None,
    denominator_strat: st.SearchStrategy[int] = st.sampled_from([1, 2, 4, 8, 3, 6]),
) -> BeatsTime:
    """Beats that sit on a reasonable subdivision of a beat"""
    denominator = draw(denominator_strat)
    min_value = denominator * 4 * min_measure
    if max_measure is not None:
        max_value: Optional[int] = denominator * 4 * (max_measure + 1) - 1
    else:
        max_value = None

    numerator = draw(st.integers(min_value=min_value, max_value=max_value))
    return BeatsTime(numerator, denominator)


@st.composite
def note_chars(draw: st.DrawFn) -> str:
    char: str = draw(st.sampled_from(sorted(CHAR_TO_NOTE_TYPE)))
    if char.isalpha() and draw(st.booleans()):
        return char.lower()
    return char


@st.composite
def note(
    draw: st.DrawFn,
    time_strat: st.SearchStrategy[BeatsTime] = beat_time(max_measure=7),
) -> Note:
    """Notes either come from a SUS file and have a source character that
    matches their type, or were made in the editor and don't have one"""
    beat = draw(time_strat)
    lane = draw(st.integers(min_value=0, max_value=LANE_COUNT - 1))
    char: Optional[str] = draw(st.one_of(st.none(), note_chars()))
    if char is None:
        type_ = draw(st.sampled_from(NoteType))
    else:
        type_ = note_type_of(char)
    return Note(beat=beat, lane=lane, type=type_, source_char=char)


@st.composite
def notes(
    draw: st.DrawFn,
    note_strat: st.SearchStrategy[Note] = note(),
    max_size: int = 32,
) -> List[Note]:
    return draw(st.lists(note_strat, max_size=max_size))


@st.composite
def bpms(draw: st.DrawFn) -> Decimal:
    d: Decimal = draw(st.decimals(min_value=1, max_value=1000, places=3))
    return d


@st.composite
def metadata_text(draw: st.DrawFn) -> str:
    """Any text that can be written as utf-8 and used in a file name, line
    breaks included"""
    text: str = draw(
        st.text(
            alphabet=st.characters(
                exclude_categories=("Cs",), exclude_characters="\x00"
            ),
            max_size=30,
        )
    )
    return text


@st.composite
def document(
    draw: st.DrawFn,
    notes_strat: st.SearchStrategy[List[Note]] = notes(),
    text_strat: st.SearchStrategy[str] = metadata_text(),
    bpm_strat: st.SearchStrategy[Decimal] = bpms(),
) -> ChartDocument:
    return ChartDocument.with_notes(
        draw(notes_strat),
        title=draw(text_strat),
        artist=draw(text_strat),
        designer=draw(text_strat),
        difficulty=draw(st.integers(min_value=0, max_value=4)),
        playlevel=draw(st.integers(min_value=0, max_value=99)),
        bpm_list=[BPMEvent(BeatsTime(0), draw(bpm_strat))],
    )
