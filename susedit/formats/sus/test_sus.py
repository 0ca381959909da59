from collections import Counter
from decimal import Decimal
from fractions import Fraction
from typing import Counter as CounterType
from typing import Tuple

import pytest
from hypothesis import given
from hypothesis import strategies as st

from susedit.beatclock import measure_of
from susedit.chart import BeatsTime, BPMEvent, Note, NoteType, TimeSignature
from susedit.document import ChartDocument
from susedit.formats import Format
from susedit.formats.interchange import decode_interchange
from susedit.testutils import strategies as sest
from susedit.testutils.test_patterns import dump_and_load_then_compare

from .dump import encode_sus, measure_strings
from .load import DataLine, TempoChange, decode_sus, parse_sus_line
from .symbols import char_of


def triples(document: ChartDocument) -> CounterType[Tuple[int, int, str]]:
    return Counter((measure_of(n.beat), n.lane, char_of(n)) for n in document.notes)


def positions(document: ChartDocument) -> CounterType[Tuple[BeatsTime, int]]:
    return Counter((n.beat, n.lane) for n in document.notes)


def header(document: ChartDocument) -> tuple:
    return (
        document.title,
        document.artist,
        document.designer,
        document.difficulty,
        document.playlevel,
        document.bpm,
    )


def test_that_a_single_tap_is_decoded() -> None:
    doc = decode_sus("#BPM 140\n000A:1000")
    assert doc.notes == [
        Note(beat=BeatsTime(0), lane=10, type=NoteType.TAP, source_char="1", id=1)
    ]
    assert doc.bpm_list == [BPMEvent(BeatsTime(0), Decimal(140))]


def test_that_empty_text_gives_a_default_document() -> None:
    doc = decode_sus("")
    assert doc.notes == []
    assert doc.bpm_list == [BPMEvent(BeatsTime(0), Decimal(120))]
    assert doc.time_signatures == [TimeSignature(0, 4, 4)]
    assert doc.measures == 32
    assert doc.beats_per_measure == 4


@given(st.text())
def test_that_decoding_never_fails(text: str) -> None:
    doc = decode_sus(text)
    assert doc.bpm_list
    assert doc.bpm_list[0].beat == 0
    assert doc.time_signatures
    assert doc.notes == sorted(doc.notes, key=lambda n: (n.beat, n.lane))


def test_that_characters_map_to_note_types() -> None:
    doc = decode_sus("00000:123456789ABCDEFxyzabcdef")
    types = [n.type for n in doc.notes]
    assert types == [
        NoteType.TAP,
        NoteType.FLICK,
        NoteType.SLIDE,
        *[NoteType.HOLD] * 6,
        *[NoteType.SLIDE_END] * 2,
        *[NoteType.DAMAGE_FLICK] * 4,
        *[NoteType.TAP] * 3,
        *[NoteType.SLIDE_END] * 2,
        *[NoteType.DAMAGE_FLICK] * 4,
    ]


def test_that_characters_are_spread_over_the_measure() -> None:
    doc = decode_sus("00203:0101")
    assert [(n.beat, n.lane) for n in doc.notes] == [
        (BeatsTime(9), 3),
        (BeatsTime(11), 3),
    ]


def test_that_long_measure_numbers_are_read_in_decimal() -> None:
    doc = decode_sus("1230B:1")
    (note,) = doc.notes
    assert note.beat == 123 * 4
    assert note.lane == 11
    assert doc.measures == 124


def test_that_lanes_past_the_last_one_are_skipped() -> None:
    assert decode_sus("0000C:1111\n000FF:1").notes == []


def test_that_comments_and_garbage_are_skipped() -> None:
    doc = decode_sus(
        "\n".join(
            [
                "; 00000:1111",
                "this is not a sus line",
                "#REQUEST ticks_per_beat 480",
                "   00001:1   ",
            ]
        )
    )
    assert [(n.beat, n.lane) for n in doc.notes] == [(BeatsTime(0), 1)]


def test_that_trailing_text_after_the_note_string_is_ignored() -> None:
    doc = decode_sus("00002:10 // comment")
    assert len(doc.notes) == 1


def test_metadata_directives() -> None:
    doc = decode_sus(
        "\n".join(
            [
                "#TITLE  Some Song ",
                "#ARTIST Someone",
                "#DESIGNER",
                "#DIFFICULTY 3",
                "#PLAYLEVEL 12+",
            ]
        )
    )
    assert doc.title == " Some Song"
    assert doc.artist == "Someone"
    assert doc.designer == ""
    assert doc.difficulty == 3
    assert doc.playlevel == 12


def test_that_bad_numbers_fall_back_to_defaults() -> None:
    doc = decode_sus("#DIFFICULTY hard\n#PLAYLEVEL ?\n#BPM fast")
    assert doc.difficulty == 0
    assert doc.playlevel == 0
    assert doc.bpm == Decimal(120)


def test_that_negative_bpm_falls_back_to_default() -> None:
    assert decode_sus("#BPM -60").bpm == Decimal(120)


def test_that_per_measure_tempo_changes_use_the_measure_number() -> None:
    doc = decode_sus("#BPM 150\n#BPM02: 180\n#BPM01:160")
    assert doc.bpm_list == [
        BPMEvent(BeatsTime(0), Decimal(150)),
        BPMEvent(BeatsTime(4), Decimal(160)),
        BPMEvent(BeatsTime(8), Decimal(180)),
    ]


def test_that_the_last_tempo_on_a_beat_wins() -> None:
    doc = decode_sus("#BPM 150\n#BPM00:170\n#BPM01:160\n#BPM01:165")
    assert doc.bpm_list == [
        BPMEvent(BeatsTime(0), Decimal(170)),
        BPMEvent(BeatsTime(4), Decimal(165)),
    ]


def test_that_unparsable_tempo_changes_are_skipped() -> None:
    doc = decode_sus("#BPM 150\n#BPM01:abc")
    assert doc.bpm_list == [BPMEvent(BeatsTime(0), Decimal(150))]


def test_time_signatures() -> None:
    doc = decode_sus("#TIME_SIG 4: 3 4\n#TIME_SIG 0: 6 8\n#TIME_SIG x: y")
    assert doc.time_signatures == [
        TimeSignature(0, 6, 8),
        TimeSignature(0, 4, 4),
        TimeSignature(4, 3, 4),
    ]
    assert doc.beats_per_measure == 6


def test_that_time_signatures_do_not_move_notes() -> None:
    doc = decode_sus("#TIME_SIG 0: 3 4\n00100:1")
    assert doc.notes[0].beat == 4


def test_that_an_odd_numerator_does_not_change_beats_per_measure() -> None:
    assert decode_sus("#TIME_SIG 0: 13 4").beats_per_measure == 4


def test_parse_sus_line() -> None:
    assert parse_sus_line("01210:1020") == DataLine(measure=12, lane=16, notes="1020")
    assert parse_sus_line("#BPM03: 140.5") == TempoChange(measure=3, value="140.5")


def test_encoding() -> None:
    doc = ChartDocument.with_notes(
        [
            Note(beat=BeatsTime(0), lane=0),
            Note(beat=BeatsTime(2), lane=0, type=NoteType.FLICK),
            Note(beat=BeatsTime(5), lane=11, source_char="e"),
        ],
        title="Song",
        bpm_list=[BPMEvent(BeatsTime(0), Decimal("150.50"))],
    )
    assert encode_sus(doc).split("\n") == [
        "#TITLE Song",
        "#DIFFICULTY 0",
        "#PLAYLEVEL 0",
        "#BPM 150.5",
        "#TIME_SIG 0: 4 4",
        "00000:12",
        "0010B:0e00",
        "",
    ]


def test_that_notes_on_the_same_slot_go_on_separate_lines() -> None:
    notes = [
        Note(beat=BeatsTime(2), lane=0, source_char="1"),
        Note(beat=BeatsTime(2), lane=0, source_char="2"),
    ]
    assert measure_strings(notes) == ["01", "02"]


def test_that_odd_subdivisions_get_snapped() -> None:
    notes = [Note(beat=Fraction(4, 1999), lane=0)]
    (line,) = measure_strings(notes)
    assert len(line) == 1920
    assert line.index("1") == round(Fraction(1, 1999) * 1920)


def test_that_tempo_changes_inside_a_measure_are_dropped_with_a_warning() -> None:
    doc = ChartDocument(
        bpm_list=[
            BPMEvent(BeatsTime(0), Decimal(120)),
            BPMEvent(BeatsTime(8), Decimal(130)),
            BPMEvent(BeatsTime(9), Decimal(140)),
        ]
    )
    with pytest.warns(UserWarning):
        text = encode_sus(doc)
    assert "#BPM002:130" in text
    assert decode_sus(text).bpm_list == doc.bpm_list[:2]


def test_that_line_breaks_in_metadata_do_not_leak_into_the_notes() -> None:
    doc = decode_interchange(
        '{"metadata": {"songTitle": "A\\n00000:1111"}, "notes": []}'
    )
    assert doc.title == "A 00000:1111"
    recovered = decode_sus(encode_sus(doc))
    assert recovered.notes == []
    assert recovered.title == doc.title

    doc.artist = "B\r\n00105:2222"
    recovered = decode_sus(encode_sus(doc))
    assert recovered.notes == []
    assert recovered.artist == "B 00105:2222"


def test_that_bpms_in_exponent_form_roundtrip() -> None:
    doc = decode_interchange(
        '{"metadata": {"songTitle": "A", "bpm": 1E2}, "notes": []}'
    )
    text = encode_sus(doc)
    assert "#BPM 100\n" in text
    assert decode_sus(text).bpm == doc.bpm == Decimal(100)


@given(sest.document())
def test_that_notes_and_header_roundtrip(doc: ChartDocument) -> None:
    recovered = decode_sus(encode_sus(doc))
    assert triples(recovered) == triples(doc)
    assert header(recovered) == header(doc)


@given(sest.document())
def test_that_beats_roundtrip(doc: ChartDocument) -> None:
    recovered = decode_sus(encode_sus(doc))
    assert positions(recovered) == positions(doc)


@given(sest.document())
def test_that_full_chart_roundtrips_through_files(doc: ChartDocument) -> None:
    dump_and_load_then_compare(
        Format.SUS,
        doc,
        bytes_decoder=lambda b: b.decode("utf-8"),
        key=lambda d: (triples(d), header(d)),
    )
