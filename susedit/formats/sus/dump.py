"""SUS encoding.

Each (measure, lane) pair that holds notes becomes a data line. The notes are
written on the smallest subdivision of the measure that fits all of them, so
their beats survive a round trip as long as they sit on reasonable fractions
of a measure"""

import warnings
from pathlib import Path
from typing import Any, Dict, Iterator, List, Tuple

from susedit.beatclock import measure_of, position_in_measure
from susedit.chart import Note
from susedit.document import ChartDocument
from susedit.formats.dump_tools import make_document_dumper
from susedit.utils import group_by, lcm, pretty_print_decimal, single_line

from .symbols import EMPTY_SLOT, char_of

# Measures that need a finer subdivision than this get their notes snapped
# to the nearest 1/MAX_SUBDIVISION of a measure
MAX_SUBDIVISION = 1920


def encode_sus(document: ChartDocument) -> str:
    lines = list(iter_header_lines(document))
    notes_by_channel = group_by(document.notes, key=channel_of)
    for (measure, lane), notes in sorted(notes_by_channel.items()):
        for chars in measure_strings(notes):
            lines.append(f"{measure:03}{lane:02X}:{chars}")

    return "\n".join(lines) + "\n"


def channel_of(note: Note) -> Tuple[int, int]:
    return measure_of(note.beat), note.lane


def iter_header_lines(document: ChartDocument) -> Iterator[str]:
    for directive, value in (
        ("#TITLE", document.title),
        ("#ARTIST", document.artist),
        ("#DESIGNER", document.designer),
    ):
        text = single_line(value)
        if text:
            yield f"{directive} {text}"
    yield f"#DIFFICULTY {document.difficulty}"
    yield f"#PLAYLEVEL {document.playlevel}"
    yield f"#BPM {pretty_print_decimal(document.bpm)}"
    for event in document.bpm_list[1:]:
        measure, offset = position_in_measure(event.beat)
        if offset != 0:
            warnings.warn(
                f"The BPM change at beat {event.beat} does not fall on the "
                "start of a measure, SUS files can't store it so it will be lost"
            )
            continue
        yield f"#BPM{measure:03}:{pretty_print_decimal(event.BPM)}"
    for signature in document.time_signatures:
        yield (
            f"#TIME_SIG {signature.measure}: "
            f"{signature.numerator} {signature.denominator}"
        )


def measure_strings(notes: List[Note]) -> List[str]:
    """Data line contents for notes that all share the same measure and lane.
    Notes that would land on an already used slot go on an extra line"""
    offsets = [position_in_measure(n.beat)[1] for n in notes]
    subdivision = lcm(*(o.denominator for o in offsets))
    if subdivision <= MAX_SUBDIVISION:
        slots = [int(o * subdivision) for o in offsets]
    else:
        subdivision = MAX_SUBDIVISION
        slots = [min(round(o * subdivision), subdivision - 1) for o in offsets]

    layers: List[Dict[int, str]] = []
    for slot, note in zip(slots, notes):
        layer = next((l for l in layers if slot not in l), None)
        if layer is None:
            layer = {}
            layers.append(layer)
        layer[slot] = char_of(note)

    return [
        "".join(layer.get(i, EMPTY_SLOT) for i in range(subdivision))
        for layer in layers
    ]


def dump_sus_document(document: ChartDocument, **kwargs: Any) -> bytes:
    return encode_sus(document).encode("utf-8")


dump_sus = make_document_dumper(dump_sus_document, Path("{title}.sus"))
