"""SUS decoding.

Decoding never fails : lines that can't be understood are skipped and
numeric values that can't be parsed are replaced by their defaults, any
text gives back a usable document"""

from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from parsimonious import Grammar, NodeVisitor, ParseError
from parsimonious.nodes import Node

from susedit.beatclock import BEATS_PER_MEASURE, beat_at
from susedit.chart import (
    DEFAULT_BPM,
    LANE_COUNT,
    BeatsTime,
    BPMEvent,
    Note,
    TimeSignature,
)
from susedit.document import (
    DEFAULT_BEATS_PER_MEASURE,
    DEFAULT_MEASURES,
    MAX_BEATS_PER_MEASURE,
    MIN_BEATS_PER_MEASURE,
    ChartDocument,
)
from susedit.formats.load_tools import make_folder_loader, single_file
from susedit.utils import parse_decimal_prefix, parse_int_prefix

from .symbols import EMPTY_SLOT, note_type_of

sus_line_grammar = Grammar(
    r"""
    line            = data_line / tempo_change
    data_line       = channel ":" note_string rest
    channel         = ~r"[0-9]{1,9}[0-9A-F]{2}"i
    note_string     = ~r"\w*"
    tempo_change    = "#BPM" measure ":" ws tempo_value rest
    measure         = ~r"[0-9]{1,9}"
    tempo_value     = ~r"[0-9.]*"
    ws              = ~r"\s*"
    rest            = ~r".*"
    """
)


@dataclass
class DataLine:
    measure: int
    lane: int
    notes: str


@dataclass
class TempoChange:
    measure: int
    value: str


SusLine = Union[DataLine, TempoChange]


class SusLineVisitor(NodeVisitor):
    def visit_line(self, node: Node, visited_children: List[Any]) -> SusLine:
        (line,) = visited_children
        return line  # type: ignore

    def visit_data_line(self, node: Node, visited_children: List[Any]) -> DataLine:
        channel, _, note_string, _ = node.children
        # the regex is greedy on the measure digits but has to leave two
        # characters for the lane
        return DataLine(
            measure=int(channel.text[:-2]),
            lane=int(channel.text[-2:], 16),
            notes=note_string.text,
        )

    def visit_tempo_change(
        self, node: Node, visited_children: List[Any]
    ) -> TempoChange:
        _, measure, _, _, value, _ = node.children
        return TempoChange(measure=int(measure.text), value=value.text)

    def generic_visit(self, node: Node, visited_children: List[Any]) -> Any:
        return visited_children or node


def is_sus_line(line: str) -> bool:
    try:
        sus_line_grammar.parse(line)
    except ParseError:
        return False
    else:
        return True


def parse_sus_line(line: str) -> SusLine:
    return SusLineVisitor().visit(sus_line_grammar.parse(line))  # type: ignore


# directive -> name of the SusParser method that handles it
DIRECTIVES = {
    "#TITLE": "title",
    "#ARTIST": "artist",
    "#DESIGNER": "designer",
    "#DIFFICULTY": "difficulty",
    "#PLAYLEVEL": "playlevel",
    "#BPM": "bpm",
    "#TIME_SIG": "time_sig",
}

# longest first so that the most specific directive wins
DIRECTIVES_BY_LENGTH = sorted(DIRECTIVES, key=len, reverse=True)


def find_directive(line: str) -> Optional[str]:
    return next((d for d in DIRECTIVES_BY_LENGTH if line.startswith(d)), None)


def after_first_space(line: str) -> str:
    _, space, value = line.partition(" ")
    return value if space else ""


class SusParser:
    def __init__(self) -> None:
        self.title = ""
        self.artist = ""
        self.designer = ""
        self.difficulty = 0
        self.playlevel = 0
        self.tempos: Dict[BeatsTime, Decimal] = {}
        self.time_signatures: List[TimeSignature] = []
        self.notes: List[Note] = []
        self.last_measure = -1

    def load_line(self, raw_line: str) -> None:
        line = raw_line.strip()
        if not line or line.startswith(";"):
            return

        if is_sus_line(line):
            parsed = parse_sus_line(line)
            if isinstance(parsed, DataLine):
                self.append_data_line(parsed)
            else:
                self.append_tempo_change(parsed)
        else:
            directive = find_directive(line)
            if directive is not None:
                method = getattr(self, f"do_{DIRECTIVES[directive]}")
                method(after_first_space(line))

    def do_title(self, value: str) -> None:
        self.title = value

    def do_artist(self, value: str) -> None:
        self.artist = value

    def do_designer(self, value: str) -> None:
        self.designer = value

    def do_difficulty(self, value: str) -> None:
        self.difficulty = parse_int_prefix(value) or 0

    def do_playlevel(self, value: str) -> None:
        self.playlevel = parse_int_prefix(value) or 0

    def do_bpm(self, value: str) -> None:
        self.tempos[BeatsTime(0)] = parse_bpm(value) or DEFAULT_BPM

    def do_time_sig(self, value: str) -> None:
        parts = value.split()
        raw_measure = parts[0].split(":")[0] if parts else ""
        self.time_signatures.append(
            TimeSignature(
                measure=max(0, parse_int_prefix(raw_measure) or 0),
                numerator=positive_or_default(parts[1:2], 4),
                denominator=positive_or_default(parts[2:3], 4),
            )
        )

    def append_tempo_change(self, tempo_change: TempoChange) -> None:
        # The digits are read as a measure number, NOT as a reference to a
        # #BPMxx tempo definition like other SUS tools do
        bpm = parse_bpm(tempo_change.value)
        if bpm is None:
            return
        self.tempos[BeatsTime(tempo_change.measure * BEATS_PER_MEASURE)] = bpm

    def append_data_line(self, data_line: DataLine) -> None:
        if data_line.lane >= LANE_COUNT:
            return

        subdivision = len(data_line.notes)
        for index, char in enumerate(data_line.notes):
            if char == EMPTY_SLOT:
                continue

            self.notes.append(
                Note(
                    beat=beat_at(data_line.measure, index, subdivision),
                    lane=data_line.lane,
                    type=note_type_of(char),
                    source_char=char,
                )
            )
            self.last_measure = max(self.last_measure, data_line.measure)

    def document(self) -> ChartDocument:
        time_signatures = sorted(self.time_signatures, key=lambda t: t.measure)
        if (
            time_signatures
            and MIN_BEATS_PER_MEASURE
            <= time_signatures[0].numerator
            <= MAX_BEATS_PER_MEASURE
        ):
            beats_per_measure = time_signatures[0].numerator
        else:
            beats_per_measure = DEFAULT_BEATS_PER_MEASURE

        return ChartDocument.with_notes(
            self.notes,
            title=self.title,
            artist=self.artist,
            designer=self.designer,
            difficulty=self.difficulty,
            playlevel=self.playlevel,
            bpm_list=[BPMEvent(beat, bpm) for beat, bpm in self.tempos.items()],
            time_signatures=time_signatures,
            measures=max(DEFAULT_MEASURES, self.last_measure + 1),
            beats_per_measure=beats_per_measure,
        )


def parse_bpm(value: str) -> Optional[Decimal]:
    bpm = parse_decimal_prefix(value)
    if bpm is None or bpm <= 0:
        return None
    return bpm


def positive_or_default(parts: List[str], default: int) -> int:
    value = parse_int_prefix(parts[0]) if parts else None
    if value is None or value <= 0:
        return default
    return value


def decode_sus(text: str) -> ChartDocument:
    parser = SusParser()
    for line in text.split("\n"):
        parser.load_line(line)
    return parser.document()


def load_file(path: Path) -> str:
    return path.read_text(encoding="utf-8-sig", errors="surrogateescape")


load_folder = make_folder_loader("*.sus", load_file)


def load_sus(path: Path, **kwargs: Any) -> ChartDocument:
    files = load_folder(path)
    return decode_sus(single_file(files, path))
