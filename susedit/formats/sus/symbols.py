"""Note characters used in SUS data lines"""

from typing import Dict, Optional

from susedit.chart import Note, NoteType

EMPTY_SLOT = "0"

CHAR_TO_NOTE_TYPE: Dict[str, NoteType] = {
    "1": NoteType.TAP,
    "2": NoteType.FLICK,
    "3": NoteType.SLIDE,
    **{c: NoteType.HOLD for c in "456789"},
    **{c: NoteType.SLIDE_END for c in "AB"},
    **{c: NoteType.DAMAGE_FLICK for c in "CDEF"},
}

NOTE_TYPE_TO_CHAR: Dict[NoteType, str] = {
    NoteType.TAP: "1",
    NoteType.FLICK: "2",
    NoteType.SLIDE: "3",
    NoteType.HOLD: "4",
    NoteType.SLIDE_END: "A",
    NoteType.DAMAGE_FLICK: "C",
}


def note_type_of(char: str) -> NoteType:
    """Unknown characters are taps"""
    return CHAR_TO_NOTE_TYPE.get(char.upper(), NoteType.TAP)


def char_of(note: Note) -> str:
    """Character a note should be written with, the one it was read from if
    there is one"""
    if is_note_char(note.source_char):
        assert note.source_char is not None
        return note.source_char
    return NOTE_TYPE_TO_CHAR[note.type]


def is_note_char(char: Optional[str]) -> bool:
    return (
        char is not None
        and len(char) == 1
        and (char.isalnum() or char == "_")
        and char != EMPTY_SLOT
    )
