from pathlib import Path
from typing import Any

import simplejson as json

from susedit.chart import Note
from susedit.document import ChartDocument
from susedit.formats.dump_tools import make_document_dumper
from susedit.utils import fraction_to_decimal

from . import schema


def encode_interchange(document: ChartDocument) -> str:
    file = schema.File(
        schemaVersion=schema.SCHEMA_VERSION,
        metadata=dump_metadata(document),
        notes=[dump_note(note) for note in document.notes],
    )
    json_file = schema.FILE_SCHEMA.dump(file)
    return json.dumps(json_file, indent=2, use_decimal=True)


def dump_metadata(document: ChartDocument) -> schema.Metadata:
    return schema.Metadata(
        songTitle=document.title,
        bpm=document.bpm,
        measures=document.measures,
        beatsPerMeasure=document.beats_per_measure,
    )


def dump_note(note: Note) -> schema.Note:
    if note.id is None:
        raise ValueError(f"{note} has no id, it does not belong to a timeline")

    return schema.Note(
        id=note.id,
        lane=note.lane,
        beat=fraction_to_decimal(note.beat),
        type=note.type.value,
    )


def dump_interchange_document(document: ChartDocument, **kwargs: Any) -> bytes:
    return encode_interchange(document).encode("utf-8")


dump_interchange = make_document_dumper(dump_interchange_document, Path("{title}.json"))
