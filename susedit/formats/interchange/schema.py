from dataclasses import dataclass
from decimal import Decimal
from typing import Any, List

from marshmallow import EXCLUDE, Schema, fields, post_dump, validate
from marshmallow_dataclass import NewType, class_schema

from susedit.chart import LANE_COUNT

SCHEMA_VERSION = 2

PositiveDecimal = NewType("PositiveDecimal", Decimal, validate=validate.Range(min=0))
StrictlyPositiveInt = NewType(
    "StrictlyPositiveInt", int, validate=validate.Range(min=0, min_inclusive=False)
)
Lane = NewType("Lane", int, validate=validate.Range(min=0, max=LANE_COUNT - 1))


@dataclass
class Metadata:
    songTitle: str
    bpm: PositiveDecimal
    measures: StrictlyPositiveInt
    beatsPerMeasure: StrictlyPositiveInt


@dataclass
class Note:
    id: StrictlyPositiveInt
    lane: Lane
    beat: PositiveDecimal
    type: str


@dataclass
class File:
    schemaVersion: int
    metadata: Metadata
    notes: List[Note]


class BaseSchema(Schema):
    class Meta:
        ordered = True
        unknown = EXCLUDE

    @post_dump
    def _remove_none_values(self, data: dict, **kwargs: Any) -> dict:
        return remove_none_values(data)


def remove_none_values(data: dict) -> dict:
    return {key: value for key, value in data.items() if value is not None}


FILE_SCHEMA = class_schema(File, base_schema=BaseSchema)()


class RawFileSchema(Schema):
    """Only checks the overall structure of a file before its values get
    coerced one by one, values that can't be understood are dealt with later
    instead of failing the whole file"""

    class Meta:
        unknown = EXCLUDE

    metadata = fields.Dict(required=True)
    notes = fields.List(fields.Raw(allow_none=True), required=True)


RAW_FILE_SCHEMA = RawFileSchema()
