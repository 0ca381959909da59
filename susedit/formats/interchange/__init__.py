"""JSON chart interchange format

The format the editor saves and loads its charts in, a single json object :

    {
        "schemaVersion": 2,
        "metadata": {
            "songTitle": ..., "bpm": ..., "measures": ..., "beatsPerMeasure": ...
        },
        "notes": [{"id": ..., "lane": ..., "beat": ..., "type": ...}, ...]
    }

Loading is strict about the overall structure but lenient about values :
numbers get coerced and clamped into range, notes that can't be placed
anywhere are dropped."""

from .dump import dump_interchange, encode_interchange
from .load import decode_interchange, load_interchange, load_interchange_dict
