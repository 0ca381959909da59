"""
SUS (Sliding Universal Score)

A line-oriented text chart format. Lines starting with # hold metadata
(#TITLE, #BPM, ...), data lines look like

    00305:10200000

where 003 is the measure, 05 the lane (in hex) and each character after the
colon a note, or an empty slot if it's a 0. The characters evenly split the
4 beats of the measure.
"""

from .dump import dump_sus, encode_sus
from .load import decode_sus, load_sus
