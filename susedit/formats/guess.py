from pathlib import Path

import simplejson as json

from .enum import Format
from .sus.load import find_directive, is_sus_line


def guess_format(path: Path) -> Format:
    if path.is_dir():
        raise ValueError("Can't guess chart format for a folder")

    try:
        return recognize_json_format(path)
    except (UnicodeDecodeError, ValueError):
        pass

    try:
        if looks_like_sus(path):
            return Format.SUS
    except UnicodeDecodeError:
        pass

    raise ValueError("Unrecognized file format")


def recognize_json_format(path: Path) -> Format:
    with path.open(encoding="utf-8") as f:
        obj = json.load(f)

    if not isinstance(obj, dict):
        raise ValueError("Top level value is not an object")

    if obj.keys() >= {"metadata", "notes"}:
        return Format.JSON
    else:
        raise ValueError("Unrecognized file format")


def looks_like_sus(path: Path) -> bool:
    with path.open(encoding="utf-8-sig") as f:
        for raw_line in f:
            line = raw_line.strip()
            if not line or line.startswith(";"):
                continue
            if find_directive(line) is not None or is_sus_line(line):
                return True

    return False
