from enum import Enum


class Format(str, Enum):
    SUS = "sus"
    JSON = "json"
