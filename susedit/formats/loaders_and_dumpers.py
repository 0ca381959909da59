from typing import Dict

from . import interchange, sus
from .enum import Format
from .typing import Dumper, Loader

LOADERS: Dict[Format, Loader] = {
    Format.SUS: sus.load_sus,
    Format.JSON: interchange.load_interchange,
}

DUMPERS: Dict[Format, Dumper] = {
    Format.SUS: sus.dump_sus,
    Format.JSON: interchange.dump_interchange,
}
