from pathlib import Path
from typing import Any, Dict, Protocol

from susedit.document import ChartDocument


class Dumper(Protocol):
    """A Dumper is a callable that takes in a ChartDocument, a Path hint and
    potential options, then gives back a dict that maps file name suggestions
    to the binary content of the file"""

    def __call__(
        self, document: ChartDocument, path: Path, **kwargs: Any
    ) -> Dict[Path, bytes]:
        ...


class DocumentDumper(Protocol):
    """Generic signature of internal dumpers, every format holds one chart
    per file"""

    def __call__(self, document: ChartDocument, **kwargs: Any) -> bytes:
        ...


class Loader(Protocol):
    """A Loader deserializes a Path to a ChartDocument and possibly takes in
    some options via the kwargs.
    The Path can be a file or a folder holding a single chart file"""

    def __call__(self, path: Path, **kwargs: Any) -> ChartDocument:
        ...
