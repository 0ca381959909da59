from itertools import count
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from susedit.document import ChartDocument
from susedit.formats.typing import DocumentDumper, Dumper


def make_document_dumper(
    internal_dumper: DocumentDumper,
    file_name_template: Path,
) -> Dumper:
    """Adapt a DocumentDumper to the Dumper protocol, The resulting function
    uses the file name template if it recieves an existing directory as an
    output path"""

    def dumper(
        document: ChartDocument, path: Path, **kwargs: Any
    ) -> Dict[Path, bytes]:
        name_format = FileNameFormat(file_name_template, suggestion=path)
        contents = internal_dumper(document, **kwargs)
        return {name_format.available_filename_for(document): contents}

    return dumper


class FileNameFormat:
    def __init__(self, file_name_template: Path, suggestion: Path):
        self.explicit_path: Optional[Path] = None
        if suggestion.is_dir():
            self.parent = suggestion
        else:
            self.explicit_path = suggestion
            self.parent = suggestion.parent

        self.name_format = (
            f"{file_name_template.stem}{{dedup}}{file_name_template.suffix}"
        )

    def available_filename_for(self, document: ChartDocument) -> Path:
        if self.explicit_path is not None:
            return self.explicit_path

        return next(p for p in self.iter_deduped_paths(document) if not p.exists())

    def iter_deduped_paths(self, document: ChartDocument) -> Iterator[Path]:
        title = slugify(document.title) or "chart"
        for dedup_index in count(start=0):
            dedup = "" if dedup_index == 0 else f"-{dedup_index}"
            filename = self.name_format.format(title=title, dedup=dedup)
            yield self.parent / filename


def slugify(s: str) -> str:
    return remove_slashes(s).strip()


SLASHES = str.maketrans({"/": "", "\\": ""})


def remove_slashes(s: str) -> str:
    return s.translate(SLASHES)
