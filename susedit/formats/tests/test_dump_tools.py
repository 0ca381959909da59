from pathlib import Path

from susedit.document import ChartDocument

from ..dump_tools import FileNameFormat, slugify


def test_that_existing_files_are_not_overwritten(tmp_path: Path) -> None:
    name_format = FileNameFormat(Path("{title}.sus"), suggestion=tmp_path)
    doc = ChartDocument(title="Song")
    assert name_format.available_filename_for(doc) == tmp_path / "Song.sus"
    (tmp_path / "Song.sus").touch()
    (tmp_path / "Song-1.sus").touch()
    assert name_format.available_filename_for(doc) == tmp_path / "Song-2.sus"


def test_that_explicit_paths_are_used_as_is(tmp_path: Path) -> None:
    path = tmp_path / "out.txt"
    path.touch()
    name_format = FileNameFormat(Path("{title}.sus"), suggestion=path)
    assert name_format.available_filename_for(ChartDocument(title="Song")) == path


def test_that_untitled_charts_get_a_file_name(tmp_path: Path) -> None:
    name_format = FileNameFormat(Path("{title}.json"), suggestion=tmp_path)
    expected = tmp_path / "chart.json"
    assert name_format.available_filename_for(ChartDocument()) == expected


def test_slugify() -> None:
    assert slugify(" AC/DC \\ {dedup} ") == "ACDC  {dedup}"
