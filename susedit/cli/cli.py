"""Command Line Interface"""

from pathlib import Path
from typing import Optional

import click

from susedit.formats import DUMPERS, LOADERS
from susedit.formats.enum import Format
from susedit.formats.guess import guess_format


@click.command()
@click.argument("src", type=click.Path(exists=True))
@click.argument("dst", type=click.Path())
@click.option(
    "--input-format",
    "input_format",
    type=click.Choice(list(f.value for f in LOADERS.keys())),
    help="Input file format",
)
@click.option(
    "-f",
    "--format",
    "output_format",
    required=True,
    type=click.Choice(list(f.value for f in DUMPERS.keys())),
    help="Output file format",
)
def convert(
    src: str,
    dst: str,
    input_format: Optional[str],
    output_format: str,
) -> None:
    """Convert SRC to DST using the format specified by -f"""
    if input_format is None:
        detected = guess_format(Path(src))
        click.echo(f"Detected input file format : {detected.value}")
    else:
        detected = Format(input_format)

    try:
        loader = LOADERS[detected]
    except KeyError:
        raise ValueError(f"Unsupported input format : {detected}")

    try:
        dumper = DUMPERS[Format(output_format)]
    except KeyError:
        raise ValueError(f"Unsupported output format : {output_format}")

    document = loader(Path(src))
    files = dumper(document, Path(dst))
    for path, contents in files.items():
        with path.open("wb") as f:
            f.write(contents)
        click.echo(f"Wrote {path}")


if __name__ == "__main__":
    convert()
