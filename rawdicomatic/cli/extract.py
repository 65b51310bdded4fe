"""Split a raw-data container into its payload and Interfile header.

The command is exposed as ``rawdicomatic-cli extract``.  Output files are
named ``<stem><kind extension>`` and ``<stem><kind extension>.hdr`` and are
never overwritten.

Key flags
------------
* ``--output-dir`` – write into this folder instead of the input's folder.
* ``--prefix``     – replace the input stem in the generated names.
* ``--no-update``  – keep the extracted header byte-identical to the original.
"""

from __future__ import annotations

from pathlib import Path

import click
import structlog

from ..pipelines.extract import extract_file
from ..utils.display import echo_banner, echo_item, echo_success
from ..utils.errors import RawDataError

log = structlog.get_logger()


@click.command(
    name="extract",
    context_settings=dict(help_option_names=["-h", "--help"], max_content_width=120),
    help="Extract the raw payload and Interfile header from INPUT.",
)
@click.argument(
    "input_path",
    metavar="INPUT",
    type=click.Path(path_type=Path, exists=True, dir_okay=False),
)
@click.option(
    "-o",
    "--output-dir",
    type=click.Path(path_type=Path, file_okay=False),
    help="Destination folder (default: the folder holding INPUT).",
)
@click.option("-p", "--prefix", metavar="<name>",
              help="File name stem for the outputs (default: INPUT's stem).")
@click.option("--no-update", is_flag=True,
              help="Do not rewrite the data-file reference in the header.")
@click.pass_obj
def cli(  # noqa: D401 – Click callback naming rule
    ctx_obj,
    input_path: Path,
    output_dir: Path | None,
    prefix: str | None,
    no_update: bool,
) -> None:
    """Entry-point for ``rawdicomatic-cli extract``.

    Args:
        ctx_obj:     Click context with global flags already parsed.
        input_path:  Container to unpack.
        output_dir:  Destination folder.
        prefix:      Replacement stem for generated names.
        no_update:   Skip the header rewrite.

    Raises:
        click.ClickException: On any extraction failure.
    """
    echo_banner("Extract raw data")
    log.info("Extracting", path=str(input_path))

    try:
        res = extract_file(
            input_path,
            output_dir=output_dir,
            prefix=prefix,
            update_header=not no_update,
            config=ctx_obj["cfg"],
        )
    except RawDataError as exc:
        raise click.ClickException(str(exc)) from exc

    echo_item("Kind", res.kind.value)
    echo_item("Payload", f"{res.payload} ({res.source.length} bytes, {res.source.kind})")
    if res.header is not None:
        echo_item("Header", res.header)
    echo_success(f"Extracted {input_path.name}")


__all__ = ["cli"]
