"""Check a raw-data file without writing anything.

DICOM containers are classified and their payload length is checked against
the header (embedded payload or sidecar).  Files that are not DICOM are tried
as Siemens ``.ptd`` files (listmode followed by a DICOM object).
"""

from __future__ import annotations

from pathlib import Path

import click
import structlog

from ..models import ValidationVerdict
from ..pipelines.ptd import validate_ptd
from ..pipelines.validate import validate_path
from ..utils.display import echo_banner, echo_item, echo_success
from ..utils.errors import RawDataError, RawIOError

log = structlog.get_logger()


@click.command(
    name="validate",
    context_settings=dict(help_option_names=["-h", "--help"], max_content_width=120),
    help="Check that the payload of INPUT matches the size its header declares.",
)
@click.argument("input_path", metavar="INPUT", type=click.Path(path_type=Path))
@click.pass_obj
def cli(ctx_obj, input_path: Path) -> None:
    """Validate one container or ``.ptd`` file.

    Args:
        ctx_obj: Click context populated in ``rawdicomatic.cli.main``.
        input_path: File to check.

    Raises:
        click.ClickException: When the file is missing, unreadable or invalid.
    """
    cfg = ctx_obj["cfg"]
    if not input_path.is_file():
        raise click.ClickException(f"Cannot open file: {input_path}")

    echo_banner("Validate raw data")
    try:
        kind, verdict = validate_path(input_path, cfg)
        echo_item("Kind", kind.value)
    except RawIOError:
        log.info("Not a DICOM container, trying PTD layout", path=str(input_path))
        verdict = validate_ptd(input_path, cfg)
        echo_item("Kind", "ptd")
    except RawDataError as exc:
        raise click.ClickException(str(exc)) from exc

    echo_item("Verdict", verdict.value)
    if verdict is ValidationVerdict.IO_ERROR:
        raise click.ClickException(f"Cannot read file: {input_path}")
    if not verdict.ok:
        raise click.ClickException("File is INVALID")
    echo_success("File is valid")


__all__ = ["cli"]
