"""
Split one raw-data container into a payload file and an Interfile header.

Steps, in order:

1. Open and classify the container.
2. Look up the extractor for the kind.
3. Locate the header and decide where the payload comes from (embedded or
   sidecar).  Size problems surface here, before anything is written.
4. Point the header at the payload in memory.  Missing records surface here,
   also before anything is written.
5. Refuse when either destination already exists.
6. Write the payload, then the header.  The payload is removed again when the
   header cannot be written.
"""

from __future__ import annotations

import logging
from pathlib import Path

from rawdicomatic.config import ConfigSchema, load_config
from rawdicomatic.io import files
from rawdicomatic.io.container import RawContainer
from rawdicomatic.models import ExtractionResult, FileKind
from rawdicomatic.pipelines.classify import classify
from rawdicomatic.pipelines.factory import create_extractor
from rawdicomatic.utils.errors import DecodeError, RawIOError, UnsupportedKindError

log = logging.getLogger(__name__)


def _make_output_dir(out: Path) -> None:
    try:
        out.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise RawIOError(f"Cannot create output directory {out}: {exc.strerror or exc}", out) from exc


def extract_file(
    src: Path,
    *,
    output_dir: Path | None = None,
    prefix: str | None = None,
    update_header: bool = True,
    config: ConfigSchema | None = None,
) -> ExtractionResult:
    """Extract the payload and header of *src*.

    Args:
        src: Vendor container.
        output_dir: Destination folder; defaults to the folder holding *src*.
        prefix: Replaces the stem of *src* in the generated file names.
        update_header: Rewrite the data-file reference of the extracted
            header.  Ignored when ``header.update`` is disabled in *config*.
        config: Validated configuration; defaults to :func:`load_config`.

    Returns:
        Summary of the written files.

    Raises:
        RawIOError: When *src* cannot be read or an output cannot be written.
        DecodeError: When the tags needed for classification are unreadable.
        UnsupportedKindError: When *src* is not a supported raw-data kind.
        MissingFieldError: When the header or one of its records is absent.
        SizeMismatchError: When no payload candidate has the expected length.
        AlreadyExistsError: When a destination file exists.
    """
    config = config or load_config()
    src = Path(src)
    log.info("Extracting %s", src)

    container = RawContainer.open(src)
    kind = classify(container)
    if kind is FileKind.ERROR:
        raise DecodeError(f"{src}: unable to read the tags needed to classify it")

    extractor = create_extractor(kind)
    if extractor is None:
        raise UnsupportedKindError(f"{src}: unsupported raw data ({kind.value})")

    header = extractor.locate_header(container)
    source = extractor.resolve_source(
        container, header, sidecar_extension=config.sidecar.extension
    )

    out = Path(output_dir) if output_dir is not None else src.parent
    stem = prefix or src.stem
    payload_dst = out / extractor.payload_name(stem)
    header_name = extractor.header_name(stem)
    header_dst = out / header_name if header_name else None

    updated = False
    if header is not None:
        if update_header and config.header.update:
            header = extractor.prepare_header(header, payload_dst)
            updated = True
        else:
            log.info("Header left unchanged (update disabled)")

    _make_output_dir(out)
    files.ensure_absent(payload_dst)
    if header_dst is not None:
        files.ensure_absent(header_dst)

    extractor.extract_data(container, source, payload_dst)
    if header is not None and header_dst is not None:
        try:
            extractor.extract_header(header, header_dst, encoding=config.header.encoding)
        except Exception:
            payload_dst.unlink(missing_ok=True)
            raise

    return ExtractionResult(
        src=src,
        kind=kind,
        payload=payload_dst,
        header=header_dst,
        source=source,
        header_updated=updated,
    )


__all__ = ["extract_file"]
