"""Validate Siemens ``.ptd`` files.

A ``.ptd`` file is the raw 32-bit listmode stream followed directly by a
complete DICOM object (128-byte zero preamble, ``DICM`` magic, data set).  The
listmode length is therefore the offset at which the preamble starts, and the
expected length is declared in the Interfile header inside the trailing
DICOM object.
"""

from __future__ import annotations

import logging
from pathlib import Path

from rawdicomatic.config import ConfigSchema, load_config
from rawdicomatic.io import files
from rawdicomatic.io.container import RawContainer
from rawdicomatic.models import ByteExpectation, ValidationVerdict
from rawdicomatic.pipelines.header import InterfileHeader
from rawdicomatic.pipelines.profiles import LISTMODE_COUNT_LABEL, LISTMODE_WORD_WIDTH
from rawdicomatic.utils.errors import MissingFieldError, RawIOError

log = logging.getLogger(__name__)

DCM_PREAMBLE_LENGTH = 128
DCM_MAGIC = b"\x00" * DCM_PREAMBLE_LENGTH + b"DICM"


def dicom_offset(path: Path, window: int) -> int:
    """Return where the trailing DICOM object (its preamble) starts, or ``-1``."""
    offset = files.find_in_tail(path, DCM_MAGIC, window)
    if offset >= 0:
        log.info("Found DICOM header at: %d bytes", offset + DCM_PREAMBLE_LENGTH)
    return offset


def validate_ptd(path: Path, config: ConfigSchema | None = None) -> ValidationVerdict:
    """Check that the listmode part of *path* matches its declared word count.

    Args:
        path: Candidate ``.ptd`` file.
        config: Validated configuration; defaults to :func:`load_config`.

    Returns:
        ``GOOD`` when the lengths agree, ``SIZE_MISMATCH`` when they do not or
        *path* is not a PTD file, ``IO_ERROR`` when it cannot be read.
    """
    config = config or load_config()
    try:
        log.info("File size in bytes: %d", files.file_size(path))
        offset = dicom_offset(path, config.ptd.search_window)
        if offset < 0:
            log.info("No DICOM header found")
            return ValidationVerdict.SIZE_MISMATCH
        container = RawContainer.from_bytes(path, files.read_from(path, offset))
    except RawIOError as exc:
        log.error("%s", exc)
        return ValidationVerdict.IO_ERROR

    try:
        header = InterfileHeader.locate(container)
        count = header.declared_count(LISTMODE_COUNT_LABEL)
    except MissingFieldError as exc:
        log.info("%s", exc)
        return ValidationVerdict.SIZE_MISMATCH

    expectation = ByteExpectation(declared_count=count, record_width=LISTMODE_WORD_WIDTH)
    log.info("Expected number of LM words: %d", count)

    if offset % LISTMODE_WORD_WIDTH:
        log.info("Incorrect number of bytes: %d is not a multiple of %d",
                 offset, LISTMODE_WORD_WIDTH)
        return ValidationVerdict.SIZE_MISMATCH

    log.info("%d LM words found", offset // LISTMODE_WORD_WIDTH)
    if not expectation.matches(offset):
        log.info("Expected no. of LM words does not equal no. read!")
        return ValidationVerdict.SIZE_MISMATCH

    return ValidationVerdict.GOOD


__all__ = ["validate_ptd", "dicom_offset", "DCM_MAGIC"]
