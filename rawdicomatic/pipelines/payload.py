"""Reconcile declared and actual payload sizes and write the payload.

The payload of a container can live in three places:

* inside the container element (the usual case);
* in a sidecar file beside the container (``scan.dcm`` → ``scan.bf``) when
  the scanner could not fit it into the DICOM object;
* nowhere, when the export was truncated.

:func:`resolve_payload_source` decides between the first two by comparing
both candidates against the :class:`~rawdicomatic.models.ByteExpectation` of
the kind.  At most one source is selected and nothing is written until the
decision has been made.
"""

from __future__ import annotations

import logging
from pathlib import Path

from rawdicomatic.io import files, tags
from rawdicomatic.io.container import RawContainer
from rawdicomatic.models import (
    ByteExpectation,
    EmbeddedSource,
    PayloadSource,
    SidecarSource,
)
from rawdicomatic.pipelines.header import InterfileHeader
from rawdicomatic.pipelines.profiles import ExpectationRule, KindProfile
from rawdicomatic.utils.errors import RawIOError, SizeMismatchError

log = logging.getLogger(__name__)


def expectation_for(
    profile: KindProfile, header: InterfileHeader | None
) -> ByteExpectation | None:
    """Return the expected payload length of *profile*'s kind.

    Args:
        profile: Capabilities of the kind.
        header: Located header; required for ``DECLARED_COUNT`` kinds.

    Returns:
        The expectation, or ``None`` when the kind cannot be length-checked.

    Raises:
        MissingFieldError: When the count record is absent.
    """
    if profile.expectation is ExpectationRule.FIXED_LENGTH:
        exp = ByteExpectation(record_width=profile.record_width)
    elif profile.expectation is ExpectationRule.DECLARED_COUNT:
        if header is None or profile.count_label is None:
            raise ValueError(f"{profile.kind.value} needs a header to compute its length")
        count = header.declared_count(profile.count_label)
        log.info("Expected number of records: %d", count)
        exp = ByteExpectation(declared_count=count, record_width=profile.record_width)
    else:
        return None

    log.info("Expected number of bytes: %d", exp.expected_bytes)
    return exp


def _sidecar(container: RawContainer, extension: str) -> Path | None:
    path = container.sidecar_path(extension)
    if path.is_file():
        return path
    log.info("No sidecar file at %s", path)
    return None


def resolve_payload_source(
    container: RawContainer,
    profile: KindProfile,
    expectation: ByteExpectation | None,
    *,
    sidecar_extension: str = ".bf",
) -> PayloadSource:
    """Choose where the payload of *container* comes from.

    Args:
        container: Opened container.
        profile: Capabilities of the container's kind.
        expectation: Expected payload length, ``None`` when unknown.
        sidecar_extension: Extension of the sidecar file.

    Returns:
        :class:`EmbeddedSource` or :class:`SidecarSource`.

    Raises:
        SizeMismatchError: When no candidate has the expected length.
        RawIOError: When the embedded payload is unusable and no sidecar
            exists.
    """
    embedded = container.value_length(profile.payload_tag) or 0
    log.info("%d bytes in data field %s", embedded, tags.describe(profile.payload_tag))

    if expectation is None:
        if embedded > 0:
            return EmbeddedSource(length=embedded)
        sidecar = _sidecar(container, sidecar_extension) if profile.sidecar_fallback else None
        if sidecar is None:
            raise RawIOError(
                f"No {profile.kind.value} data found in {container.path} or a sidecar file",
                container.path,
            )
        return SidecarSource(path=sidecar, length=files.file_size(sidecar))

    expected = expectation.expected_bytes
    if expectation.matches(embedded):
        return EmbeddedSource(length=embedded)

    if expectation.declared_count is not None and embedded % profile.record_width:
        log.info("%d bytes is not a whole number of %d-byte records",
                 embedded, profile.record_width)
    log.info("Expected no. of bytes (%d) does not equal no. read (%d)", expected, embedded)

    if not profile.sidecar_fallback:
        raise SizeMismatchError(
            f"{container.path}: expected {expected} bytes, found {embedded}",
            expected,
            embedded,
        )

    log.info("Looking for sidecar file…")
    sidecar = _sidecar(container, sidecar_extension)
    if sidecar is None:
        raise RawIOError(
            f"No {profile.kind.value} data found in either {container.path} "
            f"or {container.sidecar_path(sidecar_extension).name}",
            container.sidecar_path(sidecar_extension),
        )

    size = files.file_size(sidecar)
    log.info("Sidecar file size in bytes: %d", size)
    if not expectation.matches(size):
        raise SizeMismatchError(
            f"{sidecar}: expected {expected} bytes, found {size}", expected, size
        )

    log.info("%s is a valid raw data file for this header", sidecar)
    return SidecarSource(path=sidecar, length=size)


def write_payload(
    container: RawContainer,
    profile: KindProfile,
    source: PayloadSource,
    dst: Path,
) -> int:
    """Copy the payload selected by *source* to the new file *dst*.

    Returns:
        Number of bytes written.

    Raises:
        AlreadyExistsError: When *dst* exists.
        RawIOError: When reading or writing fails.
    """
    if isinstance(source, SidecarSource):
        log.info("Copying payload from %s", source.path)
        return files.copy_new(source.path, dst)

    data = container.get_bytes(profile.payload_tag)
    if data is None:
        if source.length:
            raise RawIOError(f"{container.path}: payload element is empty", container.path)
        # a zero-length payload that matched its expectation
        data = b""
    return files.write_new(dst, data)


__all__ = ["expectation_for", "resolve_payload_source", "write_payload"]
