"""Decide whether a container's payload can be trusted, without writing.

The check runs the same size reconciliation as the extractor
(:func:`~rawdicomatic.pipelines.payload.resolve_payload_source`) and turns
its outcome into a :class:`~rawdicomatic.models.ValidationVerdict`.

Sinograms are compressed, so their length cannot be compared against the
header.  For them the verdict only says that *some* payload exists (embedded
and non-empty, or a sidecar file); this is deliberately weaker than the
listmode and norm checks.
"""

from __future__ import annotations

import logging
from pathlib import Path

from rawdicomatic.config import ConfigSchema, load_config
from rawdicomatic.io.container import RawContainer
from rawdicomatic.models import FileKind, ValidationVerdict, Vendor
from rawdicomatic.pipelines.classify import classify
from rawdicomatic.pipelines.header import InterfileHeader
from rawdicomatic.pipelines.payload import expectation_for, resolve_payload_source
from rawdicomatic.pipelines.profiles import PROFILES, ExpectationRule, KindProfile
from rawdicomatic.utils.errors import (
    DecodeError,
    RawIOError,
    SizeMismatchError,
    UnsupportedKindError,
)

log = logging.getLogger(__name__)


def check_container(
    container: RawContainer,
    profile: KindProfile,
    *,
    sidecar_extension: str = ".bf",
) -> ValidationVerdict:
    """Return the verdict for *container*, classified as *profile*'s kind.

    Raises:
        MissingFieldError: When the header or its count record is absent.
    """
    header = InterfileHeader.locate(container) if profile.has_header else None

    if profile.expectation is ExpectationRule.NONE and profile.vendor is Vendor.SIEMENS:
        log.warning("Cannot check sinogram length due to compression.")

    expectation = expectation_for(profile, header)
    try:
        source = resolve_payload_source(
            container, profile, expectation, sidecar_extension=sidecar_extension
        )
    except SizeMismatchError as exc:
        log.error("%s", exc)
        return ValidationVerdict.SIZE_MISMATCH
    except RawIOError as exc:
        log.error("%s", exc)
        return ValidationVerdict.IO_ERROR

    log.info("Payload source: %s (%d bytes)", source.kind, source.length)
    return ValidationVerdict.GOOD


def validate_container(
    container: RawContainer, config: ConfigSchema | None = None
) -> tuple[FileKind, ValidationVerdict]:
    """Classify *container* and check it.

    Raises:
        DecodeError: When classification could not read a required tag.
        UnsupportedKindError: When the kind has no extractor.
        MissingFieldError: When the header or its count record is absent.
    """
    config = config or load_config()
    kind = classify(container)
    if kind is FileKind.ERROR:
        raise DecodeError(f"{container.path}: unable to read the tags needed to classify it")
    profile = PROFILES.get(kind)
    if profile is None:
        raise UnsupportedKindError(f"{container.path}: unsupported raw data ({kind.value})")

    verdict = check_container(
        container, profile, sidecar_extension=config.sidecar.extension
    )
    return kind, verdict


def validate_path(
    path: Path, config: ConfigSchema | None = None
) -> tuple[FileKind, ValidationVerdict]:
    """Open *path* and validate it (see :func:`validate_container`).

    Raises:
        RawIOError: When *path* is not a readable DICOM container.
    """
    return validate_container(RawContainer.open(path), config)


__all__ = ["check_container", "validate_container", "validate_path"]
