"""Map a classified kind to the extractor that unpacks it.

There is one :class:`Extractor` class; what differs between kinds lives in the
:class:`~rawdicomatic.pipelines.profiles.KindProfile` it wraps.
:func:`create_extractor` is a pure lookup and performs no I/O.
"""

from __future__ import annotations

import logging
from pathlib import Path

from rawdicomatic.io.container import RawContainer
from rawdicomatic.models import (
    ByteExpectation,
    FileKind,
    PayloadSource,
    ValidationVerdict,
)
from rawdicomatic.pipelines import header as header_engine
from rawdicomatic.pipelines.header import InterfileHeader
from rawdicomatic.pipelines.payload import (
    expectation_for,
    resolve_payload_source,
    write_payload,
)
from rawdicomatic.pipelines.profiles import PROFILES, KindProfile
from rawdicomatic.pipelines.validate import check_container

log = logging.getLogger(__name__)

HEADER_EXTENSION = ".hdr"


class Extractor:
    """Unpack containers of one kind.

    Args:
        profile: Capabilities of the kind.
    """

    def __init__(self, profile: KindProfile):
        self.profile = profile

    @property
    def kind(self) -> FileKind:
        return self.profile.kind

    # ------------------------------------------------------------------ #
    # Naming
    # ------------------------------------------------------------------ #
    def payload_name(self, stem: str) -> str:
        """Return ``<stem><payload extension>`` (``scan`` → ``scan.l``)."""
        return stem + self.profile.payload_extension

    def header_name(self, stem: str) -> str | None:
        """Return ``<payload name>.hdr``, or ``None`` for kinds without a header."""
        if not self.profile.has_header:
            return None
        return self.payload_name(stem) + HEADER_EXTENSION

    # ------------------------------------------------------------------ #
    # Steps
    # ------------------------------------------------------------------ #
    def locate_header(self, container: RawContainer) -> InterfileHeader | None:
        if not self.profile.has_header:
            return None
        return InterfileHeader.locate(container)

    def expectation(self, header: InterfileHeader | None) -> ByteExpectation | None:
        return expectation_for(self.profile, header)

    def resolve_source(
        self,
        container: RawContainer,
        header: InterfileHeader | None,
        *,
        sidecar_extension: str = ".bf",
    ) -> PayloadSource:
        """Decide where the payload comes from without writing anything."""
        return resolve_payload_source(
            container,
            self.profile,
            self.expectation(header),
            sidecar_extension=sidecar_extension,
        )

    def validate(
        self, container: RawContainer, *, sidecar_extension: str = ".bf"
    ) -> ValidationVerdict:
        return check_container(container, self.profile, sidecar_extension=sidecar_extension)

    def extract_data(
        self, container: RawContainer, source: PayloadSource, dst: Path
    ) -> int:
        """Write the payload selected by *source* to *dst*; return bytes written."""
        written = write_payload(container, self.profile, source, dst)
        log.info("Successfully extracted raw data to %s (%d bytes)", dst, written)
        return written

    def prepare_header(self, header: InterfileHeader, data_file: Path) -> InterfileHeader:
        """Return *header* rewritten in memory to reference *data_file*."""
        return header.retargeted(data_file, self.profile)

    def extract_header(
        self, header: InterfileHeader, dst: Path, *, encoding: str = "latin-1"
    ) -> None:
        header.write(dst, encoding)

    def modify_header(
        self, header_path: Path, data_file: Path, *, encoding: str = "latin-1"
    ) -> InterfileHeader:
        """Point the header at *data_file* (see :func:`update_header_file`)."""
        return header_engine.update_header_file(
            header_path, data_file, self.profile, encoding=encoding
        )

    def __repr__(self) -> str:
        return f"Extractor({self.kind.value})"


def create_extractor(kind: FileKind) -> Extractor | None:
    """Return the extractor for *kind*, or ``None`` for ``UNKNOWN``/``ERROR``."""
    profile = PROFILES.get(kind)
    if profile is None:
        log.info("No extractor for %s", kind.value)
        return None
    return Extractor(profile)


__all__ = ["Extractor", "create_extractor", "HEADER_EXTENSION"]
