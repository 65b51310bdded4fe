"""
Domain-level data models shared across I/O, pipeline, and CLI layers.

The module provides:

* **Closed enumerations** – :class:`Vendor`, :class:`FileKind` and
  :class:`ValidationVerdict`.
* **Value objects** – :class:`ByteExpectation` and the two
  :data:`PayloadSource` variants, produced while reconciling declared and
  actual payload lengths.
* **Header values** – the :data:`HeaderValue` sum type used when rewriting
  Interfile records.
* **Results** – :class:`ExtractionResult` returned by
  :func:`rawdicomatic.pipelines.extract.extract_file`.

Every model inherits from :class:`pydantic.BaseModel` with ``frozen=True`` so
that objects cannot be mutated once handed to another stage.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Literal, Optional, Union

from pydantic import BaseModel


# --------------------------------------------------------------------------- #
# 1 – Enumerations
# --------------------------------------------------------------------------- #
class Vendor(str, Enum):
    """Scanner vendors whose raw-data containers are understood."""

    SIEMENS = "SIEMENS"
    GE = "GE MEDICAL SYSTEMS"


class FileKind(str, Enum):
    """Result of classifying one container.

    ``UNKNOWN`` means the tags were readable but describe nothing supported;
    ``ERROR`` means a tag required to decide could not be read at all.
    """

    MMR_LIST = "mmr-listmode"
    MMR_SINO = "mmr-sinogram"
    MMR_NORM = "mmr-norm"
    GE_SINO = "ge-sinogram"
    GE_CTAC = "ge-ctac"
    GE_NORM_2D = "ge-norm-2d"
    GE_NORM_3D = "ge-norm-3d"
    GE_GEO = "ge-geometry"
    UNKNOWN = "unknown"
    ERROR = "error"

    @property
    def supported(self) -> bool:
        """``True`` for every kind an extractor exists for."""
        return self not in (FileKind.UNKNOWN, FileKind.ERROR)


class ValidationVerdict(str, Enum):
    """Terminal result of an integrity check."""

    GOOD = "good"
    SIZE_MISMATCH = "size-mismatch"
    IO_ERROR = "io-error"

    @property
    def ok(self) -> bool:
        return self is ValidationVerdict.GOOD


# --------------------------------------------------------------------------- #
# 2 – Size reconciliation
# --------------------------------------------------------------------------- #
class ByteExpectation(BaseModel, frozen=True):
    """How long a payload must be.

    Attributes
    ----------
    declared_count
        Record count read from the header; ``None`` for kinds whose length is a
        fixed constant.
    record_width
        Bytes per record (``4`` for 32-bit listmode words).  For fixed-length
        kinds the whole payload counts as one record of this width.
    """

    declared_count: Optional[int] = None
    record_width: int

    @property
    def expected_bytes(self) -> int:
        if self.declared_count is None:
            return self.record_width
        return self.declared_count * self.record_width

    def matches(self, length: int | None) -> bool:
        """Return ``True`` when *length* is exactly the expected byte count."""
        return length is not None and length == self.expected_bytes


class EmbeddedSource(BaseModel, frozen=True):
    """Payload stored inside the container element."""

    kind: Literal["embedded"] = "embedded"
    length: int


class SidecarSource(BaseModel, frozen=True):
    """Payload stored in a sidecar file next to the container."""

    kind: Literal["sidecar"] = "sidecar"
    path: Path
    length: int


PayloadSource = Union[EmbeddedSource, SidecarSource]


# --------------------------------------------------------------------------- #
# 3 – Interfile header values
# --------------------------------------------------------------------------- #
class TextValue(BaseModel, frozen=True):
    """Verbatim text value."""

    value: str

    def render(self) -> str:
        return self.value


class IntegerValue(BaseModel, frozen=True):
    """Integer value rendered without grouping or sign padding."""

    value: int

    def render(self) -> str:
        return str(self.value)


class RealValue(BaseModel, frozen=True):
    """Floating-point value rendered with ``repr`` precision."""

    value: float

    def render(self) -> str:
        return repr(self.value)


HeaderValue = Union[TextValue, IntegerValue, RealValue]


# --------------------------------------------------------------------------- #
# 4 – Results
# --------------------------------------------------------------------------- #
class ExtractionResult(BaseModel, frozen=True):
    """Summary object returned by a successful extraction.

    Attributes
    ----------
    src
        Container that was unpacked.
    kind
        Classification of *src*.
    payload
        Written payload file.
    header
        Written Interfile header, ``None`` for kinds without one.
    source
        Where the payload bytes came from.
    header_updated
        Whether the data-file reference in *header* was rewritten.
    """

    src: Path
    kind: FileKind
    payload: Path
    header: Optional[Path] = None
    source: PayloadSource
    header_updated: bool = False


__all__ = [
    "Vendor",
    "FileKind",
    "ValidationVerdict",
    "ByteExpectation",
    "EmbeddedSource",
    "SidecarSource",
    "PayloadSource",
    "TextValue",
    "IntegerValue",
    "RealValue",
    "HeaderValue",
    "ExtractionResult",
]
