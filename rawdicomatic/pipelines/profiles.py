"""Per-kind capability records.

Each supported :class:`~rawdicomatic.models.FileKind` is described by one
immutable :class:`KindProfile`.  The header, payload and validation stages
read the capabilities they need from the profile instead of relying on a
class hierarchy, so adding a kind means adding one table entry.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping

from pydicom.tag import BaseTag

from rawdicomatic.io import tags
from rawdicomatic.models import FileKind, Vendor

# 32-bit PETLINK listmode words.
LISTMODE_WORD_WIDTH = 4
LISTMODE_COUNT_LABEL = "total listmode word counts"

# mMR norm byte length:
# ({344,127}+{9,344}+{504,64}+{837}+{64}+{64}+{9}+{837}) * 4
MMR_NORM_BYTE_LENGTH = 323404


class ExpectationRule(str, Enum):
    """How the expected payload length of a kind is obtained."""

    NONE = "none"                      # compressed / opaque, length unknown
    DECLARED_COUNT = "declared-count"  # header count × record width
    FIXED_LENGTH = "fixed-length"      # protocol constant


@dataclass(frozen=True)
class KindProfile:
    """Everything the pipelines need to know about one kind.

    Attributes:
        kind: The kind described.
        vendor: Scanner vendor.
        payload_extension: Suffix appended to the output stem for the payload.
        payload_tag: Element holding the embedded payload.
        has_header: Whether an Interfile header is split off.
        expectation: Rule for the expected payload length.
        record_width: Bytes per record (or the whole fixed length).
        count_label: Header label whose line carries the record count.
        data_set_record: Whether ``%data set [1]`` must be rewritten too.
        normalize_line_endings: Whether the rewritten header is normalised to
            CR+LF.
        sidecar_fallback: Whether a sidecar file may provide the payload.
    """

    kind: FileKind
    vendor: Vendor
    payload_extension: str
    payload_tag: BaseTag
    has_header: bool = True
    expectation: ExpectationRule = ExpectationRule.NONE
    record_width: int = 1
    count_label: str | None = None
    data_set_record: bool = False
    normalize_line_endings: bool = False
    sidecar_fallback: bool = True


def _ge(kind: FileKind, extension: str) -> KindProfile:
    return KindProfile(
        kind=kind,
        vendor=Vendor.GE,
        payload_extension=extension,
        payload_tag=tags.GE_RDF_BLOB,
        has_header=False,
        sidecar_fallback=False,
    )


PROFILES: Mapping[FileKind, KindProfile] = {
    FileKind.MMR_LIST: KindProfile(
        kind=FileKind.MMR_LIST,
        vendor=Vendor.SIEMENS,
        payload_extension=".l",
        payload_tag=tags.SIEMENS_PAYLOAD,
        expectation=ExpectationRule.DECLARED_COUNT,
        record_width=LISTMODE_WORD_WIDTH,
        count_label=LISTMODE_COUNT_LABEL,
    ),
    FileKind.MMR_SINO: KindProfile(
        kind=FileKind.MMR_SINO,
        vendor=Vendor.SIEMENS,
        payload_extension=".s",
        payload_tag=tags.SIEMENS_PAYLOAD,
    ),
    FileKind.MMR_NORM: KindProfile(
        kind=FileKind.MMR_NORM,
        vendor=Vendor.SIEMENS,
        payload_extension=".n",
        payload_tag=tags.SIEMENS_PAYLOAD,
        expectation=ExpectationRule.FIXED_LENGTH,
        record_width=MMR_NORM_BYTE_LENGTH,
        data_set_record=True,
        normalize_line_endings=True,
    ),
    FileKind.GE_SINO: _ge(FileKind.GE_SINO, ".sino.rdf"),
    FileKind.GE_CTAC: _ge(FileKind.GE_CTAC, ".ctac.rdf"),
    FileKind.GE_NORM_2D: _ge(FileKind.GE_NORM_2D, ".norm.rdf"),
    FileKind.GE_NORM_3D: _ge(FileKind.GE_NORM_3D, ".norm.rdf"),
    FileKind.GE_GEO: _ge(FileKind.GE_GEO, ".geo.rdf"),
}


__all__ = [
    "ExpectationRule",
    "KindProfile",
    "PROFILES",
    "LISTMODE_WORD_WIDTH",
    "LISTMODE_COUNT_LABEL",
    "MMR_NORM_BYTE_LENGTH",
]
