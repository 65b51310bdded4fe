"""Decide which vendor/scan kind a raw-data container holds.

The decision is a small priority tree over tag values:

1. The manufacturer selects the vendor branch.  Vendor markers are mutually
   exclusive; a manufacturer matching neither yields ``UNKNOWN``.
2. **Siemens** – the model must be a Biograph mMR; the image type then picks
   listmode, sinogram or norm.
3. **GE** – the private raw-data type picks a sub-classifier keyed on a second
   private tag.  Codes are compared exactly after whitespace is stripped.

A tag that a branch needs but cannot read yields ``ERROR`` rather than
``UNKNOWN`` so callers can tell "unsupported" from "unreadable".
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping

from pydicom.tag import BaseTag

from rawdicomatic.io import tags
from rawdicomatic.io.container import RawContainer
from rawdicomatic.models import FileKind, Vendor
from rawdicomatic.utils.errors import RawIOError

log = logging.getLogger(__name__)

# ─────────────────────────────────────────────────────────────────────────────
# Siemens
# ─────────────────────────────────────────────────────────────────────────────
MMR_MODEL = "Biograph_mMR"

_MMR_IMAGE_TYPES: Mapping[str, FileKind] = {
    "ORIGINAL\\PRIMARY\\PET_LISTMODE": FileKind.MMR_LIST,
    "ORIGINAL\\PRIMARY\\PET_EM_SINO": FileKind.MMR_SINO,
    "ORIGINAL\\PRIMARY\\PET_NORM": FileKind.MMR_NORM,
}

# ─────────────────────────────────────────────────────────────────────────────
# GE – raw data type → (discriminating tag, code → kind)
# ─────────────────────────────────────────────────────────────────────────────
_GE_WELL_COUNTER = "7"

_GE_BRANCHES: Mapping[str, tuple[BaseTag, Mapping[str, FileKind]]] = {
    "3": (tags.GE_SINO_TYPE, {"0": FileKind.GE_SINO, "5": FileKind.GE_CTAC}),
    "4": (tags.GE_CAL_TYPE, {"0": FileKind.GE_NORM_2D, "2": FileKind.GE_NORM_3D}),
    "5": (tags.GE_CAL_TYPE, {"3": FileKind.GE_GEO}),
}


def _read(container: RawContainer, tag, what: str) -> str | None:
    """Read *tag*; log and return ``None`` when it is unavailable."""
    value = container.get(tag)
    if value is None:
        log.error("Unable to read %s %s", what, tags.describe(tag))
    else:
        log.info("%s: %s", what.capitalize(), value)
    return value


def _classify_siemens(container: RawContainer) -> FileKind:
    model = _read(container, tags.MODEL_NAME, "scanner model name")
    if model is None:
        return FileKind.ERROR
    image_type = _read(container, tags.IMAGE_TYPE, "image type")
    if image_type is None:
        return FileKind.ERROR

    if MMR_MODEL not in model:
        log.info("Siemens scanner %r is not a Biograph mMR", model)
        return FileKind.UNKNOWN

    matches = [kind for marker, kind in _MMR_IMAGE_TYPES.items() if marker in image_type]
    if len(matches) != 1:
        log.info("Image type %r maps to no single mMR raw data kind", image_type)
        return FileKind.UNKNOWN
    return matches[0]


def _classify_ge(container: RawContainer) -> FileKind:
    raw_type = _read(container, tags.GE_RAW_DATA_TYPE, "type of raw data")
    if raw_type is None:
        return FileKind.ERROR
    raw_type = raw_type.strip()

    if raw_type == _GE_WELL_COUNTER:
        log.error("GE well-counter calibration (WCC) files are not supported")
        return FileKind.UNKNOWN

    branch = _GE_BRANCHES.get(raw_type)
    if branch is None:
        log.info("GE raw data type %r is not supported", raw_type)
        return FileKind.UNKNOWN

    sub_tag, codes = branch
    sub_value = _read(container, sub_tag, "raw data sub-type")
    if sub_value is None:
        return FileKind.ERROR
    return codes.get(sub_value.strip(), FileKind.UNKNOWN)


def classify(container: RawContainer) -> FileKind:
    """Return the :class:`FileKind` of an opened container.

    Args:
        container: Opened container.

    Returns:
        The matching kind, ``UNKNOWN`` for readable but unsupported input, or
        ``ERROR`` when a required tag could not be read.
    """
    manufacturer = _read(container, tags.MANUFACTURER, "manufacturer")
    if manufacturer is None:
        return FileKind.ERROR

    if Vendor.SIEMENS.value in manufacturer:
        kind = _classify_siemens(container)
    elif Vendor.GE.value in manufacturer:
        kind = _classify_ge(container)
    else:
        log.info("Manufacturer %r is not supported", manufacturer)
        kind = FileKind.UNKNOWN

    log.info("File kind: %s", kind.value)
    return kind


def classify_path(path: Path) -> FileKind:
    """Open *path* and classify it; unreadable files yield ``ERROR``."""
    try:
        container = RawContainer.open(path)
    except RawIOError:
        return FileKind.ERROR
    return classify(container)


__all__ = ["classify", "classify_path", "MMR_MODEL"]
