"""DICOM tag addresses used to classify and unpack raw-data containers."""

from __future__ import annotations

from pydicom.tag import Tag

# Standard attributes
MANUFACTURER = Tag(0x0008, 0x0070)
MODEL_NAME = Tag(0x0008, 0x1090)
IMAGE_TYPE = Tag(0x0008, 0x0008)

# Siemens private elements
SIEMENS_HEADER = Tag(0x0029, 0x1010)
SIEMENS_HEADER_ALT = Tag(0x0029, 0x1110)  # SMS-MI VB20/3.2 layout
SIEMENS_PAYLOAD = Tag(0x7FE1, 0x1010)

# GE private elements
GE_RAW_DATA_TYPE = Tag(0x0021, 0x1001)
GE_SINO_TYPE = Tag(0x0009, 0x1019)
GE_CAL_TYPE = Tag(0x0017, 0x1006)
GE_RDF_BLOB = Tag(0x0023, 0x1002)


def describe(tag) -> str:
    """Return ``(gggg,eeee)`` for log and error messages."""
    t = Tag(tag)
    return f"({t.group:04X},{t.element:04X})"


__all__ = [
    "MANUFACTURER",
    "MODEL_NAME",
    "IMAGE_TYPE",
    "SIEMENS_HEADER",
    "SIEMENS_HEADER_ALT",
    "SIEMENS_PAYLOAD",
    "GE_RAW_DATA_TYPE",
    "GE_SINO_TYPE",
    "GE_CAL_TYPE",
    "GE_RDF_BLOB",
    "describe",
]
