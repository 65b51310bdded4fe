"""Read-only access to the DICOM object wrapping a raw-data payload.

:class:`RawContainer` is the only place that talks to *pydicom*.  It offers
three views on an element:

* :meth:`RawContainer.get` – decoded text, or ``None`` when the element is
  missing or empty;
* :meth:`RawContainer.get_bytes` – the raw value bytes;
* :meth:`RawContainer.value_length` – the byte length, without loading a
  deferred multi-gigabyte value into memory where the reader allows it.

Large values are read lazily (``defer_size``) so that validating a listmode
file only costs the size of its header.
"""

from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path
from typing import Any

import pydicom
from pydicom.dataelem import RawDataElement
from pydicom.errors import InvalidDicomError
from pydicom.multival import MultiValue
from pydicom.tag import BaseTag

from rawdicomatic.io.tags import describe
from rawdicomatic.utils.errors import RawIOError

log = logging.getLogger(__name__)

_DEFER_SIZE = "1 MB"
_UNDEFINED_LENGTH = 0xFFFFFFFF


# --------------------------------------------------------------------------- #
# Decoding helpers
# --------------------------------------------------------------------------- #
def _decode_primary(value: Any) -> str:
    """Return *value* as text using the strict strategy.

    Bytes must be pure ASCII; anything else yields ``""`` so that the caller
    can try the fallback.
    """
    if isinstance(value, (bytes, bytearray)):
        try:
            return bytes(value).decode("ascii").rstrip("\x00")
        except UnicodeDecodeError:
            return ""
    if isinstance(value, (MultiValue, list, tuple)):
        return "\\".join(str(v) for v in value)
    return str(value)


def _decode_fallback(value: Any) -> str:
    """Decode bytes as latin-1, which accepts any byte sequence."""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("latin-1").rstrip("\x00")
    return ""


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, (bytes, bytearray, str)) and len(value) == 0)


class RawContainer:
    """One opened vendor container.

    Args:
        path: Source file, used for sidecar lookup and messages.
        dataset: Parsed dataset.

    Use :meth:`open` (or :meth:`from_bytes` for embedded DICOM objects) rather
    than the constructor.
    """

    def __init__(self, path: Path, dataset: pydicom.Dataset):
        self.path = path
        self._ds = dataset

    # ------------------------------------------------------------------ #
    # Construction
    # ------------------------------------------------------------------ #
    @classmethod
    def open(cls, path: Path) -> "RawContainer":
        """Parse *path* as a DICOM file.

        Raises:
            RawIOError: When *path* cannot be read or is not DICOM.
        """
        path = Path(path)
        try:
            ds = pydicom.dcmread(path, defer_size=_DEFER_SIZE)
        except (InvalidDicomError, OSError, EOFError, ValueError) as exc:
            log.error("Unable to read %s as DICOM file: %s", path, exc)
            raise RawIOError(f"Unable to read {path} as DICOM file: {exc}", path) from exc
        log.debug("Opened %s", path)
        return cls(path, ds)

    @classmethod
    def from_bytes(cls, path: Path, data: bytes) -> "RawContainer":
        """Parse a DICOM object held in memory (e.g. the tail of a ``.ptd``).

        Raises:
            RawIOError: When *data* is not a DICOM object.
        """
        try:
            ds = pydicom.dcmread(BytesIO(data))
        except (InvalidDicomError, OSError, EOFError, ValueError) as exc:
            raise RawIOError(f"Embedded DICOM in {path} is unreadable: {exc}", path) from exc
        return cls(path, ds)

    # ------------------------------------------------------------------ #
    # Tag access
    # ------------------------------------------------------------------ #
    def _value(self, tag: BaseTag) -> Any:
        if tag not in self._ds:
            return None
        return self._ds[tag].value

    def get(self, tag: BaseTag) -> str | None:
        """Return the decoded text of *tag*, or ``None`` when absent/empty."""
        value = self._value(tag)
        if _is_empty(value):
            log.debug("%s is absent or empty", describe(tag))
            return None

        text = _decode_primary(value)
        if not text:
            text = _decode_fallback(value)
            if text:
                log.debug("%s decoded with latin-1 fallback", describe(tag))
        return text or None

    def get_bytes(self, tag: BaseTag) -> bytes | None:
        """Return the raw value bytes of *tag*, or ``None`` when absent/empty."""
        value = self._value(tag)
        if _is_empty(value):
            return None
        if isinstance(value, (bytes, bytearray)):
            return bytes(value)
        if isinstance(value, str):
            return value.encode("latin-1", errors="replace")
        return None

    def value_length(self, tag: BaseTag) -> int | None:
        """Return the byte length of *tag*'s value, ``None`` when absent."""
        if tag not in self._ds:
            return None
        elem = self._ds.get_item(tag)
        if isinstance(elem, RawDataElement) and elem.value is None:
            # Deferred: the element length is known without reading the value.
            if elem.length != _UNDEFINED_LENGTH:
                return elem.length
        data = self.get_bytes(tag)
        return len(data) if data is not None else 0

    # ------------------------------------------------------------------ #
    # Sidecar
    # ------------------------------------------------------------------ #
    def sidecar_path(self, extension: str) -> Path:
        """Return ``<path with extension replaced>`` (``scan.dcm`` → ``scan.bf``)."""
        return self.path.with_suffix(extension)

    def __repr__(self) -> str:
        return f"RawContainer({str(self.path)!r})"


__all__ = ["RawContainer"]
