"""Pytest configuration for rawdicomatic tests.

Synthetic Siemens and GE containers are written with pydicom; nothing here
needs real scanner data.
"""

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace
from typing import Callable

import pytest
from pydicom.dataset import Dataset, FileMetaDataset
from pydicom.uid import ExplicitVRLittleEndian, generate_uid

from rawdicomatic.config import load_config
from rawdicomatic.io import tags

# Any 32-bit word without NUL bytes keeps the PTD magic search unambiguous.
WORD = b"\x01\x02\x03\x04"

LISTMODE_HEADER = (
    "!INTERFILE:=\r\n"
    "%comment:=SMS-MI header\r\n"
    "!originating system:=2008\r\n"
    "!name of data file:=C:\\ProgramData\\Siemens\\raw\\orig.l\r\n"
    "%total listmode word counts:={count}\r\n"
    "%number of bytes per word:=4\n"
    "!END OF INTERFILE:=\r\n"
)

NORM_HEADER = (
    "!INTERFILE:=\r\n"
    "!name of data file:=orig.n\r\r\n"
    "%number of data sets:=1\n"
    "%data set [1]:={0,,orig.n}\r\n"
    "!END OF INTERFILE:="
)

SINO_HEADER = (
    "!INTERFILE:=\r\n"
    "!name of data file:=orig.s\r\n"
    "%compression:=on\r\n"
)


def _base_dataset(manufacturer: str | None) -> Dataset:
    ds = Dataset()
    ds.file_meta = FileMetaDataset()
    ds.file_meta.TransferSyntaxUID = ExplicitVRLittleEndian
    ds.SOPClassUID = "1.3.12.2.1107.5.9.1"  # Siemens CSA non-image storage
    ds.SOPInstanceUID = generate_uid()
    ds.file_meta.MediaStorageSOPClassUID = ds.SOPClassUID
    ds.file_meta.MediaStorageSOPInstanceUID = ds.SOPInstanceUID
    if manufacturer is not None:
        ds.Manufacturer = manufacturer
    return ds


def siemens_dataset(
    image_type: str = "PET_LISTMODE",
    *,
    header: str | None = None,
    payload: bytes | None = None,
    model: str = "Biograph_mMR",
    alt_header: str | None = None,
) -> Dataset:
    """Return a Biograph mMR raw-data dataset."""
    ds = _base_dataset("SIEMENS")
    ds.ManufacturerModelName = model
    ds.ImageType = ["ORIGINAL", "PRIMARY", image_type]
    ds.add_new(0x00290010, "LO", "SIEMENS CSA HEADER")
    ds.add_new(0x00290011, "LO", "SIEMENS MEDCOM HEADER")
    ds.add_new(0x7FE10010, "LO", "SIEMENS CSA NON-IMAGE")
    if header is not None:
        ds.add_new(tags.SIEMENS_HEADER, "OB", header.encode("latin-1"))
    if alt_header is not None:
        ds.add_new(tags.SIEMENS_HEADER_ALT, "OB", alt_header.encode("latin-1"))
    if payload is not None:
        ds.add_new(tags.SIEMENS_PAYLOAD, "OB", payload)
    return ds


def ge_dataset(
    raw_type: int | None,
    *,
    sino_type: int | None = None,
    cal_type: int | None = None,
    blob: bytes | None = None,
) -> Dataset:
    """Return a GE PET raw-data dataset."""
    ds = _base_dataset("GE MEDICAL SYSTEMS")
    ds.ManufacturerModelName = "Discovery MI"
    for group in (0x0009, 0x0017, 0x0021, 0x0023):
        ds.add_new((group << 16) | 0x0010, "LO", "GEMS_PETD_01")
    if raw_type is not None:
        ds.add_new(tags.GE_RAW_DATA_TYPE, "SL", raw_type)
    if sino_type is not None:
        ds.add_new(tags.GE_SINO_TYPE, "SL", sino_type)
    if cal_type is not None:
        ds.add_new(tags.GE_CAL_TYPE, "SL", cal_type)
    if blob is not None:
        ds.add_new(tags.GE_RDF_BLOB, "OB", blob)
    return ds


def save(ds: Dataset, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    ds.save_as(path, enforce_file_format=True)
    return path


# ─────────────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture(autouse=True)
def _isolated_logs(tmp_path_factory, monkeypatch):
    """Keep the rotating JSON log out of the package folder."""
    monkeypatch.setenv("RAWDICOMATIC_LOG_DIR", str(tmp_path_factory.mktemp("logs")))
    monkeypatch.delenv("RAWDICOMATIC_CONFIG", raising=False)


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def datasets() -> SimpleNamespace:
    """In-memory dataset builders for tests that skip the file system."""
    return SimpleNamespace(siemens=siemens_dataset, ge=ge_dataset, save=save)


@pytest.fixture
def make_listmode(tmp_path: Path) -> Callable[..., Path]:
    """Return a builder for listmode containers.

    ``count`` is written to the header, ``words`` is the embedded payload
    length in 32-bit words (``None`` omits the element).
    """

    def _make(
        count: int = 1000,
        words: int | None = 1000,
        *,
        name: str = "scan.dcm",
        sidecar_bytes: int | None = None,
    ) -> Path:
        payload = WORD * words if words is not None else None
        path = save(
            siemens_dataset(
                "PET_LISTMODE",
                header=LISTMODE_HEADER.format(count=count),
                payload=payload,
            ),
            tmp_path / name,
        )
        if sidecar_bytes is not None:
            path.with_suffix(".bf").write_bytes(b"\x05" * sidecar_bytes)
        return path

    return _make


@pytest.fixture
def make_norm(tmp_path: Path) -> Callable[..., Path]:
    def _make(length: int = 323404, *, name: str = "norm.dcm") -> Path:
        return save(
            siemens_dataset("PET_NORM", header=NORM_HEADER, payload=b"\x07" * length),
            tmp_path / name,
        )

    return _make


@pytest.fixture
def make_sino(tmp_path: Path) -> Callable[..., Path]:
    def _make(payload: bytes | None = b"\x09" * 64, *, name: str = "sino.dcm") -> Path:
        return save(
            siemens_dataset("PET_EM_SINO", header=SINO_HEADER, payload=payload),
            tmp_path / name,
        )

    return _make


@pytest.fixture
def make_ge(tmp_path: Path) -> Callable[..., Path]:
    def _make(
        raw_type: int | None = 3,
        *,
        sino_type: int | None = 0,
        cal_type: int | None = None,
        blob: bytes | None = b"RDF9" * 16,
        name: str = "ge.dcm",
    ) -> Path:
        return save(
            ge_dataset(raw_type, sino_type=sino_type, cal_type=cal_type, blob=blob),
            tmp_path / name,
        )

    return _make


@pytest.fixture
def make_ptd(tmp_path: Path) -> Callable[..., Path]:
    """Return a builder for ``.ptd`` files: listmode words + trailing DICOM."""

    def _make(count: int = 1000, words: int = 1000, *, extra: bytes = b"") -> Path:
        dicom = save(
            siemens_dataset("PET_LISTMODE", header=LISTMODE_HEADER.format(count=count)),
            tmp_path / "tail.dcm",
        )
        ptd = tmp_path / "scan.ptd"
        ptd.write_bytes(WORD * words + extra + dicom.read_bytes())
        dicom.unlink()
        return ptd

    return _make
