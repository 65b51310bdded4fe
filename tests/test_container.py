"""Tag access on opened and in-memory containers."""

from pathlib import Path

import pytest

from rawdicomatic.io import tags
from rawdicomatic.io.container import RawContainer
from rawdicomatic.utils.errors import RawIOError


def test_get_joins_multivalue_image_type(datasets):
    c = RawContainer(Path("scan.dcm"), datasets.siemens("PET_LISTMODE"))
    assert c.get(tags.IMAGE_TYPE) == "ORIGINAL\\PRIMARY\\PET_LISTMODE"
    assert c.get(tags.MANUFACTURER) == "SIEMENS"


def test_get_absent_and_empty_return_none(datasets):
    ds = datasets.siemens(header="")
    c = RawContainer(Path("scan.dcm"), ds)
    assert c.get(tags.SIEMENS_HEADER) is None
    assert c.get(tags.GE_RDF_BLOB) is None


def test_get_numeric_zero_is_not_absent(datasets):
    c = RawContainer(Path("ge.dcm"), datasets.ge(3, sino_type=0))
    assert c.get(tags.GE_SINO_TYPE) == "0"
    assert c.get(tags.GE_RAW_DATA_TYPE) == "3"


def test_get_falls_back_to_latin1_for_non_ascii_bytes(datasets):
    ds = datasets.siemens(header="x")
    ds[tags.SIEMENS_HEADER].value = b"caf\xe9\x00"
    c = RawContainer(Path("scan.dcm"), ds)
    assert c.get(tags.SIEMENS_HEADER) == "caf\xe9"


def test_value_length_and_bytes(datasets):
    c = RawContainer(Path("scan.dcm"), datasets.siemens(payload=b"\x01" * 12))
    assert c.value_length(tags.SIEMENS_PAYLOAD) == 12
    assert c.get_bytes(tags.SIEMENS_PAYLOAD) == b"\x01" * 12
    assert c.value_length(tags.GE_RDF_BLOB) is None


def test_sidecar_path_replaces_extension():
    c = RawContainer(Path("/data/run1/scan.dcm"), None)
    assert c.sidecar_path(".bf") == Path("/data/run1/scan.bf")


def test_open_round_trip(make_listmode):
    c = RawContainer.open(make_listmode(count=10, words=10))
    assert c.value_length(tags.SIEMENS_PAYLOAD) == 40
    assert "total listmode word counts" in c.get(tags.SIEMENS_HEADER)


def test_open_rejects_non_dicom(tmp_path: Path):
    bogus = tmp_path / "notes.txt"
    bogus.write_text("not a DICOM file")
    with pytest.raises(RawIOError):
        RawContainer.open(bogus)


def test_open_missing_file(tmp_path: Path):
    with pytest.raises(RawIOError):
        RawContainer.open(tmp_path / "missing.dcm")
