"""Payload size reconciliation between the container and its sidecar."""

from pathlib import Path

import pytest

from rawdicomatic.io.container import RawContainer
from rawdicomatic.models import ByteExpectation, EmbeddedSource, FileKind, SidecarSource
from rawdicomatic.pipelines.header import InterfileHeader
from rawdicomatic.pipelines.payload import (
    expectation_for,
    resolve_payload_source,
    write_payload,
)
from rawdicomatic.pipelines.profiles import MMR_NORM_BYTE_LENGTH, PROFILES
from rawdicomatic.utils.errors import AlreadyExistsError, RawIOError, SizeMismatchError

LIST = PROFILES[FileKind.MMR_LIST]


def _resolve(path: Path, kind: FileKind = FileKind.MMR_LIST):
    container = RawContainer.open(path)
    profile = PROFILES[kind]
    header = InterfileHeader.locate(container) if profile.has_header else None
    return container, resolve_payload_source(container, profile, expectation_for(profile, header))


def test_byte_expectation():
    exp = ByteExpectation(declared_count=1000, record_width=4)
    assert exp.expected_bytes == 4000
    assert exp.matches(4000)
    assert not exp.matches(3999)
    assert not exp.matches(None)
    assert ByteExpectation(record_width=MMR_NORM_BYTE_LENGTH).expected_bytes == 323404


def test_expectation_rules():
    header = InterfileHeader("%total listmode word counts:=25\r\n")
    assert expectation_for(LIST, header).expected_bytes == 100
    assert expectation_for(PROFILES[FileKind.MMR_NORM], None).expected_bytes == 323404
    assert expectation_for(PROFILES[FileKind.MMR_SINO], header) is None
    assert expectation_for(PROFILES[FileKind.GE_SINO], None) is None


def test_embedded_payload_matching_count(make_listmode, tmp_path: Path):
    src = make_listmode(count=1000, words=1000, sidecar_bytes=17)
    container, source = _resolve(src)
    assert source == EmbeddedSource(length=4000)

    dst = tmp_path / "out.l"
    assert write_payload(container, LIST, source, dst) == 4000
    assert dst.stat().st_size == 4000


def test_sidecar_used_when_embedded_is_short(make_listmode, tmp_path: Path):
    src = make_listmode(count=1000, words=750, sidecar_bytes=4000)
    container, source = _resolve(src)
    assert isinstance(source, SidecarSource)
    assert source.path == src.with_suffix(".bf")
    assert source.length == 4000

    dst = tmp_path / "out.l"
    write_payload(container, LIST, source, dst)
    assert dst.read_bytes() == b"\x05" * 4000


def test_sidecar_with_wrong_size(make_listmode):
    src = make_listmode(count=1000, words=750, sidecar_bytes=3500)
    with pytest.raises(SizeMismatchError) as exc:
        _resolve(src)
    assert exc.value.expected == 4000
    assert exc.value.actual == 3500


def test_no_sidecar_when_embedded_is_short(make_listmode):
    with pytest.raises(RawIOError):
        _resolve(make_listmode(count=1000, words=750))


def test_missing_payload_element_uses_sidecar(make_listmode):
    _, source = _resolve(make_listmode(count=10, words=None, sidecar_bytes=40))
    assert isinstance(source, SidecarSource)


def test_sinogram_prefers_non_empty_embedded(make_sino):
    _, source = _resolve(make_sino(b"\x09" * 64), FileKind.MMR_SINO)
    assert source == EmbeddedSource(length=64)


def test_sinogram_falls_back_to_sidecar(make_sino):
    src = make_sino(None)
    src.with_suffix(".bf").write_bytes(b"\x00" * 10)
    _, source = _resolve(src, FileKind.MMR_SINO)
    assert source == SidecarSource(path=src.with_suffix(".bf"), length=10)


def test_sinogram_without_any_payload(make_sino):
    with pytest.raises(RawIOError):
        _resolve(make_sino(None), FileKind.MMR_SINO)


def test_norm_fixed_length(make_norm):
    _, source = _resolve(make_norm(), FileKind.MMR_NORM)
    assert source.length == MMR_NORM_BYTE_LENGTH
    with pytest.raises(RawIOError):
        _resolve(make_norm(1000, name="short.dcm"), FileKind.MMR_NORM)


def test_ge_blob_never_uses_sidecar(make_ge):
    src = make_ge(blob=None)
    src.with_suffix(".bf").write_bytes(b"\x01" * 8)
    with pytest.raises(RawIOError):
        _resolve(src, FileKind.GE_SINO)


def test_write_payload_refuses_existing(make_listmode, tmp_path: Path):
    container, source = _resolve(make_listmode(count=2, words=2))
    dst = tmp_path / "out.l"
    dst.write_bytes(b"original")
    with pytest.raises(AlreadyExistsError):
        write_payload(container, LIST, source, dst)
    assert dst.read_bytes() == b"original"
    assert not (tmp_path / "out.l.part").exists()


def test_write_payload_empty_element_matching_zero_count(make_listmode, tmp_path: Path):
    container, source = _resolve(make_listmode(count=0, words=0))
    assert source == EmbeddedSource(length=0)
    dst = tmp_path / "empty.l"
    assert write_payload(container, LIST, source, dst) == 0
    assert dst.read_bytes() == b""


def test_write_payload_element_emptied_after_resolve(make_listmode, tmp_path: Path):
    container = RawContainer.open(make_listmode(count=0, words=0))
    with pytest.raises(RawIOError):
        write_payload(container, LIST, EmbeddedSource(length=8), tmp_path / "x.l")
    assert not (tmp_path / "x.l").exists()
