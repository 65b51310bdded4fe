"""Validation of ``.ptd`` files (listmode followed by a DICOM object)."""

from pathlib import Path

from rawdicomatic.models import ValidationVerdict
from rawdicomatic.pipelines.ptd import dicom_offset, validate_ptd


def test_ptd_good(make_ptd, config):
    ptd = make_ptd(count=1000, words=1000)
    assert dicom_offset(ptd, config.ptd.search_window) == 4000
    assert validate_ptd(ptd, config) is ValidationVerdict.GOOD


def test_ptd_count_mismatch(make_ptd, config):
    assert validate_ptd(make_ptd(count=1000, words=999), config) is ValidationVerdict.SIZE_MISMATCH


def test_ptd_not_word_aligned(make_ptd, config):
    ptd = make_ptd(count=1000, words=1000, extra=b"\x01\x02")
    assert validate_ptd(ptd, config) is ValidationVerdict.SIZE_MISMATCH


def test_not_a_ptd(tmp_path: Path, config):
    f = tmp_path / "random.ptd"
    f.write_bytes(b"\x01" * 1024)
    assert validate_ptd(f, config) is ValidationVerdict.SIZE_MISMATCH


def test_missing_file(tmp_path: Path, config):
    assert validate_ptd(tmp_path / "gone.ptd", config) is ValidationVerdict.IO_ERROR
