"""Kind → extractor lookup and output naming."""

import pytest

from rawdicomatic.io.container import RawContainer
from rawdicomatic.models import FileKind, ValidationVerdict
from rawdicomatic.pipelines.factory import Extractor, create_extractor
from rawdicomatic.pipelines.profiles import PROFILES


@pytest.mark.parametrize("kind", [FileKind.UNKNOWN, FileKind.ERROR])
def test_unsupported_kinds_have_no_extractor(kind):
    assert create_extractor(kind) is None
    assert not kind.supported


def test_every_supported_kind_has_a_profile():
    supported = {k for k in FileKind if k.supported}
    assert supported == set(PROFILES)


@pytest.mark.parametrize(
    "kind, payload, header",
    [
        (FileKind.MMR_LIST, "scan.l", "scan.l.hdr"),
        (FileKind.MMR_SINO, "scan.s", "scan.s.hdr"),
        (FileKind.MMR_NORM, "scan.n", "scan.n.hdr"),
        (FileKind.GE_SINO, "scan.sino.rdf", None),
        (FileKind.GE_CTAC, "scan.ctac.rdf", None),
        (FileKind.GE_NORM_2D, "scan.norm.rdf", None),
        (FileKind.GE_NORM_3D, "scan.norm.rdf", None),
        (FileKind.GE_GEO, "scan.geo.rdf", None),
    ],
)
def test_output_names(kind, payload, header):
    ex = create_extractor(kind)
    assert isinstance(ex, Extractor)
    assert ex.kind is kind
    assert ex.payload_name("scan") == payload
    assert ex.header_name("scan") == header


def test_extractor_steps(make_listmode, tmp_path):
    container = RawContainer.open(make_listmode(count=6, words=6))
    ex = create_extractor(FileKind.MMR_LIST)
    assert ex.validate(container) is ValidationVerdict.GOOD

    header = ex.locate_header(container)
    assert ex.expectation(header).expected_bytes == 24
    source = ex.resolve_source(container, header)
    assert ex.extract_data(container, source, tmp_path / "x.l") == 24

    ex.extract_header(header, tmp_path / "x.l.hdr")
    updated = ex.modify_header(tmp_path / "x.l.hdr", tmp_path / "x.l")
    assert updated.value_of("name of data file") == "x.l"


def test_ge_extractor_has_no_header(make_ge):
    ex = create_extractor(FileKind.GE_SINO)
    assert ex.locate_header(RawContainer.open(make_ge())) is None
    assert ex.expectation(None) is None
