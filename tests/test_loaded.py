import pytest

from rustyworld.loaded import LoadedAsset, LoadedPart, LoadedPartError
from rustyworld.parts import Segment


def _segments():
    return {
        Segment.PALETTE: b"pal",
        Segment.BYTECODE: b"code",
        Segment.POLY_CINEMATIC: b"cine",
        Segment.POLYGON: b"poly",
    }


def test_from_segments_all_present():
    part = LoadedPart.from_segments(_segments())
    assert part.palette.getvalue() == b"pal"
    assert part.bytecode.getvalue() == b"code"
    assert part.cinematic.getvalue() == b"cine"
    assert part.polygon.getvalue() == b"poly"


def test_from_segments_polygon_optional():
    data = _segments()
    del data[Segment.POLYGON]
    part = LoadedPart.from_segments(data)
    assert part.polygon is None
    assert part.bytecode.getvalue() == b"code"


def test_from_segments_streams_start_at_zero():
    part = LoadedPart.from_segments(_segments())
    assert part.bytecode.tell() == 0
    assert part.bytecode.read(2) == b"co"


@pytest.mark.parametrize(
    "missing", [Segment.BYTECODE, Segment.PALETTE, Segment.POLY_CINEMATIC]
)
def test_from_segments_missing_required(missing):
    data = _segments()
    del data[missing]
    with pytest.raises(LoadedPartError) as info:
        LoadedPart.from_segments(data)
    assert info.value.segment is missing


def test_from_segments_leaves_input_intact():
    data = _segments()
    LoadedPart.from_segments(data)
    assert data == _segments()


def test_default_part_is_empty():
    part = LoadedPart()
    assert part.bytecode.getvalue() == b""
    assert part.polygon is None


def test_default_assets_are_independent():
    first = LoadedAsset()
    second = LoadedAsset()
    first.assets[1] = b"x"
    assert second.assets == {}