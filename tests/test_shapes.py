import io

import pytest

from rustyworld.shapes import Point, Polygon


def test_read_vertices_unit_zoom():
    stream = io.BytesIO(bytes([10, 20, 2, 1, 2, 3, 4]))
    polygon = Polygon.read_vertices(stream, 64)
    assert polygon == Polygon(bbw=10, bbh=20, points=[Point(1, 2), Point(3, 4)])


def test_read_vertices_double_zoom():
    raw = bytes([10, 20, 2, 1, 2, 3, 4])
    plain = Polygon.read_vertices(io.BytesIO(raw), 64)
    zoomed = Polygon.read_vertices(io.BytesIO(raw), 128)
    assert zoomed.bbw == 2 * plain.bbw
    assert zoomed.bbh == 2 * plain.bbh
    assert [(p.x, p.y) for p in zoomed.points] == [(2 * p.x, 2 * p.y) for p in plain.points]


def test_read_vertices_zero_zoom_collapses():
    polygon = Polygon.read_vertices(io.BytesIO(bytes([10, 20, 2, 1, 2, 3, 4])), 0)
    assert polygon.bbw == 0
    assert all(p.x == 0 and p.y == 0 for p in polygon.points)


def test_read_vertices_consumes_exact_bytes():
    stream = io.BytesIO(bytes([1, 1, 4]) + bytes(8) + b"tail")
    polygon = Polygon.read_vertices(stream, 64)
    assert len(polygon.points) == 4
    assert stream.read() == b"tail"


def test_read_vertices_result_fits_i16():
    polygon = Polygon.read_vertices(io.BytesIO(bytes([255, 255, 0])), 0xFFFF)
    assert -0x8000 <= polygon.bbw <= 0x7FFF
    assert -0x8000 <= polygon.bbh <= 0x7FFF


def test_read_vertices_odd_count_rejected():
    with pytest.raises(ValueError):
        Polygon.read_vertices(io.BytesIO(bytes([1, 1, 3]) + bytes(6)), 64)


def test_read_vertices_too_many_points_rejected():
    with pytest.raises(ValueError):
        Polygon.read_vertices(io.BytesIO(bytes([1, 1, 64]) + bytes(128)), 64)


def test_read_vertices_truncated():
    with pytest.raises(EOFError):
        Polygon.read_vertices(io.BytesIO(bytes([1, 1, 2, 5])), 64)