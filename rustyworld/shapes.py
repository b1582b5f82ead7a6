"""Points and polygons read from cinematic and polygon segments."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import BinaryIO

MAX_POINTS = 64


def _to_i16(value: int) -> int:
    value &= 0xFFFF
    return value - 0x10000 if value & 0x8000 else value


def _read_u8(stream: BinaryIO) -> int:
    raw = stream.read(1)
    if not raw:
        raise EOFError("unexpected end of shape data")
    return raw[0]


def _scaled(stream: BinaryIO, zoom: int) -> int:
    return _to_i16(_read_u8(stream) * zoom // 64)


@dataclass
class Point:
    x: int
    y: int


@dataclass
class Polygon:
    """A polygon's bounding box and its vertices, already zoomed."""

    bbw: int
    bbh: int
    points: list[Point] = field(default_factory=list)

    @classmethod
    def read_vertices(cls, stream: BinaryIO, zoom: int) -> Polygon:
        """Read bounding box and vertices, scaling each by ``zoom / 64``.

        Raises EOFError on truncated data and ValueError on a bad vertex count.
        """
        bbw = _scaled(stream, zoom)
        bbh = _scaled(stream, zoom)
        num_points = _read_u8(stream)

        if num_points % 2 != 0:
            raise ValueError("Points must be even")
        if num_points >= MAX_POINTS:
            raise ValueError(f"Points must be max {MAX_POINTS}")

        points = []
        for _ in range(num_points):
            x = _scaled(stream, zoom)
            y = _scaled(stream, zoom)
            points.append(Point(x, y))
        return cls(bbw=bbw, bbh=bbh, points=points)