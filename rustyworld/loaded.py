"""Data of the game part and of the assets currently in memory."""

from __future__ import annotations

import io
from collections.abc import Mapping
from dataclasses import dataclass, field

from .parts import Segment


class LoadedPartError(Exception):
    """A required segment of a game part is missing."""

    def __init__(self, segment: Segment) -> None:
        super().__init__(f"Missing segment {segment.name}")
        self.segment = segment


@dataclass
class LoadedPart:
    """Seekable streams over the segments of the running game part."""

    bytecode: io.BytesIO = field(default_factory=io.BytesIO)
    palette: io.BytesIO = field(default_factory=io.BytesIO)
    cinematic: io.BytesIO = field(default_factory=io.BytesIO)
    polygon: io.BytesIO | None = None

    @classmethod
    def from_segments(cls, segment_data: Mapping[Segment, bytes]) -> LoadedPart:
        """Build a part; bytecode, palette and cinematic are required."""

        def required(segment: Segment) -> io.BytesIO:
            try:
                return io.BytesIO(segment_data[segment])
            except KeyError:
                raise LoadedPartError(segment) from None

        bytecode = required(Segment.BYTECODE)
        palette = required(Segment.PALETTE)
        cinematic = required(Segment.POLY_CINEMATIC)
        polygon = segment_data.get(Segment.POLYGON)
        return cls(
            bytecode=bytecode,
            palette=palette,
            cinematic=cinematic,
            polygon=io.BytesIO(polygon) if polygon is not None else None,
        )


@dataclass
class LoadedAsset:
    """Extra resources loaded on request, keyed by memory-list index."""

    assets: dict[int, bytes] = field(default_factory=dict)