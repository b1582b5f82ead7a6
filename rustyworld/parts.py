"""Game parts and the memory-list entries that make up each of them."""

from __future__ import annotations

from enum import IntEnum


class Segment(IntEnum):
    """The kinds of data a game part is built from."""

    PALETTE = 0
    BYTECODE = 1
    POLY_CINEMATIC = 2
    POLYGON = 3


class GamePart(IntEnum):
    """Identifiers of the game parts, as used by the bytecode."""

    ONE = 0x3E80
    TWO = 0x3E81
    THREE = 0x3E82
    FOUR = 0x3E83
    FIVE = 0x3E84
    SIX = 0x3E85
    SEVEN = 0x3E86
    EIGHT = 0x3E87
    NINE = 0x3E88
    TEN = 0x3E89


# Memory-list indices of palette, bytecode, cinematic and polygon data per
# part; an index of zero means the part has no such segment.
SEGMENT_IDX_BY_PART: tuple[tuple[int, int, int, int], ...] = (
    (0x14, 0x15, 0x16, 0x00),
    (0x17, 0x18, 0x19, 0x00),
    (0x1A, 0x1B, 0x1C, 0x11),
    (0x1D, 0x1E, 0x1F, 0x11),
    (0x20, 0x21, 0x22, 0x11),
    (0x23, 0x24, 0x25, 0x00),
    (0x26, 0x27, 0x28, 0x11),
    (0x29, 0x2A, 0x2B, 0x11),
    (0x7D, 0x7E, 0x7F, 0x00),
    (0x7D, 0x7E, 0x7F, 0x00),
)


def segment_indices(part: GamePart | int) -> dict[Segment, int]:
    """Return the memory-list index of every segment of ``part``.

    Raises ValueError if ``part`` is not a known game part.
    """
    game_part = GamePart(part)
    row = SEGMENT_IDX_BY_PART[game_part - GamePart.ONE]
    return dict(zip(Segment, row))