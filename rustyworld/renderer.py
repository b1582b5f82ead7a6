"""Turning 4-bit video pages into scaled RGB pixels for a display."""

from __future__ import annotations

from itertools import chain
from typing import BinaryIO, Protocol, Sequence

SCALE_FACTOR = 3
SCREEN_W = 320
SCREEN_H = 200
SCALED_W = SCREEN_W * SCALE_FACTOR
SCALED_H = SCREEN_H * SCALE_FACTOR
NUM_COLORS = 16
BYTES_PER_LINE = SCREEN_W // 2


class RendererError(Exception):
    """The palette could not be read or the display could not be drawn."""


class Display(Protocol):
    """Something that shows a frame of 0xRRGGBB pixels."""

    @property
    def size(self) -> tuple[int, int]: ...

    def present(self, pixels: Sequence[int]) -> None: ...


def _expand(nibble: int) -> int:
    return nibble | (nibble << 4)


class Renderer:
    """Holds the current palette and pushes pages to a display."""

    def __init__(self, display: Display) -> None:
        self.display = display
        self.palette: list[int] = [0] * NUM_COLORS

    def set_palette(self, stream: BinaryIO) -> None:
        """Read sixteen big-endian 0x0RGB colours from ``stream``."""
        raw = stream.read(NUM_COLORS * 2)
        if len(raw) < NUM_COLORS * 2:
            raise RendererError("Error in the underlying stream: palette truncated")
        colors = []
        for high, low in zip(raw[::2], raw[1::2]):
            color444 = (high << 8) | low
            r = _expand((color444 >> 8) & 0x0F)
            g = _expand((color444 >> 4) & 0x0F)
            b = _expand(color444 & 0x0F)
            colors.append((r << 16) | (g << 8) | b)
        self.palette = colors

    def scale_page(self, src: bytes) -> list[int]:
        """Expand a page of packed pixel pairs to scaled 0xRRGGBB pixels.

        Only whole lines of ``src`` are drawn; each becomes SCALE_FACTOR rows.
        """
        pair_pixels = [
            [self.palette[byte >> 4]] * SCALE_FACTOR
            + [self.palette[byte & 0x0F]] * SCALE_FACTOR
            for byte in range(256)
        ]
        pixels: list[int] = []
        whole = len(src) - len(src) % BYTES_PER_LINE
        for start in range(0, whole, BYTES_PER_LINE):
            line = src[start:start + BYTES_PER_LINE]
            row = list(chain.from_iterable(pair_pixels[byte] for byte in line))
            pixels.extend(row * SCALE_FACTOR)
        return pixels

    def update_display(self, src: bytes) -> None:
        """Show page ``src`` on the display."""
        width, height = self.display.size
        if width <= 0 or height <= 0:
            raise RendererError("Impossible resize surface")
        self.display.present(self.scale_page(src))