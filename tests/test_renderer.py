import io

import pytest

from rustyworld.renderer import (
    NUM_COLORS,
    SCALE_FACTOR,
    SCALED_H,
    SCALED_W,
    SCREEN_H,
    SCREEN_W,
    Renderer,
    RendererError,
)


class FakeDisplay:
    def __init__(self, size=(SCALED_W, SCALED_H)):
        self.size = size
        self.frames = []

    def present(self, pixels):
        self.frames.append(list(pixels))


def palette_bytes(colors):
    return b"".join(color.to_bytes(2, "big") for color in colors)


def make_renderer(colors=None, display=None):
    renderer = Renderer(display or FakeDisplay())
    colors = colors or list(range(NUM_COLORS))
    renderer.set_palette(io.BytesIO(palette_bytes(colors)))
    return renderer


def test_default_palette_is_black():
    assert Renderer(FakeDisplay()).palette == [0] * NUM_COLORS


def test_pure_red():
    renderer = make_renderer([0x0F00] + [0] * 15)
    assert renderer.palette[0] == 0xFF0000


def test_nibbles_are_duplicated():
    renderer = make_renderer([0x0123] + [0] * 15)
    assert renderer.palette[0] == 0x112233


def test_white_and_high_bits_ignored():
    renderer = make_renderer([0xFFFF, 0x0FFF] + [0] * 14)
    assert renderer.palette[0] == renderer.palette[1] == 0xFFFFFF


def test_set_palette_consumes_32_bytes():
    stream = io.BytesIO(palette_bytes([0] * 20))
    Renderer(FakeDisplay()).set_palette(stream)
    assert stream.tell() == NUM_COLORS * 2


def test_truncated_palette_raises():
    with pytest.raises(RendererError):
        Renderer(FakeDisplay()).set_palette(io.BytesIO(b"\x00" * 31))


def test_scale_page_size():
    renderer = make_renderer()
    pixels = renderer.scale_page(bytes(SCREEN_W * SCREEN_H // 2))
    assert len(pixels) == SCALED_W * SCALED_H


def test_scale_page_ignores_partial_line():
    renderer = make_renderer()
    pixels = renderer.scale_page(bytes(SCREEN_W // 2 + 7))
    assert len(pixels) == SCALED_W * SCALE_FACTOR


def test_scale_page_splits_pixel_pairs():
    colors = [0x0100 * (i % 16) + i for i in range(NUM_COLORS)]
    renderer = make_renderer(colors)
    page = bytearray(SCREEN_W // 2)
    page[0] = 0x3A
    pixels = renderer.scale_page(bytes(page))
    left = renderer.palette[0x3]
    right = renderer.palette[0xA]
    for row in range(SCALE_FACTOR):
        base = row * SCALED_W
        assert pixels[base:base + SCALE_FACTOR] == [left] * SCALE_FACTOR
        assert pixels[base + SCALE_FACTOR:base + 2 * SCALE_FACTOR] == [right] * SCALE_FACTOR
        assert pixels[base + 2 * SCALE_FACTOR] == renderer.palette[0]


def test_scaled_rows_repeat():
    renderer = make_renderer()
    line = bytes(range(SCREEN_W // 2))
    pixels = renderer.scale_page(line)
    rows = [pixels[r * SCALED_W:(r + 1) * SCALED_W] for r in range(SCALE_FACTOR)]
    assert rows[0] == rows[1] == rows[2]


def test_update_display_presents_scaled_page():
    display = FakeDisplay()
    renderer = make_renderer(display=display)
    page = bytes([0x12]) * (SCREEN_W * SCREEN_H // 2)
    renderer.update_display(page)
    assert display.frames == [renderer.scale_page(page)]


def test_update_display_rejects_empty_surface():
    display = FakeDisplay(size=(0, SCALED_H))
    renderer = make_renderer(display=display)
    with pytest.raises(RendererError):
        renderer.update_display(bytes(SCREEN_W * SCREEN_H // 2))
    assert display.frames == []