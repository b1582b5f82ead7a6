"""Video pages and the drawing of polygons, text and backgrounds on them."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum, auto
from itertools import islice
from typing import BinaryIO, ClassVar

from .renderer import Renderer, RendererError
from .shapes import Point, Polygon
from .text import get_string, glyph

HEIGHT = 200
WIDTH = 320
BYTES_PER_LINE = WIDTH // 2
VID_PAGE_SIZE = HEIGHT * WIDTH // 2
NUM_PAGES = 4
NUM_PALETTES = 32
PALETTE_SIZE = 32

_COLOR_BLEND = 0x10
_COLOR_FROM_BG = 0x11


class VideoError(Exception):
    """Drawing data was malformed or the display could not be updated."""


class PageKind(Enum):
    NUMBERED = auto()
    FRONT = auto()
    BACK = auto()


@dataclass(frozen=True)
class PageId:
    """A video page: one of the four numbered pages, or the front or back buffer."""

    kind: PageKind
    number: int = 0

    FRONT: ClassVar[PageId]
    BACK: ClassVar[PageId]

    @classmethod
    def numbered(cls, number: int) -> PageId:
        return cls(PageKind.NUMBERED, number)

    @classmethod
    def from_raw(cls, raw_page_id: int) -> PageId:
        """Decode a page id byte; unknown numbers fall back to page 0."""
        if raw_page_id == 0xFE:
            return cls.FRONT
        if raw_page_id == 0xFF:
            return cls.BACK
        if raw_page_id <= 3:
            return cls.numbered(raw_page_id)
        return cls.numbered(0)


PageId.FRONT = PageId(PageKind.FRONT)
PageId.BACK = PageId(PageKind.BACK)


def _i16(value: int) -> int:
    value &= 0xFFFF
    return value - 0x10000 if value & 0x8000 else value


def _half(value: int) -> int:
    """Halve an integer, truncating toward zero."""
    return -((-value) // 2) if value < 0 else value // 2


def _round_to_i16(value: float) -> int:
    """Round half away from zero and saturate to the 16-bit signed range."""
    if math.isnan(value):
        return 0
    if math.isinf(value):
        return 32767 if value > 0 else -32768
    rounded = math.floor(abs(value) + 0.5)
    if value < 0:
        rounded = -rounded
    return max(-32768, min(32767, rounded))


def _calc_step(p1: Point, p2: Point) -> float:
    dy = _i16(p2.y - p1.y)
    dx = _i16(p2.x - p1.x)
    if dy == 0:
        return math.nan if dx == 0 else math.copysign(math.inf, dx)
    return dx / dy


def _read_u8(stream: BinaryIO) -> int:
    raw = stream.read(1)
    if not raw:
        raise VideoError("Error in the underlying stream: unexpected end of data")
    return raw[0]


def _read_u16(stream: BinaryIO) -> int:
    raw = stream.read(2)
    if len(raw) < 2:
        raise VideoError("Error in the underlying stream: unexpected end of data")
    return int.from_bytes(raw, "big")


def _scaled(stream: BinaryIO, zoom: int) -> int:
    return _i16(_read_u8(stream) * zoom // 64)


class Video:
    """Four 4-bit video pages, a working page, and front and back buffers."""

    def __init__(self, renderer: Renderer) -> None:
        self.renderer = renderer
        self.pages: list[bytearray] = [bytearray(VID_PAGE_SIZE) for _ in range(NUM_PAGES)]
        self.work_buffer = 2
        self.front_buffer = 2
        self.back_buffer = 1
        self.palette_request: int | None = None
        self._hline_y = 0

    # Pages

    def _page_index(self, page_id: PageId) -> int:
        if page_id.kind is PageKind.FRONT:
            return self.front_buffer
        if page_id.kind is PageKind.BACK:
            return self.back_buffer
        if 0 <= page_id.number <= 3:
            return page_id.number
        raise ValueError(f"Unsupported page id {page_id}")

    def change_working_buffer(self, page_id: PageId) -> None:
        self.work_buffer = self._page_index(page_id)

    def fill_page(self, page_id: PageId, color: int) -> None:
        byte_color = ((color << 4) | color) & 0xFF
        page = self.pages[self._page_index(page_id)]
        page[:] = bytes([byte_color]) * VID_PAGE_SIZE

    def copy_page(self, src_page_id: PageId, dst_page_id: PageId, vscroll: int) -> None:
        """Copy one page onto another, optionally scrolled vertically."""
        if src_page_id == dst_page_id:
            return

        is_vertical_scrolled = (
            src_page_id.kind is PageKind.NUMBERED and src_page_id.number & 80 != 0
        )
        if src_page_id.kind is PageKind.NUMBERED:
            mask = 3 if is_vertical_scrolled else 0xBF
            src_page_id = PageId.numbered(src_page_id.number & mask)

        src = self.pages[self._page_index(src_page_id)]
        dst = self.pages[self._page_index(dst_page_id)]

        if is_vertical_scrolled and abs(vscroll) <= 199:
            length = HEIGHT - abs(vscroll)
            src_offset, dst_offset = (-vscroll, 0) if vscroll < 0 else (0, vscroll)
            dst[dst_offset:dst_offset + length] = src[src_offset:src_offset + length]
        else:
            dst[:] = src

    def copy_bg(self, src_data: bytes) -> None:
        """Convert a four-plane background image into page 0."""
        plane_size = HEIGHT * WIDTH // 8
        if len(src_data) < plane_size * 4:
            raise ValueError("background data is shorter than four planes")
        bytes_per_row = WIDTH // 8
        bg_page = self.pages[0]
        for h in range(HEIGHT):
            for w in range(bytes_per_row):
                src = h * bytes_per_row + w
                planes = [
                    src_data[src + plane_size * 3],
                    src_data[src + plane_size * 2],
                    src_data[src + plane_size],
                    src_data[src],
                ]
                for byte in range(4):
                    acc = 0
                    for bit in range(8):
                        plane = bit & 3
                        acc = (acc << 1) | (1 if planes[plane] & 0x80 else 0)
                        planes[plane] = (planes[plane] << 1) & 0xFF
                    bg_page[h * BYTES_PER_LINE + w * 4 + byte] = acc

    # Primitives

    def _draw_point(self, x: int, y: int, color: int) -> None:
        if not (0 <= x <= 319 and 0 <= y <= 199):
            return
        offset = y * BYTES_PER_LINE + x // 2
        old_mask, new_mask = (0xF0, 0x0F) if x & 1 else (0x0F, 0xF0)
        byte_color = ((color << 4) | color) & 0xFF
        if color == _COLOR_BLEND:
            new_mask &= 0x88
            old_mask = ~new_mask & 0xFF
            byte_color = 0x88
        elif color == _COLOR_FROM_BG:
            byte_color = self.pages[0][offset]
        page = self.pages[self.work_buffer]
        page[offset] = (page[offset] & old_mask) | (byte_color & new_mask)

    def _line_span(self, x1: int, x2: int) -> tuple[int, int, range]:
        x_max = max(x1, x2)
        x_min = min(x1, x2)
        offset = self._hline_y * BYTES_PER_LINE + x_min // 2
        width = x_max // 2 - x_min // 2 + 1
        start = x_min & 1
        end = max(0, width - 1 - ((x_max & 1) ^ 1))
        return offset, width, range(offset + start, offset + end + 1)

    def _draw_line_normal(self, x1: int, x2: int, color: int) -> None:
        offset, width, inner = self._line_span(x1, x2)
        page = self.pages[self.work_buffer]
        byte_color = ((color & 0xF) << 4) | (color & 0xF)
        last = offset + width - 1
        page[offset] = (page[offset] & 0xF0) | (byte_color & 0x0F)
        page[last] = (page[last] & 0x0F) | (byte_color & 0xF0)
        for index in inner:
            page[index] = byte_color

    def _draw_line_from_bg(self, x1: int, x2: int) -> None:
        offset, width, inner = self._line_span(x1, x2)
        bg_page = self.pages[0]
        page = self.pages[self.work_buffer]
        last = offset + width - 1
        page[offset] = (page[offset] & 0xF0) | (bg_page[offset] & 0x0F)
        page[last] = (page[last] & 0x0F) | (bg_page[last] & 0xF0)
        for index in inner:
            page[index] = bg_page[index]

    def _draw_line_blend(self, x1: int, x2: int) -> None:
        offset, width, inner = self._line_span(x1, x2)
        page = self.pages[self.work_buffer]
        page[offset] |= 0x08
        page[offset + width - 1] |= 0x80
        for index in inner:
            page[index] |= 0x88

    # Text

    def draw_string(self, color: int, x: int, y: int, string_id: int) -> None:
        """Draw string ``string_id`` at character column ``x`` and pixel row ``y``."""
        curr_x, curr_y = x, y
        for char in get_string(string_id):
            curr_x += 1
            if char == 0x0A:
                curr_x = x
                curr_y += 8
                continue
            self._draw_char(char, curr_x, curr_y, color)

    def _draw_char(self, char: int, x: int, y: int, color: int) -> None:
        rows = glyph(char)
        video_offset = (x * 4 + y * BYTES_PER_LINE) & 0xFFFF
        page = self.pages[self.work_buffer]
        for j, font_row in enumerate(rows):
            mask = font_row
            row_offset = video_offset + j * BYTES_PER_LINE
            for i in range(4):
                color_pair = 0
                pixel_mask = 0xFF
                if mask & 0x80:
                    color_pair = (color << 4) & 0xFF
                    pixel_mask &= 0x0F
                if mask & 0x40:
                    color_pair = (color_pair | color) & 0xFF
                    pixel_mask &= 0xF0
                index = row_offset + i
                page[index] = (page[index] & pixel_mask) | color_pair
                mask = (mask << 2) & 0xFF

    # Polygons

    def read_and_draw_polygon(
        self, stream: BinaryIO, color: int, zoom: int, pt: Point
    ) -> None:
        """Read a shape or a shape hierarchy from ``stream`` and draw it at ``pt``."""
        command = _read_u8(stream)
        if command >= 0xC0:
            if color & 0x80:
                color = command & 0x3F
            try:
                polygon = Polygon.read_vertices(stream, zoom)
            except EOFError as exc:
                raise VideoError("Error in the underlying stream") from exc
            self._fill_polygon(color, pt, polygon)
        elif command & 0x3F == 2:
            self._read_and_draw_hierarchy(stream, zoom, pt)
        else:
            raise VideoError(f"Unexpected command {command:#04x}")

    def _read_and_draw_hierarchy(self, stream: BinaryIO, zoom: int, pgc: Point) -> None:
        x = _i16(pgc.x - _scaled(stream, zoom))
        y = _i16(pgc.y - _scaled(stream, zoom))
        children = _read_u8(stream)
        for _ in range(children + 1):
            raw_offset = _read_u16(stream)
            child_x = _i16(x + _scaled(stream, zoom))
            child_y = _i16(y + _scaled(stream, zoom))
            color = 0xFF
            if raw_offset & 0x8000:
                color = _read_u8(stream) & 0x7F
                stream.seek(1, 1)
            resume_at = stream.tell()
            stream.seek((raw_offset & 0x7FFF) * 2)
            self.read_and_draw_polygon(stream, color, zoom, Point(child_x, child_y))
            stream.seek(resume_at)

    def _fill_polygon(self, color: int, pt: Point, polygon: Polygon) -> None:
        points = polygon.points
        if polygon.bbw == 0 and polygon.bbh == 1 and len(points) == 4:
            self._draw_point(pt.x, pt.y, color)

        x1 = _i16(pt.x - _half(polygon.bbw))
        x2 = _i16(pt.x + _half(polygon.bbw))
        y1 = _i16(pt.y - _half(polygon.bbh))
        y2 = _i16(pt.y + _half(polygon.bbh))
        if x1 > 319 or x2 < 0 or y1 > 199 or y2 < 0:
            return

        self._hline_y = y1
        left_edges = zip(reversed(points), reversed(points[:-1]))
        right_edges = zip(points, points[1:])
        for (curr_left, next_left), (curr_right, next_right) in islice(
            zip(left_edges, right_edges), len(points) // 2
        ):
            step_left = _calc_step(curr_left, next_left)
            step_right = _calc_step(curr_right, next_right)
            h_diff = _i16(next_left.y - curr_left.y)
            if h_diff <= 0:
                continue
            x_left = float(curr_left.x + x1)
            x_right = float(curr_right.x + x1)
            for _ in range(h_diff):
                if self._hline_y >= 0 and x_left <= 319.0 and x_right >= 0.0:
                    draw_left = max(0, _round_to_i16(x_left))
                    draw_right = min(_round_to_i16(x_right), 319)
                    if color < _COLOR_BLEND:
                        self._draw_line_normal(draw_left, draw_right, color)
                    elif color > _COLOR_BLEND:
                        self._draw_line_from_bg(draw_left, draw_right)
                    else:
                        self._draw_line_blend(draw_left, draw_right)
                x_left += step_left
                x_right += step_right
                self._hline_y += 1
                if self._hline_y > 199:
                    return

    # Display

    def request_palette(self, palette_id: int | None) -> None:
        """Ask for palette ``palette_id`` on the next display update; None keeps it."""
        self.palette_request = palette_id

    def _change_palette(self, palette_id: int, palette_segment: BinaryIO) -> None:
        if palette_id >= NUM_PALETTES:
            raise VideoError(f"Invalid palette number {palette_id}")
        palette_segment.seek(palette_id * PALETTE_SIZE)
        try:
            self.renderer.set_palette(palette_segment)
        except RendererError as exc:
            raise VideoError("Renderer error") from exc

    def update_display(self, page_id: PageId, palette_segment: BinaryIO) -> None:
        """Make ``page_id`` the front buffer and show it."""
        if page_id.kind is PageKind.NUMBERED:
            self.front_buffer = self._page_index(page_id)
        elif page_id.kind is PageKind.BACK:
            self.front_buffer, self.back_buffer = self.back_buffer, self.front_buffer

        if self.palette_request is not None:
            self._change_palette(self.palette_request, palette_segment)
            self.palette_request = None

        try:
            self.renderer.update_display(bytes(self.pages[self.front_buffer]))
        except RendererError as exc:
            raise VideoError("Renderer error") from exc