"""The bytecode virtual machine that drives the game."""

from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from typing import BinaryIO, Callable

from .channel import INVALID_PC, Channel, State, pc_from_value
from .loaded import LoadedAsset, LoadedPart
from .parts import GamePart
from .resource import NUM_MEM_ENTRIES, ResourceError, ResourceRegistry
from .shapes import Point
from .video import PageId, Video, VideoError

NUM_CHANNELS = 64
NUM_VARIABLES = 256
VM_VARIABLE_SCROLL_Y = 0xF9
VM_VARIABLE_PAUSE_SLICES = 0xFF
_FRAME_SLICE_MS = 20
_DEFAULT_ZOOM = 0x40


class VmError(Exception):
    """The bytecode could not be executed."""


@dataclass
class ExecutionContext:
    """Everything the running bytecode may read or change besides the VM itself."""

    loaded_part: LoadedPart
    loaded_asset: LoadedAsset
    part_to_load: GamePart | None
    resource: ResourceRegistry
    video: Video
    last_rendering: float = field(default_factory=time.monotonic)


def _i16(value: int) -> int:
    value &= 0xFFFF
    return value - 0x10000 if value & 0x8000 else value


def _read_u8(stream: BinaryIO) -> int:
    raw = stream.read(1)
    if not raw:
        raise VmError("IO error reading underlying stream: unexpected end of data")
    return raw[0]


def _read_u16(stream: BinaryIO) -> int:
    raw = stream.read(2)
    if len(raw) < 2:
        raise VmError("IO error reading underlying stream: unexpected end of data")
    return int.from_bytes(raw, "big")


class Vm:
    """Variables, channels and the call stack of the game's virtual machine."""

    def __init__(self) -> None:
        variables = [0] * NUM_VARIABLES
        variables[0x54] = 0x81
        variables[0x3C] = random.randint(-0x8000, 0x7FFF)
        variables[0xBC] = 0x10
        variables[0xC6] = 0x80
        variables[0xF2] = 4000
        variables[0xDC] = 33
        self.variables: list[int] = variables
        self.channels: list[Channel] = [Channel() for _ in range(NUM_CHANNELS)]
        self.running_channel_id = 0
        self.stack: list[int] = []

    # Scheduling

    def init_part(self) -> None:
        """Reset every channel and start channel 0 at the beginning of the bytecode."""
        self.variables[0xE4] = 0x14
        for channel in self.channels:
            channel.reset()
        self.channels[0].set_pc(0)

    def check_channel_requests(self) -> None:
        """Apply the program counters requested during the last frame."""
        for channel in self.channels:
            channel.apply_next_pc()

    def host_frame(self, context: ExecutionContext) -> None:
        """Run every ready channel until it yields or dies."""
        for channel_id, channel in enumerate(self.channels):
            if channel.state is not State.READY or channel.pc == INVALID_PC:
                continue
            self.stack.clear()
            self._run_channel(channel_id, channel.pc, context)

    def _run_channel(self, channel_id: int, pc: int, context: ExecutionContext) -> None:
        bytecode = context.loaded_part.bytecode
        bytecode.seek(pc)
        self.running_channel_id = channel_id
        channel = self.channels[channel_id]
        channel.state = State.RUNNING
        while channel.state is State.RUNNING:
            opcode = _read_u8(bytecode)
            try:
                if opcode & 0x80:
                    self._draw_background(opcode, context)
                elif opcode & 0x40:
                    self._draw_sprite(opcode, context)
                elif opcode < len(self._OPCODE_TABLE):
                    self._OPCODE_TABLE[opcode](self, context)
                else:
                    raise VmError(f"Unknown opcode {opcode:#04x}")
            except VideoError as exc:
                raise VmError("Video error") from exc
            except ResourceError as exc:
                raise VmError("Resource error") from exc

    def _set(self, variable_id: int, value: int) -> None:
        self.variables[variable_id] = _i16(value)

    def _channel(self, channel_id: int) -> Channel:
        if channel_id >= NUM_CHANNELS:
            raise VmError(f"Invalid channel {channel_id}")
        return self.channels[channel_id]

    # Arithmetic

    def _op_mov_const(self, context: ExecutionContext) -> None:
        bytecode = context.loaded_part.bytecode
        variable_id = _read_u8(bytecode)
        self._set(variable_id, _read_u16(bytecode))

    def _op_mov(self, context: ExecutionContext) -> None:
        bytecode = context.loaded_part.bytecode
        dst = _read_u8(bytecode)
        src = _read_u8(bytecode)
        self.variables[dst] = self.variables[src]

    def _op_add(self, context: ExecutionContext) -> None:
        bytecode = context.loaded_part.bytecode
        dst = _read_u8(bytecode)
        src = _read_u8(bytecode)
        self._set(dst, self.variables[dst] + self.variables[src])

    def _op_add_const(self, context: ExecutionContext) -> None:
        bytecode = context.loaded_part.bytecode
        variable_id = _read_u8(bytecode)
        value = _i16(_read_u16(bytecode))
        self._set(variable_id, self.variables[variable_id] + value)

    def _op_sub(self, context: ExecutionContext) -> None:
        bytecode = context.loaded_part.bytecode
        dst = _read_u8(bytecode)
        src = _read_u8(bytecode)
        self._set(dst, self.variables[dst] - self.variables[src])

    def _op_and(self, context: ExecutionContext) -> None:
        bytecode = context.loaded_part.bytecode
        variable_id = _read_u8(bytecode)
        value = _read_u16(bytecode)
        self._set(variable_id, self.variables[variable_id] & value)

    def _op_or(self, context: ExecutionContext) -> None:
        bytecode = context.loaded_part.bytecode
        variable_id = _read_u8(bytecode)
        value = _read_u16(bytecode)
        self._set(variable_id, self.variables[variable_id] | value)

    def _op_shl(self, context: ExecutionContext) -> None:
        bytecode = context.loaded_part.bytecode
        variable_id = _read_u8(bytecode)
        shift = _read_u16(bytecode) & 0x0F
        self._set(variable_id, self.variables[variable_id] << shift)

    def _op_shr(self, context: ExecutionContext) -> None:
        bytecode = context.loaded_part.bytecode
        variable_id = _read_u8(bytecode)
        shift = _read_u16(bytecode) & 0x0F
        self._set(variable_id, self.variables[variable_id] >> shift)

    # Control flow

    def _op_call(self, context: ExecutionContext) -> None:
        bytecode = context.loaded_part.bytecode
        offset = _read_u16(bytecode)
        self.stack.append(bytecode.tell())
        bytecode.seek(offset)

    def _op_ret(self, context: ExecutionContext) -> None:
        if not self.stack:
            raise VmError("Stack underflow")
        context.loaded_part.bytecode.seek(self.stack.pop())

    def _op_jmp(self, context: ExecutionContext) -> None:
        bytecode = context.loaded_part.bytecode
        bytecode.seek(_read_u16(bytecode))

    def _op_jnz(self, context: ExecutionContext) -> None:
        bytecode = context.loaded_part.bytecode
        variable_id = _read_u8(bytecode)
        self._set(variable_id, self.variables[variable_id] - 1)
        if self.variables[variable_id] != 0:
            self._op_jmp(context)
        else:
            _read_u16(bytecode)

    def _op_cond_jmp(self, context: ExecutionContext) -> None:
        bytecode = context.loaded_part.bytecode
        opcode = _read_u8(bytecode)
        var = _read_u8(bytecode)
        if opcode & 0x80:
            a = self.variables[_read_u8(bytecode)]
        elif opcode & 0x40:
            a = _i16(_read_u16(bytecode))
        else:
            a = _read_u8(bytecode)
        b = self.variables[var]

        comparisons: dict[int, Callable[[int, int], bool]] = {
            0: lambda a, b: a == b,
            1: lambda a, b: a != b,
            2: lambda a, b: b > a,
            3: lambda a, b: b >= a,
            4: lambda a, b: a > b,
            5: lambda a, b: a >= b,
        }
        compare = comparisons.get(opcode & 7)
        if compare is not None and compare(a, b):
            self._op_jmp(context)
        else:
            _read_u16(bytecode)

    # Channels

    def _op_yield_channel(self, context: ExecutionContext) -> None:
        position = context.loaded_part.bytecode.tell()
        self.channels[self.running_channel_id].yield_control(pc_from_value(position))

    def _op_set_next_pc(self, context: ExecutionContext) -> None:
        bytecode = context.loaded_part.bytecode
        channel_id = _read_u8(bytecode)
        offset = _read_u16(bytecode)
        self._channel(channel_id).next_pc = pc_from_value(offset)

    def _op_reset_threads(self, context: ExecutionContext) -> None:
        bytecode = context.loaded_part.bytecode
        first = _read_u8(bytecode)
        last = _read_u8(bytecode)
        operation = _read_u8(bytecode)
        if last >= NUM_CHANNELS or first > last + 1:
            raise VmError(f"Invalid channel range {first}..={last}")
        for channel in self.channels[first:last + 1]:
            if operation == 0:
                channel.state = State.READY
            elif operation == 1:
                channel.state = State.PAUSED
            else:
                channel.next_pc = INVALID_PC

    def _op_kill_channel(self, context: ExecutionContext) -> None:
        self.channels[self.running_channel_id].set_pc(INVALID_PC)

    # Video

    def _op_set_palette(self, context: ExecutionContext) -> None:
        palette_id = _read_u16(context.loaded_part.bytecode)
        context.video.request_palette(palette_id >> 8)

    def _op_select_video_page(self, context: ExecutionContext) -> None:
        page_id = PageId.from_raw(_read_u8(context.loaded_part.bytecode))
        context.video.change_working_buffer(page_id)

    def _op_fill_video_page(self, context: ExecutionContext) -> None:
        bytecode = context.loaded_part.bytecode
        page_id = PageId.from_raw(_read_u8(bytecode))
        color = _read_u8(bytecode)
        context.video.fill_page(page_id, color)

    def _op_copy_video_page(self, context: ExecutionContext) -> None:
        bytecode = context.loaded_part.bytecode
        src = PageId.from_raw(_read_u8(bytecode))
        dst = PageId.from_raw(_read_u8(bytecode))
        context.video.copy_page(src, dst, self.variables[VM_VARIABLE_SCROLL_Y])

    def _op_blit_frame_buffer(self, context: ExecutionContext) -> None:
        elapsed_ms = (time.monotonic() - context.last_rendering) * 1000
        pause_ms = self.variables[VM_VARIABLE_PAUSE_SLICES] * _FRAME_SLICE_MS - elapsed_ms
        if pause_ms > 0:
            time.sleep(pause_ms / 1000)
        context.last_rendering = time.monotonic()

        self.variables[0xF7] = 0
        page_id = PageId.from_raw(_read_u8(context.loaded_part.bytecode))
        context.video.update_display(page_id, context.loaded_part.palette)

    def _op_draw_string(self, context: ExecutionContext) -> None:
        bytecode = context.loaded_part.bytecode
        string_id = _read_u16(bytecode)
        x = _read_u8(bytecode)
        y = _read_u8(bytecode)
        color = _read_u8(bytecode)
        try:
            context.video.draw_string(color, x, y, string_id)
        except (KeyError, ValueError, IndexError) as exc:
            raise VmError(f"Cannot draw string {string_id:#x}") from exc

    # Sound and resources

    def _op_play_sound(self, context: ExecutionContext) -> None:
        bytecode = context.loaded_part.bytecode
        _read_u16(bytecode)
        _read_u8(bytecode)
        _read_u8(bytecode)
        _read_u8(bytecode)

    def _op_play_music(self, context: ExecutionContext) -> None:
        bytecode = context.loaded_part.bytecode
        _read_u16(bytecode)
        _read_u16(bytecode)
        _read_u8(bytecode)

    def _op_update_mem_list(self, context: ExecutionContext) -> None:
        resource_id = _read_u16(context.loaded_part.bytecode)
        if resource_id == 0:
            context.loaded_asset = LoadedAsset()
        elif resource_id < NUM_MEM_ENTRIES:
            context.loaded_asset.assets[resource_id] = context.resource.load_entry(resource_id)
        else:
            try:
                context.part_to_load = GamePart(resource_id)
            except ValueError:
                raise VmError(f"Invalid game part {resource_id}") from None

    # Drawing

    def _draw_sprite(self, opcode: int, context: ExecutionContext) -> None:
        bytecode = context.loaded_part.bytecode
        offset = (_read_u16(bytecode) * 2) & 0xFFFF

        x = _read_u8(bytecode)
        if not opcode & 0x20:
            if not opcode & 0x10:
                x = _i16((x << 8) | _read_u8(bytecode))
            else:
                x = self.variables[x]
        elif opcode & 0x10:
            x += 0x100

        y = _read_u8(bytecode)
        if not opcode & 8:
            if not opcode & 4:
                y = _i16((y << 8) | _read_u8(bytecode))
            else:
                y = self.variables[y]

        zoom = _read_u8(bytecode)
        if not opcode & 2:
            if not opcode & 1:
                bytecode.seek(-1, 1)
                zoom = _DEFAULT_ZOOM
            else:
                zoom = self.variables[zoom] & 0xFFFF
        elif opcode & 1:
            bytecode.seek(-1, 1)
            zoom = _DEFAULT_ZOOM

        if opcode & 3 != 3:
            stream = context.loaded_part.cinematic
        else:
            stream = context.loaded_part.polygon
            if stream is None:
                raise VmError("Missing polygon segment")
        stream.seek(offset)
        context.video.read_and_draw_polygon(stream, 0xFF, zoom, Point(x, y))

    def _draw_background(self, opcode: int, context: ExecutionContext) -> None:
        bytecode = context.loaded_part.bytecode
        offset = (((opcode << 8) | _read_u8(bytecode)) * 2) & 0xFFFF
        x = _read_u8(bytecode)
        y = _read_u8(bytecode)
        overflow = y - 199
        if overflow > 0:
            y = 199
            x += overflow

        cinematic = context.loaded_part.cinematic
        cinematic.seek(offset)
        context.video.read_and_draw_polygon(cinematic, 0xFF, _DEFAULT_ZOOM, Point(x, y))

    _OPCODE_TABLE: tuple[Callable[[Vm, ExecutionContext], None], ...] = (
        _op_mov_const,
        _op_mov,
        _op_add,
        _op_add_const,
        _op_call,
        _op_ret,
        _op_yield_channel,
        _op_jmp,
        _op_set_next_pc,
        _op_jnz,
        _op_cond_jmp,
        _op_set_palette,
        _op_reset_threads,
        _op_select_video_page,
        _op_fill_video_page,
        _op_copy_video_page,
        _op_blit_frame_buffer,
        _op_kill_channel,
        _op_draw_string,
        _op_sub,
        _op_and,
        _op_or,
        _op_shl,
        _op_shr,
        _op_play_sound,
        _op_update_mem_list,
        _op_play_music,
    )