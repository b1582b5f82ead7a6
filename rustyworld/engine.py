"""The game window, the main loop and the command-line entry point."""

from __future__ import annotations

import argparse
import logging
import sys
from array import array
from os import PathLike
from pathlib import Path
from typing import Sequence

import pygame

from .loaded import LoadedAsset, LoadedPart
from .parts import GamePart
from .renderer import SCALED_H, SCALED_W, SCREEN_H, SCREEN_W, Renderer
from .resource import ResourceError, ResourceRegistry
from .video import Video
from .vm import ExecutionContext, Vm, VmError

WINDOW_TITLE = "Another Rusty World"
DEFAULT_DATA_DIR = "./another_world"
_BACKGROUND_SIZE = SCREEN_W * SCREEN_H // 2

log = logging.getLogger(__name__)


class EngineError(Exception):
    """The game could not be loaded or its bytecode failed."""


class WindowDisplay:
    """A fixed-size window that shows frames of 0xRRGGBB pixels."""

    def __init__(self, title: str, width: int, height: int) -> None:
        pygame.display.init()
        self._surface = pygame.display.set_mode((width, height))
        pygame.display.set_caption(title)
        self._width = width
        self._height = height

    @property
    def size(self) -> tuple[int, int]:
        return self._surface.get_size()

    def present(self, pixels: Sequence[int]) -> None:
        """Show one frame; ``pixels`` holds width * height colours, row by row."""
        expected = self._width * self._height
        if len(pixels) != expected:
            raise ValueError(f"expected {expected} pixels, got {len(pixels)}")
        words = array("I", pixels)
        if words.itemsize != 4:
            words = array("L", pixels)
        if sys.byteorder == "little":
            words.byteswap()
        raw = words.tobytes()
        step = words.itemsize
        rgb = bytearray(expected * 3)
        rgb[0::3] = raw[step - 3::step]
        rgb[1::3] = raw[step - 2::step]
        rgb[2::3] = raw[step - 1::step]
        frame = pygame.image.frombuffer(bytes(rgb), (self._width, self._height), "RGB")
        self._surface.blit(frame, (0, 0))
        pygame.display.flip()

    def pump_events(self) -> None:
        """Handle pending window events; closing the window ends the program."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                raise SystemExit(0)


class Engine:
    """Loads the game data and runs the virtual machine frame after frame."""

    def __init__(self, data_dir: str | PathLike[str]) -> None:
        self.data_dir = Path(data_dir)

    def update_part(self, context: ExecutionContext, vm: Vm) -> None:
        """Switch to the game part the bytecode asked for, if any."""
        part = context.part_to_load
        if part is None:
            return

        vm.init_part()
        try:
            loaded_part = context.resource.setup_part(part)
        except ResourceError as exc:
            raise EngineError("Resource registry error") from exc

        if loaded_part.polygon is not None:
            data = loaded_part.polygon.getvalue()
            if len(data) == _BACKGROUND_SIZE:
                context.video.copy_bg(data)

        context.loaded_part = loaded_part
        context.loaded_asset = LoadedAsset()
        context.part_to_load = None

    def run(self) -> None:
        """Open the window and run the game until the window is closed."""
        resource = ResourceRegistry(self.data_dir)
        try:
            resource.read_entries()
        except ResourceError as exc:
            raise EngineError("Resource registry error") from exc

        display = WindowDisplay(WINDOW_TITLE, SCALED_W, SCALED_H)
        video = Video(Renderer(display))
        vm = Vm()
        context = ExecutionContext(
            loaded_part=LoadedPart(),
            loaded_asset=LoadedAsset(),
            part_to_load=GamePart.TWO,
            resource=resource,
            video=video,
        )

        while True:
            self.update_part(context, vm)
            vm.check_channel_requests()
            try:
                vm.host_frame(context)
            except VmError as exc:
                raise EngineError("Unexpected error in VM execution") from exc
            display.pump_events()


def main(argv: Sequence[str] | None = None) -> int:
    """Run the game from the command line; return the exit status."""
    parser = argparse.ArgumentParser(
        prog="rustyworld",
        description="An interpreter for the game data of 'Another World'.",
    )
    parser.add_argument(
        "-d",
        "--data-dir",
        default=DEFAULT_DATA_DIR,
        help="directory holding memlist.bin and the bank files",
    )
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    try:
        Engine(args.data_dir).run()
    except EngineError as exc:
        log.error("Engine terminated abruptly. Error: %r (cause: %r)", exc, exc.__cause__)
        return 1
    log.info("Execution terminated successfully")
    return 0