"""The memory list and loading of game parts from bank files."""

from __future__ import annotations

from os import PathLike
from pathlib import Path

from .bank import BankError, read_bank
from .loaded import LoadedPart, LoadedPartError
from .mem_entry import MemEntry, MemEntryError
from .parts import GamePart, segment_indices

NUM_MEM_ENTRIES = 146


class ResourceError(Exception):
    """A resource could not be found, read or assembled."""


class ResourceRegistry:
    """Knows where every resource is and loads it on request."""

    def __init__(self, data_dir: str | PathLike[str]) -> None:
        self.data_dir = Path(data_dir)
        self.mem_list: list[MemEntry] = []

    def read_entries(self) -> None:
        """Read the memory list from ``memlist.bin`` in the data directory."""
        path = self.data_dir / "memlist.bin"
        try:
            memlist = open(path, "rb")
        except OSError as exc:
            raise ResourceError(f"Error opening memlist file {path}") from exc
        with memlist:
            try:
                entries = [MemEntry.from_reader(memlist) for _ in range(NUM_MEM_ENTRIES)]
            except MemEntryError as exc:
                raise ResourceError("Error while creating MemEntry") from exc
        self.mem_list.extend(entries)

    def load_entry(self, index: int) -> bytes:
        """Return the unpacked data of memory-list entry ``index``."""
        entry = self.mem_list[index]
        try:
            return read_bank(self.data_dir, entry)
        except BankError as exc:
            raise ResourceError("Error while processing bank data") from exc

    def setup_part(self, game_part: GamePart | int) -> LoadedPart:
        """Load every segment of ``game_part``."""
        segment_data = {
            segment: self.load_entry(index)
            for segment, index in segment_indices(game_part).items()
            if index != 0
        }
        try:
            return LoadedPart.from_segments(segment_data)
        except LoadedPartError as exc:
            raise ResourceError("Error while loading game part") from exc