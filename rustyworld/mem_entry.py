"""Entries of the memory list that locate resources inside bank files."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import BinaryIO

_ENTRY_FORMAT = struct.Struct(">BBHHBBIHHHH")
ENTRY_SIZE = _ENTRY_FORMAT.size


class MemEntryError(Exception):
    """A memory-list entry could not be read."""


@dataclass(frozen=True)
class MemEntry:
    """Where a resource lives and how large it is, packed and unpacked."""

    bank_id: int
    bank_offset: int
    packed_size: int
    size: int

    @classmethod
    def from_reader(cls, reader: BinaryIO) -> MemEntry:
        """Read one big-endian memory-list record from ``reader``."""
        raw = reader.read(ENTRY_SIZE)
        if len(raw) < ENTRY_SIZE:
            raise MemEntryError("Error while reading the underlying stream")
        (
            _state,
            _kind,
            _buffer,
            _unused,
            _rank,
            bank_id,
            bank_offset,
            _unused_2,
            packed_size,
            _unused_3,
            size,
        ) = _ENTRY_FORMAT.unpack(raw)
        return cls(
            bank_id=bank_id,
            bank_offset=bank_offset,
            packed_size=packed_size,
            size=size,
        )