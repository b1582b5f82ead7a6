"""Reading resources from bank files, unpacking compressed ones."""

from __future__ import annotations

import io
from os import PathLike
from pathlib import Path

from .mem_entry import MemEntry


class BankError(Exception):
    """A bank file could not be opened, read or unpacked."""


class _Unpacker:
    """Bit-stream decoder for packed bank data."""

    def __init__(self, data: bytes) -> None:
        # Packed data is consumed from its end, four bytes at a time.
        chunks = [data[start:start + 4] for start in range(0, len(data), 4)]
        self._stream = io.BytesIO(b"".join(reversed(chunks)))
        self._crc = 0
        self._chk = 0
        self._datasize = 0

    def _read_word(self, *, signed: bool = False) -> int:
        raw = self._stream.read(4)
        if len(raw) < 4:
            raise BankError("IO error while reading bank: packed data truncated")
        return int.from_bytes(raw, "big", signed=signed)

    def _rcr(self, carry: bool) -> int:
        lsb = self._chk & 1
        self._chk >>= 1
        if carry:
            self._chk |= 0x80000000
        return lsb

    def _next_bit(self) -> int:
        lsb = self._rcr(False)
        if self._chk == 0:
            self._chk = self._read_word()
            self._crc ^= self._chk
            lsb = self._rcr(True)
        return lsb

    def _code(self, bit_length: int) -> int:
        code = 0
        for _ in range(bit_length):
            code = ((code << 1) | self._next_bit()) & 0xFFFF
        return code

    def _decode_literal(self, bit_length: int, additional: int, output: bytearray) -> None:
        length = self._code(bit_length) + additional + 1
        output.extend(self._code(8) for _ in range(length))
        self._datasize -= length

    def _decode_reference(self, bit_length: int, length: int, output: bytearray) -> None:
        offset = ((len(output) & 0xFFFF) - self._code(bit_length)) & 0xFFFF
        for step in range(length):
            index = (offset + step) & 0xFFFF
            output.append(output[index] if index < len(output) else 0)
        self._datasize -= length

    def unpack(self) -> bytes:
        self._datasize = self._read_word(signed=True)
        self._crc = self._read_word()
        self._chk = self._read_word()
        self._crc ^= self._chk

        output = bytearray()
        while self._datasize > 0:
            if self._next_bit() == 0:
                if self._next_bit() == 0:
                    self._decode_literal(3, 0, output)
                else:
                    self._decode_reference(8, 2, output)
                continue
            code = self._code(2)
            if code == 3:
                self._decode_literal(8, 8, output)
            elif code < 2:
                self._decode_reference(code + 9, code + 3, output)
            else:
                length = self._code(8) + 1
                self._decode_reference(12, length, output)

        output.reverse()
        return bytes(output)


def unpack(data: bytes) -> bytes:
    """Unpack a compressed resource exactly as it is stored in a bank file."""
    return _Unpacker(bytes(data)).unpack()


def read_bank(data_dir: str | PathLike[str], mem_entry: MemEntry) -> bytes:
    """Load the resource described by ``mem_entry`` from its bank file."""
    path = Path(data_dir) / f"bank{mem_entry.bank_id:02x}"
    try:
        bank_file = open(path, "rb")
    except OSError as exc:
        raise BankError(f"Error while opening bank file {path}") from exc

    with bank_file:
        try:
            bank_file.seek(mem_entry.bank_offset)
            data = bank_file.read(mem_entry.packed_size)
        except OSError as exc:
            raise BankError("IO error while reading bank") from exc

    if len(data) < mem_entry.packed_size:
        raise BankError("IO error while reading bank: unexpected end of file")

    if mem_entry.packed_size == mem_entry.size:
        return data
    return unpack(data)