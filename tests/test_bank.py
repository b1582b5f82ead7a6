import struct

import pytest

from rustyworld.bank import BankError, read_bank, unpack
from rustyworld.mem_entry import MemEntry


def _word(bits):
    value = 0
    for position, bit in enumerate(bits):
        value |= bit << position
    return value


def _encode(bits, datasize):
    """Lay out a bit sequence the way the unpacker consumes it."""
    first, rest = bits[:31], bits[31:]
    words = [datasize, 0, _word(first) | (1 << len(first))]
    words.extend(_word(rest[start:start + 32]) for start in range(0, len(rest), 32))
    return b"".join(struct.pack(">I", word) for word in reversed(words))


def _byte_bits(value):
    return [(value >> shift) & 1 for shift in range(7, -1, -1)]


def _literal_short(data):
    # prefix 00, three-bit length, then the bytes
    length = len(data) - 1
    bits = [0, 0] + [(length >> shift) & 1 for shift in (2, 1, 0)]
    for value in data:
        bits += _byte_bits(value)
    return bits


def test_unpack_single_literal():
    packed = _encode(_literal_short(b"A"), 1)
    assert unpack(packed) == b"A"


def test_unpack_literal_is_reversed():
    packed = _encode(_literal_short(b"xyz"), 3)
    assert unpack(packed) == b"zyx"


def test_unpack_short_reference_copies_earlier_output():
    bits = _literal_short(b"\x01\x02")
    bits += [0, 1] + _byte_bits(2)  # copy two bytes starting two back
    packed = _encode(bits, 4)
    assert unpack(packed) == bytes(reversed(b"\x01\x02\x01\x02"))


def test_unpack_long_literal_spans_several_words():
    data = b"ABCDEFGHI"
    bits = [1, 1, 1] + _byte_bits(len(data) - 9)
    for value in data:
        bits += _byte_bits(value)
    packed = _encode(bits, len(data))
    assert len(bits) > 31
    assert unpack(packed) == data[::-1]


def test_unpack_truncated_header_raises():
    with pytest.raises(BankError):
        unpack(b"\x00\x00")


def test_unpack_runs_out_of_words_raises():
    # header claims data but the bit stream ends immediately
    packed = struct.pack(">III", 1, 0, 100)
    with pytest.raises(BankError):
        unpack(packed)


def test_read_bank_unpacked(tmp_path):
    (tmp_path / "bank01").write_bytes(b"xxxHELLOyyy")
    entry = MemEntry(bank_id=1, bank_offset=3, packed_size=5, size=5)
    assert read_bank(tmp_path, entry) == b"HELLO"


def test_read_bank_uses_hex_file_name(tmp_path):
    (tmp_path / "bank1a").write_bytes(b"data")
    entry = MemEntry(bank_id=0x1A, bank_offset=0, packed_size=4, size=4)
    assert read_bank(str(tmp_path), entry) == b"data"


def test_read_bank_packed(tmp_path):
    packed = _encode(_literal_short(b"abc"), 3)
    (tmp_path / "bank02").write_bytes(b"\x00" * 8 + packed)
    entry = MemEntry(bank_id=2, bank_offset=8, packed_size=len(packed), size=3)
    assert read_bank(tmp_path, entry) == b"cba"


def test_read_bank_missing_file(tmp_path):
    entry = MemEntry(bank_id=9, bank_offset=0, packed_size=1, size=1)
    with pytest.raises(BankError):
        read_bank(tmp_path, entry)


def test_read_bank_short_file(tmp_path):
    (tmp_path / "bank03").write_bytes(b"abc")
    entry = MemEntry(bank_id=3, bank_offset=1, packed_size=10, size=10)
    with pytest.raises(BankError):
        read_bank(tmp_path, entry)