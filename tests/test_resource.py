import struct

import pytest

from rustyworld.parts import GamePart
from rustyworld.resource import NUM_MEM_ENTRIES, ResourceError, ResourceRegistry

BLOCK = 4


def _record(bank_id, offset, packed, size):
    return struct.pack(">BBHHBBIHHHH", 0, 0, 0, 0, 0, bank_id, offset, 0, packed, 0, size)


@pytest.fixture
def data_dir(tmp_path):
    memlist = b"".join(
        _record(1, index * BLOCK, BLOCK, BLOCK) for index in range(NUM_MEM_ENTRIES)
    )
    (tmp_path / "memlist.bin").write_bytes(memlist)
    bank = b"".join(bytes([index]) * BLOCK for index in range(NUM_MEM_ENTRIES))
    (tmp_path / "bank01").write_bytes(bank)
    return tmp_path


def test_read_entries_loads_full_list(data_dir):
    registry = ResourceRegistry(data_dir)
    registry.read_entries()
    assert len(registry.mem_list) == NUM_MEM_ENTRIES
    assert registry.mem_list[5].bank_offset == 5 * BLOCK


def test_load_entry_returns_bank_data(data_dir):
    registry = ResourceRegistry(str(data_dir))
    registry.read_entries()
    assert registry.load_entry(7) == bytes([7]) * BLOCK


def test_setup_part_without_polygon(data_dir):
    registry = ResourceRegistry(data_dir)
    registry.read_entries()
    part = registry.setup_part(GamePart.ONE)
    assert part.palette.getvalue() == bytes([0x14]) * BLOCK
    assert part.bytecode.getvalue() == bytes([0x15]) * BLOCK
    assert part.cinematic.getvalue() == bytes([0x16]) * BLOCK
    assert part.polygon is None


def test_setup_part_with_polygon(data_dir):
    registry = ResourceRegistry(data_dir)
    registry.read_entries()
    part = registry.setup_part(GamePart.THREE)
    assert part.polygon.getvalue() == bytes([0x11]) * BLOCK


def test_setup_part_unknown_part(data_dir):
    registry = ResourceRegistry(data_dir)
    registry.read_entries()
    with pytest.raises(ValueError):
        registry.setup_part(0x10)


def test_read_entries_missing_memlist(tmp_path):
    with pytest.raises(ResourceError):
        ResourceRegistry(tmp_path).read_entries()


def test_read_entries_truncated_memlist(tmp_path):
    (tmp_path / "memlist.bin").write_bytes(_record(1, 0, 1, 1) * 3)
    registry = ResourceRegistry(tmp_path)
    with pytest.raises(ResourceError):
        registry.read_entries()
    assert registry.mem_list == []


def test_load_entry_missing_bank(data_dir):
    (data_dir / "bank01").unlink()
    registry = ResourceRegistry(data_dir)
    registry.read_entries()
    with pytest.raises(ResourceError):
        registry.load_entry(0)