# tests/transport/test_memory.py
"""
chip8_tracer.transport.memoryモジュールの単体テスト。
"""
import pytest

from chip8_tracer.core.errors import OutOfBoundsError
from chip8_tracer.transport.memory import Memory, MemoryAccess, MemoryAccessType, MEMORY_SIZE

# @intent:test_suite 範囲チェック付きメモリとアクセスログの検証。

class TestMemory:
    @pytest.fixture
    def memory(self):
        return Memory()

    def test_default_size_and_zeroed(self, memory):
        assert memory.get_size() == MEMORY_SIZE == 4096
        assert len(memory) == 4096
        assert all(memory.peek(addr) == 0 for addr in range(0, 4096, 97))

    def test_read_write_logged(self, memory):
        memory.write(0x123, 0xAB)
        assert memory.read(0x123) == 0xAB
        log = memory.get_and_clear_activity_log()
        assert log == [
            MemoryAccess(0x123, 0xAB, MemoryAccessType.WRITE),
            MemoryAccess(0x123, 0xAB, MemoryAccessType.READ),
        ]
        assert memory.get_and_clear_activity_log() == []

    # @intent:test_case_peek peekとインデックスアクセスはログに残らないことを検証します。
    def test_peek_and_item_access_not_logged(self, memory):
        memory[0x200] = 0x12
        assert memory[0x200] == 0x12
        assert memory.peek(0x200) == 0x12
        assert memory.get_and_clear_activity_log() == []

    @pytest.mark.parametrize("address", [-1, 4096, 0x10000])
    def test_out_of_bounds(self, memory, address):
        with pytest.raises(OutOfBoundsError):
            memory.read(address)
        with pytest.raises(OutOfBoundsError):
            memory.write(address, 0)
        # OutOfBoundsError is also an IndexError
        with pytest.raises(IndexError):
            memory.peek(address)

    def test_write_rejects_non_byte(self, memory):
        with pytest.raises(ValueError):
            memory.write(0, 0x100)
        with pytest.raises(ValueError):
            memory[0] = -1

    def test_load_image(self, memory):
        assert memory.load(0x100, b"\x80\x14\x00\xEE") == 4
        assert [memory.peek(a) for a in range(0x100, 0x104)] == [0x80, 0x14, 0x00, 0xEE]
        assert memory.get_and_clear_activity_log() == []

    def test_load_image_past_end(self, memory):
        with pytest.raises(OutOfBoundsError):
            memory.load(0xFFF, b"\x00\x00")
        assert memory.load(0xFFE, b"\x12\x34") == 2

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            Memory(0)
