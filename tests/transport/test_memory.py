# tests/transport/test_memory.py
"""
reg16_vm.transport.memoryモジュールの単体テスト。
"""
import pytest
from reg16_vm.transport.memory import WordMemory, MemoryAccessType

# @intent:test_suite ワードメモリの基本的な機能とエラーハンドリングを検証します。

class TestWordMemory:
    """
    WordMemoryの単体テスト。
    """
    # @intent:test_case_init 正しい容量で初期化され、全セルが0であることを検証します。
    def test_init_valid_capacity(self):
        memory = WordMemory(16)
        assert memory.get_size() == 16
        assert len(memory) == 16
        assert memory.dump() == [0] * 16

    # @intent:test_case_init 無効な容量でValueErrorが発生することを検証します。
    def test_init_invalid_capacity(self):
        with pytest.raises(ValueError, match="Memory capacity must be a positive integer."):
            WordMemory(0)
        with pytest.raises(ValueError, match="Memory capacity must be a positive integer."):
            WordMemory(-1)
        with pytest.raises(ValueError, match="Memory capacity must be a positive integer."):
            WordMemory(1.5)
        with pytest.raises(ValueError, match="exceeds the maximum"):
            WordMemory(0x10000)

    def test_read_write_within_bounds(self):
        memory = WordMemory(4)
        memory.write(0, 0x1234)
        memory.write(3, 0xFFFF)
        assert memory.read(0) == 0x1234
        assert memory.read(3) == 0xFFFF
        assert memory.peek(1) == 0

    # @intent:test_case_oob 境界外アドレスへのアクセス時にIndexErrorが発生することを検証します。
    def test_read_write_out_of_bounds(self):
        memory = WordMemory(4)
        with pytest.raises(IndexError, match="Address 4 out of bounds for memory of size 4."):
            memory.read(4)
        with pytest.raises(IndexError, match="Address -1 out of bounds for memory of size 4."):
            memory.write(-1, 0)
        with pytest.raises(IndexError):
            memory.peek(4)

    # @intent:test_case_data 16bitを超える値の書き込みでValueErrorが発生することを検証します。
    def test_write_invalid_data(self):
        memory = WordMemory(1)
        with pytest.raises(ValueError, match="Data 65536 is not a 16-bit value."):
            memory.write(0, 0x10000)
        with pytest.raises(ValueError, match="Data -1 is not a 16-bit value."):
            memory.load(0, -1)
        assert memory.peek(0) == 0

    # @intent:test_case_log 読み書きがログに記録され、peek/loadは記録されないことを検証します。
    def test_activity_log(self):
        memory = WordMemory(8)
        memory.load(2, 0x00AA)
        memory.write(2, 0x00BB)
        memory.read(2)
        memory.peek(2)

        log = memory.get_and_clear_activity_log()
        assert len(log) == 2
        assert log[0].access_type == MemoryAccessType.WRITE
        assert log[0].address == 2
        assert log[0].data == 0x00BB
        assert log[0].previous_data == 0x00AA
        assert log[1].access_type == MemoryAccessType.READ
        assert log[1].data == 0x00BB
        assert log[1].previous_data is None

        assert memory.get_and_clear_activity_log() == []

    def test_load_block(self):
        memory = WordMemory(8)
        memory.load_block(5, [1, 2, 3])
        assert memory.dump() == [0, 0, 0, 0, 0, 1, 2, 3]
        assert memory.get_and_clear_activity_log() == []

    def test_load_block_does_not_fit(self):
        memory = WordMemory(8)
        with pytest.raises(IndexError, match="does not fit"):
            memory.load_block(6, [1, 2, 3])
        assert memory.dump() == [0] * 8

    # @intent:test_case_atomic_block 不正な値を含むブロックは1ワードも書き込まれないことを検証します。
    def test_load_block_invalid_value_writes_nothing(self):
        memory = WordMemory(8)
        with pytest.raises(ValueError, match="not a 16-bit value"):
            memory.load_block(0, [1, 2, 0x10000, 4])
        assert memory.dump() == [0] * 8

    def test_clear(self):
        memory = WordMemory(4)
        memory.write(1, 7)
        memory.clear()
        assert memory.dump() == [0, 0, 0, 0]
        assert memory.get_and_clear_activity_log() == []
