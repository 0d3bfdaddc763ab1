# tests/transport/test_memory_port.py
"""
retro_core_6502.transport.busモジュールの単体テスト。
"""
import pytest

from retro_core_6502.common.errors import OutOfRange
from retro_core_6502.transport.bus import BusAccess, BusAccessType, MemoryPort

# @intent:test_suite 呼び出し側のバイト配列を借用するメモリポートの読み書きと記録を検証します。


@pytest.fixture
def port():
    return MemoryPort(bytearray(16))


class TestMemoryPortReadWrite:
    # @intent:test_case_rw 境界内の読み書きが配列に反映されることを検証します。
    def test_read_write_within_bounds(self, port):
        port.write(0, 0x12)
        port.write(15, 0x34)
        assert port.read(0) == 0x12
        assert port.read(15) == 0x34
        assert port.memory[15] == 0x34

    def test_size_follows_backing_array(self):
        assert MemoryPort(bytearray(3)).size == 3
        assert MemoryPort([0] * 0x10000).size == 0x10000

    def test_list_backing_is_shared(self):
        memory = [0, 0, 0]
        port = MemoryPort(memory)
        port.write(1, 0xAB)
        assert memory[1] == 0xAB

    # @intent:test_case_oob 範囲外アクセスはOutOfRangeとなり、アドレスとサイズを保持することを検証します。
    def test_read_out_of_range(self, port):
        with pytest.raises(OutOfRange, match="out of range for memory of size 0x10") as exc:
            port.read(16)
        assert exc.value.address == 16
        assert exc.value.size == 16

    def test_write_out_of_range(self, port):
        with pytest.raises(OutOfRange):
            port.write(-1, 0x00)

    def test_out_of_range_is_index_error(self, port):
        with pytest.raises(IndexError):
            port.peek(100)

    # @intent:test_case_data 8bitを超える値の書き込みはValueErrorになることを検証します。
    def test_write_invalid_data(self, port):
        with pytest.raises(ValueError, match="is not an 8-bit value"):
            port.write(0, 0x100)
        with pytest.raises(ValueError):
            port.write(0, -1)


class TestMemoryPortWord:
    # @intent:test_case_word リトルエンディアンでワードを読むことを検証します。
    def test_read_word_little_endian(self, port):
        port.write(4, 0xAA)
        port.write(5, 0x55)
        assert port.read_word(4) == 0x55AA

    def test_read_word_high_byte_out_of_range(self, port):
        with pytest.raises(OutOfRange) as exc:
            port.read_word(15)
        assert exc.value.address == 16
        # 下位バイトも読まれていない
        assert port.get_and_clear_activity_log() == []


class TestMemoryPortActivityLog:
    # @intent:test_case_log 読み書きが順に記録され、取得でクリアされることを検証します。
    def test_activity_log_records_accesses(self, port):
        port.write(1, 0x42)
        port.read(1)
        log = port.get_and_clear_activity_log()
        assert log == [
            BusAccess(address=1, data=0x42, access_type=BusAccessType.WRITE),
            BusAccess(address=1, data=0x42, access_type=BusAccessType.READ),
        ]
        assert port.get_and_clear_activity_log() == []

    def test_peek_is_not_logged(self, port):
        port.memory[3] = 0x99
        assert port.peek(3) == 0x99
        assert port.get_and_clear_activity_log() == []

    def test_load_places_bytes_without_logging(self, port):
        port.read(0)
        port.load(2, [0xA9, 0x01])
        assert port.memory[2:4] == bytearray([0xA9, 0x01])
        log = port.get_and_clear_activity_log()
        assert len(log) == 1
        assert log[0].access_type == BusAccessType.READ

    def test_load_past_end_raises(self, port):
        with pytest.raises(OutOfRange):
            port.load(15, [0x01, 0x02])

    def test_failed_load_leaves_no_log_entries(self, port):
        port.read(0)
        with pytest.raises(OutOfRange):
            port.load(14, [0x01, 0x02, 0x03])
        # 範囲内に書けた2バイトの記録も残らない
        assert port.memory[14:16] == bytearray([0x01, 0x02])
        log = port.get_and_clear_activity_log()
        assert len(log) == 1
        assert log[0].access_type == BusAccessType.READ
