# tests/debugger/test_debugger.py
"""
retro_core_6502.debugger.debuggerモジュールの単体テスト。
Debuggerの実行制御、ブレークポイント管理、および条件チェック機能を検証します。
"""
import logging

import pytest

from retro_core_6502.transport.bus import MemoryPort
from retro_core_6502.arch.mos6502.cpu import Mos6502Cpu
from retro_core_6502.debugger.debugger import Debugger, BreakpointCondition, BreakpointConditionType

# @intent:test_suite デバッガのブレークポイントと実行制御機能の検証。

# $0200: LDX #$00
# $0202: INX
# $0203: STX $10
# $0205: CPX #$05
# $0207: BNE $0202
# $0209: NOP
LOOP_PROGRAM = [0xA2, 0x00, 0xE8, 0x86, 0x10, 0xE0, 0x05, 0xD0, 0xF9, 0xEA]


class TestDebugger:
    @pytest.fixture
    def setup_debugger(self):
        bus = MemoryPort(bytearray(0x10000))
        bus.load(0x0200, LOOP_PROGRAM)
        cpu = Mos6502Cpu(bus)
        cpu.registers.pc = 0x0200
        debugger = Debugger(cpu)
        return debugger, cpu, bus

    # @intent:test_case_add_remove_breakpoint ブレークポイントの追加と削除が正しく行われることを検証します。
    def test_add_remove_breakpoint(self, setup_debugger):
        debugger, _, _ = setup_debugger
        bp1 = BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x1000)
        bp2 = BreakpointCondition(BreakpointConditionType.MEMORY_WRITE, address=0x2000)

        debugger.add_breakpoint(bp1)
        debugger.add_breakpoint(bp2)
        debugger.add_breakpoint(bp1)  # 重複追加は無視される
        assert debugger.get_breakpoints() == [bp1, bp2]

        debugger.remove_breakpoint(bp1)
        debugger.remove_breakpoint(bp1)  # 存在しないブレークポイントの削除はエラーにならない
        assert debugger.get_breakpoints() == [bp2]

    # @intent:test_case_step_instruction step_instructionが履歴を記録することを検証します。
    def test_step_instruction_records_history(self, setup_debugger):
        debugger, cpu, _ = setup_debugger
        snapshot = debugger.step_instruction()
        assert snapshot.operation.mnemonic == "LDX"
        assert debugger.get_history() == [snapshot]
        assert debugger.get_last_snapshot() is snapshot
        assert cpu.registers.pc == 0x0202

    # @intent:test_case_pc_match PC一致のブレークポイントで命令実行前に停止することを検証します。
    def test_run_stops_on_pc_match(self, setup_debugger):
        debugger, cpu, _ = setup_debugger
        bp = BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x0209)
        debugger.add_breakpoint(bp)

        assert debugger.run() is bp
        assert cpu.registers.pc == 0x0209
        assert cpu.registers.x == 5

    def test_run_steps_over_breakpoint_at_start(self, setup_debugger):
        debugger, cpu, _ = setup_debugger
        bp = BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x0202)
        debugger.add_breakpoint(bp)

        assert debugger.run() is bp
        assert cpu.registers.x == 0
        # 開始位置と同じPCのブレークポイントは無視され、次の周回で停止する
        assert debugger.run() is bp
        assert cpu.registers.x == 1

    def test_disabled_breakpoint_is_ignored(self, setup_debugger):
        debugger, cpu, _ = setup_debugger
        debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x0202, enabled=False))
        assert debugger.run(max_steps=22) is None
        assert cpu.registers.pc == 0x020A
        assert cpu.registers.x == 5

    # @intent:test_case_memory_write メモリ書き込み条件で、書き込んだ命令の直後に停止することを検証します。
    def test_run_stops_on_memory_write(self, setup_debugger):
        debugger, cpu, bus = setup_debugger
        bp = BreakpointCondition(BreakpointConditionType.MEMORY_WRITE, address=0x0010)
        debugger.add_breakpoint(bp)

        assert debugger.run() is bp
        assert cpu.registers.pc == 0x0205
        assert bus.peek(0x0010) == 1

    def test_run_stops_on_memory_read(self, setup_debugger):
        debugger, cpu, bus = setup_debugger
        bus.load(0x0209, [0xA5, 0x10])  # LDA $10
        bp = BreakpointCondition(BreakpointConditionType.MEMORY_READ, address=0x0010)
        debugger.add_breakpoint(bp)

        assert debugger.run() is bp
        assert cpu.registers.a == 5

    def test_run_stops_on_register_value(self, setup_debugger):
        debugger, cpu, _ = setup_debugger
        bp = BreakpointCondition(BreakpointConditionType.REGISTER_VALUE, register_name="x", value=3)
        debugger.add_breakpoint(bp)

        assert debugger.run() is bp
        assert cpu.registers.x == 3
        assert cpu.registers.pc == 0x0203

    def test_run_stops_on_register_change(self, setup_debugger):
        debugger, cpu, _ = setup_debugger
        bp = BreakpointCondition(BreakpointConditionType.REGISTER_CHANGE, register_name="x")
        debugger.add_breakpoint(bp)

        # LDX #$00 はXを変えないので、最初のINXで停止する
        assert debugger.run() is bp
        assert cpu.registers.x == 1
        assert len(debugger.get_history()) == 2

    # @intent:test_case_stop run()の前に出した停止要求で、命令を実行せずに戻ることを検証します。
    def test_stop_before_run(self, setup_debugger):
        debugger, cpu, _ = setup_debugger
        debugger.stop()
        assert debugger.run() is None
        assert cpu.registers.pc == 0x0200
        assert debugger.get_history() == []
        # 要求は消費済み
        assert debugger.run(max_steps=2) is None
        assert cpu.registers.pc == 0x0203

    # @intent:test_case_history 履歴は上限数を超えると古いものから捨てられることを検証します。
    def test_history_is_bounded(self, setup_debugger):
        _, cpu, _ = setup_debugger
        debugger = Debugger(cpu, history_limit=3)
        debugger.run(max_steps=5)
        history = debugger.get_history()
        assert [s.metadata.address for s in history] == [0x0203, 0x0205, 0x0207]
        assert history[-1] is debugger.get_last_snapshot()

    def test_history_disabled(self, setup_debugger):
        _, cpu, _ = setup_debugger
        debugger = Debugger(cpu, history_limit=0)
        snapshot = debugger.step_instruction()
        assert debugger.get_history() == []
        assert debugger.get_last_snapshot() is snapshot

    def test_run_respects_step_budget(self, setup_debugger):
        debugger, _, _ = setup_debugger
        assert debugger.run(max_steps=3) is None
        assert len(debugger.get_history()) == 3

    def test_run_stops_at_end_of_memory(self):
        cpu = Mos6502Cpu(MemoryPort([0xEA, 0xEA]))
        debugger = Debugger(cpu)
        assert debugger.run() is None
        assert cpu.registers.pc == 2

    def test_breakpoint_hit_is_logged(self, setup_debugger, caplog):
        debugger, _, _ = setup_debugger
        debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x0209))
        with caplog.at_level(logging.INFO, logger="retro_core_6502"):
            debugger.run()
        assert "Breakpoint hit at PC: 0x0209" in caplog.text
