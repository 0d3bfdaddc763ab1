# tests/arch/mos6502/test_registers.py
"""
retro_core_6502.arch.mos6502.stateモジュールの単体テスト。
"""
import pytest

from retro_core_6502.arch.mos6502.state import (
    FLAG_B, FLAG_C, FLAG_N, FLAG_R, RegisterFile, RegisterSnapshot, StatusRegister,
)

# @intent:test_suite ステータスレジスタとレジスタファイルの初期状態とマスク処理を検証します。


class TestStatusRegister:
    # @intent:test_case_reset リセット後は予約ビットRのみがセットされることを検証します。
    def test_reset_sets_only_reserved(self):
        p = StatusRegister(0xFF)
        p.reset()
        assert p.value == 0x20
        assert p.flag_r
        assert not p.flag_c

    def test_default_construction_is_reset(self):
        assert StatusRegister().value == 0x20
        assert StatusRegister(None).value == 0x20
        assert StatusRegister(0).value == 0

    def test_flag_positions(self):
        p = StatusRegister(0)
        p.set_flag(FLAG_C)
        p.set_flag(FLAG_N)
        assert p.value == 0x81
        p.clear_flag(FLAG_C)
        assert p.value == 0x80
        assert p.get_flag(FLAG_N) == 1
        assert p.get_flag(FLAG_B) == 0

    # @intent:test_case_chain フラグ操作をチェーンして期待値を組み立てられることを検証します。
    def test_chaining_helpers(self):
        expected = StatusRegister().set_carry().set_zero().clear_negative().set_overflow()
        assert expected.value == 0x20 | 0x01 | 0x02 | 0x40

    def test_copy_is_independent(self):
        p = StatusRegister()
        q = p.copy()
        q.set_decimal()
        assert not p.flag_d
        assert q.flag_d
        assert p != q

    def test_value_assignment_is_verbatim(self):
        p = StatusRegister()
        p.value = 0x00
        assert not p.get_flag(FLAG_R)
        p.value = 0x1FF
        assert p.value == 0xFF

    # @intent:test_case_render 診断用のフラグ表示（N V R B D I Z C、クリアは'_'）を検証します。
    @pytest.mark.parametrize("value,text", [
        (0x20, "__R_____"),
        (0xFF, "NVRBDIZC"),
        (0x2D, "__R_DI_C"),
        (0x00, "________"),
    ])
    def test_render(self, value, text):
        assert StatusRegister(value).render() == text
        assert str(StatusRegister(value)) == text


class TestRegisterFile:
    def test_initial_state(self):
        regs = RegisterFile()
        assert (regs.pc, regs.a, regs.x, regs.y, regs.s) == (0, 0, 0, 0, 0xFF)
        assert regs.p.value == 0x20
        assert regs.stack_address == 0x01FF

    # @intent:test_case_mask 代入時に幅でマスクされることを検証します。
    def test_registers_are_masked(self):
        regs = RegisterFile()
        regs.a = 0x1FF
        regs.x = -1
        regs.pc = 0xFFFF + 1
        regs.s = 0x100
        assert regs.a == 0xFF
        assert regs.x == 0xFF
        assert regs.pc == 0x0000
        assert regs.s == 0x00

    def test_snapshot_does_not_alias(self):
        regs = RegisterFile()
        regs.a = 0x12
        regs.p.set_carry()
        snap = regs.snapshot()
        regs.a = 0x34
        regs.p.clear_carry()
        assert snap == RegisterSnapshot(pc=0, a=0x12, x=0, y=0, s=0xFF, p=0x21)
        assert snap.flag_c

    def test_restore(self):
        regs = RegisterFile()
        regs.restore(RegisterSnapshot(pc=0x1234, a=1, x=2, y=3, s=0x80, p=0xC3))
        assert regs.pc == 0x1234
        assert (regs.a, regs.x, regs.y, regs.s) == (1, 2, 3, 0x80)
        assert regs.p.flag_n and regs.p.flag_v and regs.p.flag_z and regs.p.flag_c
        assert not regs.p.get_flag(FLAG_R)
