# tests/arch/mos6502/test_disassembler.py
"""
retro_core_6502.arch.mos6502.disassemblerモジュールの単体テスト。
"""
from retro_core_6502.transport.bus import MemoryPort
from retro_core_6502.arch.mos6502.disassembler import disassemble

# @intent:test_suite 逆アセンブル結果の書式と、状態を変化させないことを検証します。


def test_disassemble_listing(cpu, bus):
    bus.load(0x0200, [
        0xA9, 0x10,        # LDA #$10
        0x9D, 0x00, 0x30,  # STA $3000,X
        0xB1, 0x20,        # LDA ($20),Y
        0xD0, 0xF7,        # BNE $0200
        0x0A,              # ASL A
        0x02,              # undefined
        0x6C, 0xFC, 0xFF,  # JMP ($FFFC)
    ])
    listing = cpu.disassemble(0x0200, 14)
    assert listing == [
        (0x0200, "A9 10", "LDA #$10"),
        (0x0202, "9D 00 30", "STA $3000,X"),
        (0x0205, "B1 20", "LDA ($20),Y"),
        (0x0207, "D0 F7", "BNE $0200"),
        (0x0209, "0A", "ASL A"),
        (0x020A, "02", ".byte $02"),
        (0x020B, "6C FC FF", "JMP ($FFFC)"),
    ]


# @intent:test_case_pure 逆アセンブルはレジスタ、サイクル、バスログを変化させないことを検証します。
def test_disassemble_does_not_touch_state(cpu, bus):
    bus.load(0x0000, [0xEA, 0xEA])
    before = cpu.get_state()
    cpu.disassemble(0x0000, 2)
    assert cpu.get_state() == before
    assert cpu.cycle_count == 0
    assert bus.get_and_clear_activity_log() == []


def test_truncated_instruction_at_end_is_data():
    port = MemoryPort([0xEA, 0xAD, 0x00])
    assert disassemble(port, 0, 10) == [
        (0, "EA", "NOP"),
        (1, "AD", ".byte $AD"),
        (2, "00", "BRK"),
    ]
