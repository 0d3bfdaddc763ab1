# src/retro_core_6502/arch/mos6502/instructions/maps.py
"""
MOS 6502 命令マップ。

オペコード1バイトから (ニーモニック, アドレッシングモード, 実行関数, 基本サイクル数,
ページ境界交差時の+1サイクル有無) への不変の対応表です。
"""
from types import MappingProxyType
from typing import Callable, Mapping, NamedTuple, Optional

from retro_core_6502.transport.bus import MemoryPort
from retro_core_6502.arch.mos6502.state import RegisterFile
from retro_core_6502.arch.mos6502.instructions import load, alu, control
from retro_core_6502.arch.mos6502.instructions.base import AddressingMode, AddressingResult

# Execution Function Type (戻り値は追加サイクル数。Noneは0とみなす)
ExecFunc = Callable[[RegisterFile, MemoryPort, AddressingResult], Optional[int]]

IMP = AddressingMode.IMPLIED
ACC = AddressingMode.ACCUMULATOR
IMM = AddressingMode.IMMEDIATE
ZP = AddressingMode.ZERO_PAGE
ZPX = AddressingMode.ZERO_PAGE_X
ZPY = AddressingMode.ZERO_PAGE_Y
ABS = AddressingMode.ABSOLUTE
ABX = AddressingMode.ABSOLUTE_X
ABY = AddressingMode.ABSOLUTE_Y
IND = AddressingMode.INDIRECT
IZX = AddressingMode.INDEXED_INDIRECT
IZY = AddressingMode.INDIRECT_INDEXED
REL = AddressingMode.RELATIVE


# @intent:responsibility 1オペコード分の命令定義。
# page_penalty: 実効アドレスがページを跨いだ場合に+1サイクルするか（読み出し系命令のみ）。
class OpcodeEntry(NamedTuple):
    mnemonic: str
    mode: AddressingMode
    execute: ExecFunc
    cycles: int
    page_penalty: bool = False


_OPCODES = {
    # --- Load/Store/Transfer ---
    0xA9: OpcodeEntry("LDA", IMM, load.lda, 2),
    0xA5: OpcodeEntry("LDA", ZP, load.lda, 3),
    0xB5: OpcodeEntry("LDA", ZPX, load.lda, 4),
    0xAD: OpcodeEntry("LDA", ABS, load.lda, 4),
    0xBD: OpcodeEntry("LDA", ABX, load.lda, 4, True),
    0xB9: OpcodeEntry("LDA", ABY, load.lda, 4, True),
    0xA1: OpcodeEntry("LDA", IZX, load.lda, 6),
    0xB1: OpcodeEntry("LDA", IZY, load.lda, 5, True),

    0xA2: OpcodeEntry("LDX", IMM, load.ldx, 2),
    0xA6: OpcodeEntry("LDX", ZP, load.ldx, 3),
    0xB6: OpcodeEntry("LDX", ZPY, load.ldx, 4),
    0xAE: OpcodeEntry("LDX", ABS, load.ldx, 4),
    0xBE: OpcodeEntry("LDX", ABY, load.ldx, 4, True),

    0xA0: OpcodeEntry("LDY", IMM, load.ldy, 2),
    0xA4: OpcodeEntry("LDY", ZP, load.ldy, 3),
    0xB4: OpcodeEntry("LDY", ZPX, load.ldy, 4),
    0xAC: OpcodeEntry("LDY", ABS, load.ldy, 4),
    0xBC: OpcodeEntry("LDY", ABX, load.ldy, 4, True),

    # Store系は常に最悪ケースのサイクル数
    0x85: OpcodeEntry("STA", ZP, load.sta, 3),
    0x95: OpcodeEntry("STA", ZPX, load.sta, 4),
    0x8D: OpcodeEntry("STA", ABS, load.sta, 4),
    0x9D: OpcodeEntry("STA", ABX, load.sta, 5),
    0x99: OpcodeEntry("STA", ABY, load.sta, 5),
    0x81: OpcodeEntry("STA", IZX, load.sta, 6),
    0x91: OpcodeEntry("STA", IZY, load.sta, 6),

    0x86: OpcodeEntry("STX", ZP, load.stx, 3),
    0x96: OpcodeEntry("STX", ZPY, load.stx, 4),
    0x8E: OpcodeEntry("STX", ABS, load.stx, 4),

    0x84: OpcodeEntry("STY", ZP, load.sty, 3),
    0x94: OpcodeEntry("STY", ZPX, load.sty, 4),
    0x8C: OpcodeEntry("STY", ABS, load.sty, 4),

    0xAA: OpcodeEntry("TAX", IMP, load.tax, 2),
    0xA8: OpcodeEntry("TAY", IMP, load.tay, 2),
    0x8A: OpcodeEntry("TXA", IMP, load.txa, 2),
    0x98: OpcodeEntry("TYA", IMP, load.tya, 2),
    0x9A: OpcodeEntry("TXS", IMP, load.txs, 2),
    0xBA: OpcodeEntry("TSX", IMP, load.tsx, 2),

    # --- ALU Operations ---
    0x69: OpcodeEntry("ADC", IMM, alu.adc, 2),
    0x65: OpcodeEntry("ADC", ZP, alu.adc, 3),
    0x75: OpcodeEntry("ADC", ZPX, alu.adc, 4),
    0x6D: OpcodeEntry("ADC", ABS, alu.adc, 4),
    0x7D: OpcodeEntry("ADC", ABX, alu.adc, 4, True),
    0x79: OpcodeEntry("ADC", ABY, alu.adc, 4, True),
    0x61: OpcodeEntry("ADC", IZX, alu.adc, 6),
    0x71: OpcodeEntry("ADC", IZY, alu.adc, 5, True),

    0xE9: OpcodeEntry("SBC", IMM, alu.sbc, 2),
    0xE5: OpcodeEntry("SBC", ZP, alu.sbc, 3),
    0xF5: OpcodeEntry("SBC", ZPX, alu.sbc, 4),
    0xED: OpcodeEntry("SBC", ABS, alu.sbc, 4),
    0xFD: OpcodeEntry("SBC", ABX, alu.sbc, 4, True),
    0xF9: OpcodeEntry("SBC", ABY, alu.sbc, 4, True),
    0xE1: OpcodeEntry("SBC", IZX, alu.sbc, 6),
    0xF1: OpcodeEntry("SBC", IZY, alu.sbc, 5, True),

    0xC9: OpcodeEntry("CMP", IMM, alu.cmp, 2),
    0xC5: OpcodeEntry("CMP", ZP, alu.cmp, 3),
    0xD5: OpcodeEntry("CMP", ZPX, alu.cmp, 4),
    0xCD: OpcodeEntry("CMP", ABS, alu.cmp, 4),
    0xDD: OpcodeEntry("CMP", ABX, alu.cmp, 4, True),
    0xD9: OpcodeEntry("CMP", ABY, alu.cmp, 4, True),
    0xC1: OpcodeEntry("CMP", IZX, alu.cmp, 6),
    0xD1: OpcodeEntry("CMP", IZY, alu.cmp, 5, True),

    0xE0: OpcodeEntry("CPX", IMM, alu.cpx, 2),
    0xE4: OpcodeEntry("CPX", ZP, alu.cpx, 3),
    0xEC: OpcodeEntry("CPX", ABS, alu.cpx, 4),

    0xC0: OpcodeEntry("CPY", IMM, alu.cpy, 2),
    0xC4: OpcodeEntry("CPY", ZP, alu.cpy, 3),
    0xCC: OpcodeEntry("CPY", ABS, alu.cpy, 4),

    0x29: OpcodeEntry("AND", IMM, alu.and_, 2),
    0x25: OpcodeEntry("AND", ZP, alu.and_, 3),
    0x35: OpcodeEntry("AND", ZPX, alu.and_, 4),
    0x2D: OpcodeEntry("AND", ABS, alu.and_, 4),
    0x3D: OpcodeEntry("AND", ABX, alu.and_, 4, True),
    0x39: OpcodeEntry("AND", ABY, alu.and_, 4, True),
    0x21: OpcodeEntry("AND", IZX, alu.and_, 6),
    0x31: OpcodeEntry("AND", IZY, alu.and_, 5, True),

    0x09: OpcodeEntry("ORA", IMM, alu.ora, 2),
    0x05: OpcodeEntry("ORA", ZP, alu.ora, 3),
    0x15: OpcodeEntry("ORA", ZPX, alu.ora, 4),
    0x0D: OpcodeEntry("ORA", ABS, alu.ora, 4),
    0x1D: OpcodeEntry("ORA", ABX, alu.ora, 4, True),
    0x19: OpcodeEntry("ORA", ABY, alu.ora, 4, True),
    0x01: OpcodeEntry("ORA", IZX, alu.ora, 6),
    0x11: OpcodeEntry("ORA", IZY, alu.ora, 5, True),

    0x49: OpcodeEntry("EOR", IMM, alu.eor, 2),
    0x45: OpcodeEntry("EOR", ZP, alu.eor, 3),
    0x55: OpcodeEntry("EOR", ZPX, alu.eor, 4),
    0x4D: OpcodeEntry("EOR", ABS, alu.eor, 4),
    0x5D: OpcodeEntry("EOR", ABX, alu.eor, 4, True),
    0x59: OpcodeEntry("EOR", ABY, alu.eor, 4, True),
    0x41: OpcodeEntry("EOR", IZX, alu.eor, 6),
    0x51: OpcodeEntry("EOR", IZY, alu.eor, 5, True),

    0x24: OpcodeEntry("BIT", ZP, alu.bit, 3),
    0x2C: OpcodeEntry("BIT", ABS, alu.bit, 4),

    # Shift / Rotate
    0x0A: OpcodeEntry("ASL", ACC, alu.asl, 2),
    0x06: OpcodeEntry("ASL", ZP, alu.asl, 5),
    0x16: OpcodeEntry("ASL", ZPX, alu.asl, 6),
    0x0E: OpcodeEntry("ASL", ABS, alu.asl, 6),
    0x1E: OpcodeEntry("ASL", ABX, alu.asl, 7),

    0x4A: OpcodeEntry("LSR", ACC, alu.lsr, 2),
    0x46: OpcodeEntry("LSR", ZP, alu.lsr, 5),
    0x56: OpcodeEntry("LSR", ZPX, alu.lsr, 6),
    0x4E: OpcodeEntry("LSR", ABS, alu.lsr, 6),
    0x5E: OpcodeEntry("LSR", ABX, alu.lsr, 7),

    0x2A: OpcodeEntry("ROL", ACC, alu.rol, 2),
    0x26: OpcodeEntry("ROL", ZP, alu.rol, 5),
    0x36: OpcodeEntry("ROL", ZPX, alu.rol, 6),
    0x2E: OpcodeEntry("ROL", ABS, alu.rol, 6),
    0x3E: OpcodeEntry("ROL", ABX, alu.rol, 7),

    0x6A: OpcodeEntry("ROR", ACC, alu.ror, 2),
    0x66: OpcodeEntry("ROR", ZP, alu.ror, 5),
    0x76: OpcodeEntry("ROR", ZPX, alu.ror, 6),
    0x6E: OpcodeEntry("ROR", ABS, alu.ror, 6),
    0x7E: OpcodeEntry("ROR", ABX, alu.ror, 7),

    # INC/DEC
    0xE6: OpcodeEntry("INC", ZP, alu.inc, 5),
    0xF6: OpcodeEntry("INC", ZPX, alu.inc, 6),
    0xEE: OpcodeEntry("INC", ABS, alu.inc, 6),
    0xFE: OpcodeEntry("INC", ABX, alu.inc, 7),

    0xC6: OpcodeEntry("DEC", ZP, alu.dec, 5),
    0xD6: OpcodeEntry("DEC", ZPX, alu.dec, 6),
    0xCE: OpcodeEntry("DEC", ABS, alu.dec, 6),
    0xDE: OpcodeEntry("DEC", ABX, alu.dec, 7),

    0xE8: OpcodeEntry("INX", IMP, alu.inx, 2),
    0xCA: OpcodeEntry("DEX", IMP, alu.dex, 2),
    0xC8: OpcodeEntry("INY", IMP, alu.iny, 2),
    0x88: OpcodeEntry("DEY", IMP, alu.dey, 2),

    # --- Control Instructions ---
    # Branch: +1 if branch taken, +2 if page crossed (実行関数が返す)
    0x90: OpcodeEntry("BCC", REL, control.bcc, 2),
    0xB0: OpcodeEntry("BCS", REL, control.bcs, 2),
    0xF0: OpcodeEntry("BEQ", REL, control.beq, 2),
    0xD0: OpcodeEntry("BNE", REL, control.bne, 2),
    0x30: OpcodeEntry("BMI", REL, control.bmi, 2),
    0x10: OpcodeEntry("BPL", REL, control.bpl, 2),
    0x50: OpcodeEntry("BVC", REL, control.bvc, 2),
    0x70: OpcodeEntry("BVS", REL, control.bvs, 2),

    # Jump / Subroutine
    0x4C: OpcodeEntry("JMP", ABS, control.jmp, 3),
    0x6C: OpcodeEntry("JMP", IND, control.jmp, 5),
    0x20: OpcodeEntry("JSR", ABS, control.jsr, 6),
    0x60: OpcodeEntry("RTS", IMP, control.rts, 6),

    # Stack
    0x48: OpcodeEntry("PHA", IMP, control.pha, 3),
    0x08: OpcodeEntry("PHP", IMP, control.php, 3),
    0x68: OpcodeEntry("PLA", IMP, control.pla, 4),
    0x28: OpcodeEntry("PLP", IMP, control.plp, 4),

    # Flags
    0x18: OpcodeEntry("CLC", IMP, control.clc, 2),
    0x38: OpcodeEntry("SEC", IMP, control.sec, 2),
    0x58: OpcodeEntry("CLI", IMP, control.cli, 2),
    0x78: OpcodeEntry("SEI", IMP, control.sei, 2),
    0xB8: OpcodeEntry("CLV", IMP, control.clv, 2),
    0xD8: OpcodeEntry("CLD", IMP, control.cld, 2),
    0xF8: OpcodeEntry("SED", IMP, control.sed, 2),

    # System
    0xEA: OpcodeEntry("NOP", IMP, control.nop, 2),
    0x00: OpcodeEntry("BRK", IMP, control.brk, 7),
    0x40: OpcodeEntry("RTI", IMP, control.rti, 6),
}

OPCODE_MAP: Mapping[int, OpcodeEntry] = MappingProxyType(_OPCODES)
