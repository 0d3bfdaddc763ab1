# src/retro_core_6502/arch/mos6502/instructions/alu.py
"""
MOS 6502 算術論理演算命令 (ALU)。

Dフラグはセット/クリアできますが、ADC/SBCは常に2進演算として実行します
（デシマルモードを持たない派生品と同じ挙動）。
"""
from retro_core_6502.transport.bus import MemoryPort
from retro_core_6502.arch.mos6502.state import RegisterFile, StatusRegister, FLAG_C
from retro_core_6502.arch.mos6502.instructions.base import AddressingMode, AddressingResult
from retro_core_6502.arch.mos6502.instructions.common import apply_c, apply_v_add, update_nz

# --- Logical Operations (AND, ORA, EOR, BIT) ---

def and_(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    regs.a = regs.a & bus.read(addr_res.address)
    update_nz(regs.p, regs.a)

def ora(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    regs.a = regs.a | bus.read(addr_res.address)
    update_nz(regs.p, regs.a)

def eor(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    regs.a = regs.a ^ bus.read(addr_res.address)
    update_nz(regs.p, regs.a)

# @intent:note BIT命令はメモリの値のビット6, 7をそれぞれV, Nフラグにコピーし、A & Mの結果でZフラグを設定する。
def bit(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    val = bus.read(addr_res.address)
    regs.p.set_zero((regs.a & val) == 0)
    regs.p.set_overflow(val & 0x40)
    regs.p.set_negative(val & 0x80)

# --- Arithmetic Operations (ADC, SBC) ---

# @intent:responsibility 2進加算 a + b + C。結果を返し、N, Z, C, Vを更新する。
# @intent:rationale SBCもこの関数を経由させることで、オーバーフロー判定を一か所に保つ。
def add_with_carry(p: StatusRegister, a: int, b: int) -> int:
    wide = a + b + p.get_flag(FLAG_C)
    res = wide & 0xFF
    update_nz(p, res)
    apply_c(p, wide)
    apply_v_add(p, res, a, b)
    return res

def adc(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    regs.a = add_with_carry(regs.p, regs.a, bus.read(addr_res.address))

# SBC A, M => ADC A, ~M
# 借り(borrow)は反転したCで表現される: A - M - (1 - C) == A + (M ^ 0xFF) + C
def sbc(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    regs.a = add_with_carry(regs.p, regs.a, bus.read(addr_res.address) ^ 0xFF)

# --- Compare Operations (CMP, CPX, CPY) ---
# @intent:note Compare is effectively subtraction without storing result.
# Updates N, Z, C. C is set if Reg >= Val (No borrow). V is untouched.

def _compare(p: StatusRegister, reg_val: int, mem_val: int) -> None:
    update_nz(p, (reg_val - mem_val) & 0xFF)
    p.set_carry(reg_val >= mem_val)

def cmp(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    _compare(regs.p, regs.a, bus.read(addr_res.address))

def cpx(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    _compare(regs.p, regs.x, bus.read(addr_res.address))

def cpy(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    _compare(regs.p, regs.y, bus.read(addr_res.address))

# --- Shift / Rotate Operations (ASL, LSR, ROL, ROR) ---
# @intent:note Accumulator mode or Memory mode.

def _read_modify_write(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult, op) -> None:
    is_acc = addr_res.mode is AddressingMode.ACCUMULATOR
    val = regs.a if is_acc else bus.read(addr_res.address)
    res, carry = op(val, regs.p.get_flag(FLAG_C))
    regs.p.set_carry(carry)
    update_nz(regs.p, res)
    if is_acc:
        regs.a = res
    else:
        bus.write(addr_res.address, res)

def asl(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    _read_modify_write(regs, bus, addr_res,
                       lambda val, c: ((val << 1) & 0xFF, val & 0x80))

# N is always 0 for LSR
def lsr(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    _read_modify_write(regs, bus, addr_res,
                       lambda val, c: (val >> 1, val & 0x01))

def rol(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    _read_modify_write(regs, bus, addr_res,
                       lambda val, c: (((val << 1) | c) & 0xFF, val & 0x80))

def ror(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    _read_modify_write(regs, bus, addr_res,
                       lambda val, c: ((val >> 1) | (c << 7), val & 0x01))

# --- Increment / Decrement (INC, DEC, INX, DEX, INY, DEY) ---
# Cは変化しない

def inc(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    res = (bus.read(addr_res.address) + 1) & 0xFF
    bus.write(addr_res.address, res)
    update_nz(regs.p, res)

def dec(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    res = (bus.read(addr_res.address) - 1) & 0xFF
    bus.write(addr_res.address, res)
    update_nz(regs.p, res)

def inx(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    regs.x = regs.x + 1
    update_nz(regs.p, regs.x)

def dex(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    regs.x = regs.x - 1
    update_nz(regs.p, regs.x)

def iny(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    regs.y = regs.y + 1
    update_nz(regs.p, regs.y)

def dey(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    regs.y = regs.y - 1
    update_nz(regs.p, regs.y)
