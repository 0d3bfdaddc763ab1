# src/retro_core_6502/arch/mos6502/instructions/control.py
"""
MOS 6502 制御系命令 (Branch, Jump, Stack, Flags, Interrupt, NOP)。
"""
from retro_core_6502.transport.bus import MemoryPort, IRQ_VECTOR
from retro_core_6502.arch.mos6502.state import RegisterFile, StatusRegister
from retro_core_6502.arch.mos6502.instructions.base import AddressingResult
from retro_core_6502.arch.mos6502.instructions.common import (
    pull, pull_word, push, push_word, update_nz,
)

# --- Branch Instructions ---

# @intent:note 分岐命令の実装について
# リゾルバは既にPCをオペランドの直後まで進めている。
# 不成立時は何もしなくて良い。成立時は PC = 分岐先 とする。
# @intent:return 追加サイクル数（成立で+1、分岐先が別ページならさらに+1）。
def _branch(regs: RegisterFile, addr_res: AddressingResult, condition: bool) -> int:
    if not condition:
        return 0
    regs.pc = addr_res.address
    return 2 if addr_res.page_crossed else 1

def bcc(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> int:
    return _branch(regs, addr_res, not regs.p.flag_c)

def bcs(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> int:
    return _branch(regs, addr_res, regs.p.flag_c)

def beq(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> int:
    return _branch(regs, addr_res, regs.p.flag_z)

def bne(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> int:
    return _branch(regs, addr_res, not regs.p.flag_z)

def bmi(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> int:
    return _branch(regs, addr_res, regs.p.flag_n)

def bpl(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> int:
    return _branch(regs, addr_res, not regs.p.flag_n)

def bvc(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> int:
    return _branch(regs, addr_res, not regs.p.flag_v)

def bvs(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> int:
    return _branch(regs, addr_res, regs.p.flag_v)

# --- Jump Instructions ---

def jmp(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    regs.pc = addr_res.address

# @intent:note 6502の仕様では、スタックに積むのは「JSR命令の最後のバイトのアドレス」。
# リゾルバがPCを次の命令の先頭まで進めているため、積む値は PC - 1。
def jsr(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    push_word(regs, bus, (regs.pc - 1) & 0xFFFF)
    regs.pc = addr_res.address

# Return address pulled is "last byte of JSR". So we need to add 1 to get next opcode.
def rts(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    regs.pc = pull_word(regs, bus) + 1

# --- Stack Operations (PHA, PHP, PLA, PLP) ---

def pha(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    push(regs, bus, regs.a)

# PHP pushes status with Break(B) and Reserved(R) flags set to 1.
def php(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    push(regs, bus, regs.p.value | StatusRegister.B_FLAG | StatusRegister.R_FLAG)

def pla(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    regs.a = pull(regs, bus)
    update_nz(regs.p, regs.a)

# @intent:note スタックのバイトをそのまま復元する。B/Rビットの補正は行わない。
def plp(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    regs.p.value = pull(regs, bus)

# --- Flag Operations (CLC, SEC, etc) ---

def clc(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    regs.p.clear_carry()

def sec(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    regs.p.set_carry()

def cli(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    regs.p.clear_interrupt()

def sei(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    regs.p.set_interrupt()

def clv(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    regs.p.clear_overflow()

def cld(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    regs.p.clear_decimal()

def sed(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    regs.p.set_decimal()

# --- System / Other ---

def nop(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    pass

# @intent:responsibility 割り込み受付シーケンス（PC退避→P退避→I設定→ベクタ読み込み）。
# @intent:note BRKとハードウェア割り込みの違いは退避するPのBビットのみ。
def enter_interrupt(regs: RegisterFile, bus: MemoryPort, vector: int, break_flag: bool) -> None:
    push_word(regs, bus, regs.pc)
    p_val = regs.p.value | StatusRegister.R_FLAG
    if break_flag:
        p_val |= StatusRegister.B_FLAG
    else:
        p_val &= ~StatusRegister.B_FLAG
    push(regs, bus, p_val)
    regs.p.set_interrupt()
    regs.pc = bus.read_word(vector)

# BRK is a software interrupt.
# 退避するPCはBRKのオペコード直後のアドレス（パディングバイトは読み飛ばさない）。
def brk(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    enter_interrupt(regs, bus, IRQ_VECTOR, break_flag=True)

# @intent:note P→PCの順に復帰する。フラグの補正は行わない。
def rti(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    regs.p.value = pull(regs, bus)
    regs.pc = pull_word(regs, bus)
