# src/retro_core_6502/arch/mos6502/instructions/load.py
"""
MOS 6502 転送系命令 (Load/Store/Transfer)。
"""
from retro_core_6502.transport.bus import MemoryPort
from retro_core_6502.arch.mos6502.state import RegisterFile
from retro_core_6502.arch.mos6502.instructions.base import AddressingResult
from retro_core_6502.arch.mos6502.instructions.common import update_nz

# --- LDA (Load Accumulator) ---
# @intent:responsibility メモリからAレジスタへロードし、N, Zフラグを更新。
def lda(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    regs.a = bus.read(addr_res.address)
    update_nz(regs.p, regs.a)

# --- LDX (Load X Register) ---
def ldx(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    regs.x = bus.read(addr_res.address)
    update_nz(regs.p, regs.x)

# --- LDY (Load Y Register) ---
def ldy(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    regs.y = bus.read(addr_res.address)
    update_nz(regs.p, regs.y)

# --- STA (Store Accumulator) ---
# @intent:responsibility Aレジスタの内容をメモリへストア。フラグ変化なし。
def sta(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    bus.write(addr_res.address, regs.a)

# --- STX (Store X Register) ---
def stx(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    bus.write(addr_res.address, regs.x)

# --- STY (Store Y Register) ---
def sty(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    bus.write(addr_res.address, regs.y)

# --- Register Transfers (TAX, TAY, TXA, TYA, TSX, TXS) ---

def tax(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    regs.x = regs.a
    update_nz(regs.p, regs.x)

def tay(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    regs.y = regs.a
    update_nz(regs.p, regs.y)

def txa(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    regs.a = regs.x
    update_nz(regs.p, regs.a)

def tya(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    regs.a = regs.y
    update_nz(regs.p, regs.a)

# @intent:note TSXはSPからXへ転送。SPは8ビット値として扱う。N, Z更新あり。
def tsx(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    regs.x = regs.s
    update_nz(regs.p, regs.x)

# @intent:note TXSはXからSPへ転送。N, Zフラグは更新 *されない* という特異な挙動がある。
def txs(regs: RegisterFile, bus: MemoryPort, addr_res: AddressingResult) -> None:
    regs.s = regs.x
