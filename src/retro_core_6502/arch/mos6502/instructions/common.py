# src/retro_core_6502/arch/mos6502/instructions/common.py
"""
MOS 6502 命令群が共有するフラグ判定とスタック操作。
"""
from retro_core_6502.transport.bus import MemoryPort
from retro_core_6502.arch.mos6502.state import RegisterFile, StatusRegister, FLAG_C, FLAG_N, FLAG_V, FLAG_Z

# --- Flag tests ---

def apply_n(p: StatusRegister, value: int) -> None:
    p.set_flag(FLAG_N, value & 0x80)

def apply_z(p: StatusRegister, value: int) -> None:
    p.set_flag(FLAG_Z, (value & 0xFF) == 0)

# @intent:responsibility N, Z フラグ更新ヘルパー。他のフラグには触れない。
def update_nz(p: StatusRegister, value: int) -> None:
    apply_n(p, value)
    apply_z(p, value)

# @intent:note 加算結果（マスク前の9bit値）のbit8をCに反映する。
def apply_c(p: StatusRegister, wide: int) -> None:
    p.set_flag(FLAG_C, wide & 0x100)

# @intent:responsibility 加算 c = a + b (+ carry) のオーバーフロー判定。
# 同符号同士の加算で結果の符号が変わった場合にセットされる。
def apply_v_add(p: StatusRegister, result: int, a: int, b: int) -> None:
    p.set_flag(FLAG_V, ((a ^ b) ^ 0x80) & (a ^ result) & 0x80)

# --- Stack ---
# Sは常に次の空きスロットを指し、$01FFから下方向へ伸びる。

def push(regs: RegisterFile, bus: MemoryPort, value: int) -> None:
    bus.write(regs.stack_address, value & 0xFF)
    regs.s = regs.s - 1

def pull(regs: RegisterFile, bus: MemoryPort) -> int:
    regs.s = regs.s + 1
    return bus.read(regs.stack_address)

# @intent:note 上位バイトを先に積むため、メモリ上ではリトルエンディアンに並ぶ。
def push_word(regs: RegisterFile, bus: MemoryPort, value: int) -> None:
    push(regs, bus, (value >> 8) & 0xFF)
    push(regs, bus, value & 0xFF)

def pull_word(regs: RegisterFile, bus: MemoryPort) -> int:
    lo = pull(regs, bus)
    hi = pull(regs, bus)
    return (hi << 8) | lo
