# src/retro_core_6502/arch/mos6502/disassembler.py
"""
MOS 6502 逆アセンブラ。
"""
from typing import List, Tuple

from retro_core_6502.transport.bus import MemoryPort
from retro_core_6502.arch.mos6502.instructions.base import OPERAND_LENGTH, format_operand
from retro_core_6502.arch.mos6502.instructions.maps import OPCODE_MAP


# @intent:responsibility 指定されたメモリ範囲を逆アセンブルする。
def disassemble(bus: MemoryPort, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
    """
    メモリを解析し、(アドレス, HEX, ニーモニック) のリストを返す。

    逆アセンブル時にはレジスタ状態が不明なため、アドレッシングモード解決関数は使わず、
    オペコードマップのモードからオペランド長を求める。読み出しはpeekで行い、
    バスのアクティビティログも汚さない。
    """
    results = []
    current_addr = start_addr
    end_addr = min(start_addr + length, bus.size)

    while current_addr < end_addr:
        addr = current_addr
        opcode = bus.peek(addr)
        entry = OPCODE_MAP.get(opcode)
        operand_len = OPERAND_LENGTH[entry.mode] if entry else 0

        # 未定義、またはオペランドがメモリ終端をはみ出す場合はデータとして扱う
        if entry is None or addr + operand_len >= bus.size:
            results.append((addr, f"{opcode:02X}", f".byte ${opcode:02X}"))
            current_addr += 1
            continue

        raw = [bus.peek(addr + i) for i in range(1 + operand_len)]
        hex_str = " ".join(f"{b:02X}" for b in raw)
        op_str = format_operand(entry.mode, raw[1:], addr + len(raw))
        results.append((addr, hex_str, f"{entry.mnemonic} {op_str}".strip()))
        current_addr += len(raw)

    return results
