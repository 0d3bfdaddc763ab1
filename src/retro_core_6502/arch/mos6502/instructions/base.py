# src/retro_core_6502/arch/mos6502/instructions/base.py
"""
MOS 6502 アドレッシングモード解決ロジック。

各リゾルバは現在のPCからオペランドバイトを読み出し、消費したバイト数だけPCを進めた上で
実効アドレスを返します。Immediateの場合はオペランドバイト自身のアドレスを返します。
"""
from enum import Enum
from typing import Callable, Dict, NamedTuple, Optional, Sequence, Tuple

from retro_core_6502.transport.bus import MemoryPort
from retro_core_6502.arch.mos6502.state import RegisterFile


class AddressingMode(Enum):
    IMPLIED = "implied"
    ACCUMULATOR = "accumulator"
    IMMEDIATE = "immediate"
    ZERO_PAGE = "zero_page"
    ZERO_PAGE_X = "zero_page_x"
    ZERO_PAGE_Y = "zero_page_y"
    ABSOLUTE = "absolute"
    ABSOLUTE_X = "absolute_x"
    ABSOLUTE_Y = "absolute_y"
    INDIRECT = "indirect"
    INDEXED_INDIRECT = "indexed_indirect"  # ($xx,X)
    INDIRECT_INDEXED = "indirect_indexed"  # ($xx),Y
    RELATIVE = "relative"


# @intent:responsibility アドレッシングモードの解決結果。
# address: 解決された実効アドレス (Implied/Accumulatorの場合はNone)
# page_crossed: インデックス加算または分岐先が256バイトページを跨いだか
# operand_bytes: オペランドとしてフェッチされたバイト列
class AddressingResult(NamedTuple):
    mode: AddressingMode
    address: Optional[int]
    page_crossed: bool = False
    operand_bytes: Tuple[int, ...] = ()


# オペランドのバイト長
OPERAND_LENGTH: Dict[AddressingMode, int] = {
    AddressingMode.IMPLIED: 0,
    AddressingMode.ACCUMULATOR: 0,
    AddressingMode.IMMEDIATE: 1,
    AddressingMode.ZERO_PAGE: 1,
    AddressingMode.ZERO_PAGE_X: 1,
    AddressingMode.ZERO_PAGE_Y: 1,
    AddressingMode.ABSOLUTE: 2,
    AddressingMode.ABSOLUTE_X: 2,
    AddressingMode.ABSOLUTE_Y: 2,
    AddressingMode.INDIRECT: 2,
    AddressingMode.INDEXED_INDIRECT: 1,
    AddressingMode.INDIRECT_INDEXED: 1,
    AddressingMode.RELATIVE: 1,
}


# @intent:responsibility ページ境界交差判定。
def is_page_crossed(addr1: int, addr2: int) -> bool:
    return (addr1 & 0xFF00) != (addr2 & 0xFF00)


# @intent:responsibility 符号付き8bitとして解釈する（0x80以上は0x100を引く）。
def to_signed(value: int) -> int:
    return value - 0x100 if value >= 0x80 else value


# @intent:responsibility 逆アセンブリ用のオペランド文字列表現を生成します。
# @intent:note Relativeの場合、`next_pc`（オペランド直後のアドレス）から分岐先を計算します。
def format_operand(mode: AddressingMode, operand_bytes: Sequence[int], next_pc: int = 0) -> str:
    if mode is AddressingMode.ACCUMULATOR:
        return "A"
    if mode is AddressingMode.IMPLIED or not operand_bytes:
        return ""
    if len(operand_bytes) == 2:
        word = (operand_bytes[1] << 8) | operand_bytes[0]
        if mode is AddressingMode.ABSOLUTE_X:
            return f"${word:04X},X"
        if mode is AddressingMode.ABSOLUTE_Y:
            return f"${word:04X},Y"
        if mode is AddressingMode.INDIRECT:
            return f"(${word:04X})"
        return f"${word:04X}"
    byte = operand_bytes[0]
    if mode is AddressingMode.IMMEDIATE:
        return f"#${byte:02X}"
    if mode is AddressingMode.ZERO_PAGE_X:
        return f"${byte:02X},X"
    if mode is AddressingMode.ZERO_PAGE_Y:
        return f"${byte:02X},Y"
    if mode is AddressingMode.INDEXED_INDIRECT:
        return f"(${byte:02X},X)"
    if mode is AddressingMode.INDIRECT_INDEXED:
        return f"(${byte:02X}),Y"
    if mode is AddressingMode.RELATIVE:
        return f"${(next_pc + to_signed(byte)) & 0xFFFF:04X}"
    return f"${byte:02X}"


def _fetch_byte(regs: RegisterFile, bus: MemoryPort) -> int:
    value = bus.read(regs.pc)
    regs.pc = regs.pc + 1
    return value


def _fetch_word(regs: RegisterFile, bus: MemoryPort) -> Tuple[int, int]:
    lo = _fetch_byte(regs, bus)
    hi = _fetch_byte(regs, bus)
    return lo, hi


# --- Addressing Modes ---

# @intent:responsibility Implied Mode
def addr_implied(regs: RegisterFile, bus: MemoryPort) -> AddressingResult:
    return AddressingResult(AddressingMode.IMPLIED, None)


# @intent:responsibility Accumulator Mode (ASL A など)
def addr_accumulator(regs: RegisterFile, bus: MemoryPort) -> AddressingResult:
    return AddressingResult(AddressingMode.ACCUMULATOR, None)


# @intent:responsibility Immediate Mode (#$xx)
# @intent:note 値ではなく、オペランドバイトが置かれているアドレス（=PC）を返す。
def addr_immediate(regs: RegisterFile, bus: MemoryPort) -> AddressingResult:
    addr = regs.pc
    regs.pc = regs.pc + 1
    # 表示用。実際の読み出しは命令側で行う
    return AddressingResult(AddressingMode.IMMEDIATE, addr, False, (bus.peek(addr),))


# @intent:responsibility Zero Page Mode ($xx)
def addr_zeropage(regs: RegisterFile, bus: MemoryPort) -> AddressingResult:
    addr = _fetch_byte(regs, bus)
    return AddressingResult(AddressingMode.ZERO_PAGE, addr, False, (addr,))


# @intent:responsibility Zero Page, X Mode ($xx,X)
# @intent:note ラップアラウンドあり (0xFF + 1 -> 0x00)
def addr_zeropage_x(regs: RegisterFile, bus: MemoryPort) -> AddressingResult:
    base = _fetch_byte(regs, bus)
    addr = (base + regs.x) & 0xFF
    return AddressingResult(AddressingMode.ZERO_PAGE_X, addr, False, (base,))


# @intent:responsibility Zero Page, Y Mode ($xx,Y) - LDX, STX only
def addr_zeropage_y(regs: RegisterFile, bus: MemoryPort) -> AddressingResult:
    base = _fetch_byte(regs, bus)
    addr = (base + regs.y) & 0xFF
    return AddressingResult(AddressingMode.ZERO_PAGE_Y, addr, False, (base,))


# @intent:responsibility Absolute Mode ($xxxx)
def addr_absolute(regs: RegisterFile, bus: MemoryPort) -> AddressingResult:
    lo, hi = _fetch_word(regs, bus)
    addr = (hi << 8) | lo
    return AddressingResult(AddressingMode.ABSOLUTE, addr, False, (lo, hi))


def _absolute_indexed(regs: RegisterFile, bus: MemoryPort, index: int,
                      mode: AddressingMode) -> AddressingResult:
    lo, hi = _fetch_word(regs, bus)
    base_addr = (hi << 8) | lo
    addr = (base_addr + index) & 0xFFFF
    # 交差したかのみを返し、サイクルの扱いは命令テーブル側で決定する
    return AddressingResult(mode, addr, is_page_crossed(base_addr, addr), (lo, hi))


# @intent:responsibility Absolute, X Mode ($xxxx,X)
def addr_absolute_x(regs: RegisterFile, bus: MemoryPort) -> AddressingResult:
    return _absolute_indexed(regs, bus, regs.x, AddressingMode.ABSOLUTE_X)


# @intent:responsibility Absolute, Y Mode ($xxxx,Y)
def addr_absolute_y(regs: RegisterFile, bus: MemoryPort) -> AddressingResult:
    return _absolute_indexed(regs, bus, regs.y, AddressingMode.ABSOLUTE_Y)


# @intent:responsibility Indirect Mode ($xxxx) - JMP only
# @intent:note ポインタの指すワードをそのまま読む（$xxFFのページ境界バグは再現しない）。
def addr_indirect(regs: RegisterFile, bus: MemoryPort) -> AddressingResult:
    lo, hi = _fetch_word(regs, bus)
    addr = bus.read_word((hi << 8) | lo)
    return AddressingResult(AddressingMode.INDIRECT, addr, False, (lo, hi))


# @intent:responsibility Indexed Indirect Mode ($xx,X) - "Pre-indexed"
# @intent:note ゼロページ内でXを加算(ラップアラウンド)し、そこにあるポインタを読む。
def addr_indexed_indirect(regs: RegisterFile, bus: MemoryPort) -> AddressingResult:
    base = _fetch_byte(regs, bus)
    addr = bus.read_word((base + regs.x) & 0xFF)
    return AddressingResult(AddressingMode.INDEXED_INDIRECT, addr, False, (base,))


# @intent:responsibility Indirect Indexed Mode ($xx),Y - "Post-indexed"
# @intent:note ゼロページのポインタを読み、ベースアドレスを得てからYを加算。
def addr_indirect_indexed(regs: RegisterFile, bus: MemoryPort) -> AddressingResult:
    ptr_addr = _fetch_byte(regs, bus)
    base_addr = bus.read_word(ptr_addr)
    addr = (base_addr + regs.y) & 0xFFFF
    return AddressingResult(AddressingMode.INDIRECT_INDEXED, addr,
                            is_page_crossed(base_addr, addr), (ptr_addr,))


# @intent:responsibility Relative Mode (Branch)
# @intent:note 戻り値のアドレスは「分岐先の絶対アドレス」。基準はオペランド直後のPC。
def addr_relative(regs: RegisterFile, bus: MemoryPort) -> AddressingResult:
    offset = _fetch_byte(regs, bus)
    dest_addr = (regs.pc + to_signed(offset)) & 0xFFFF
    # ページクロスは分岐成立時のみ意味を持つ。判定は命令側で使う
    return AddressingResult(AddressingMode.RELATIVE, dest_addr,
                            is_page_crossed(regs.pc, dest_addr), (offset,))


AddrFunc = Callable[[RegisterFile, MemoryPort], AddressingResult]

RESOLVERS: Dict[AddressingMode, AddrFunc] = {
    AddressingMode.IMPLIED: addr_implied,
    AddressingMode.ACCUMULATOR: addr_accumulator,
    AddressingMode.IMMEDIATE: addr_immediate,
    AddressingMode.ZERO_PAGE: addr_zeropage,
    AddressingMode.ZERO_PAGE_X: addr_zeropage_x,
    AddressingMode.ZERO_PAGE_Y: addr_zeropage_y,
    AddressingMode.ABSOLUTE: addr_absolute,
    AddressingMode.ABSOLUTE_X: addr_absolute_x,
    AddressingMode.ABSOLUTE_Y: addr_absolute_y,
    AddressingMode.INDIRECT: addr_indirect,
    AddressingMode.INDEXED_INDIRECT: addr_indexed_indirect,
    AddressingMode.INDIRECT_INDEXED: addr_indirect_indexed,
    AddressingMode.RELATIVE: addr_relative,
}
