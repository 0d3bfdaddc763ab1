# src/retro_core_6502/arch/mos6502/cpu.py
"""
MOS 6502 CPUエミュレーションの中心モジュール。
"""
import logging
from enum import Enum
from typing import Dict, List, Tuple

from retro_core_6502.common.errors import IllegalOpcode
from retro_core_6502.core.cpu import AbstractCpu
from retro_core_6502.core.snapshot import Operation
from retro_core_6502.transport.bus import MemoryPort, NMI_VECTOR, IRQ_VECTOR, RESET_VECTOR
from retro_core_6502.arch.mos6502.state import RegisterFile, RegisterSnapshot
from retro_core_6502.arch.mos6502.instructions.base import OPERAND_LENGTH, RESOLVERS, format_operand
from retro_core_6502.arch.mos6502.instructions.control import enter_interrupt
from retro_core_6502.arch.mos6502.instructions.maps import OPCODE_MAP, OpcodeEntry
from retro_core_6502.arch.mos6502 import disassembler

logger = logging.getLogger(__name__)

# 割り込み受付シーケンスの所要サイクル
INTERRUPT_CYCLES = 7


class InterruptKind(Enum):
    NMI = "nmi"
    IRQ = "irq"


# @intent:responsibility MOS 6502 CPUの具体的なエミュレーションロジックを提供する。
class Mos6502Cpu(AbstractCpu):
    """
    MOS 6502 CPUをエミュレートするクラス。

    レジスタは`registers`で直接参照・変更できます（ハーネスが初期値を与えるため）。
    `get_state()`は不変のRegisterSnapshotを返します。
    """
    def __init__(self, bus: MemoryPort):
        super().__init__(bus)

    def _create_initial_state(self) -> RegisterFile:
        return RegisterFile()

    @property
    def registers(self) -> RegisterFile:
        return self._state

    def get_state(self) -> RegisterSnapshot:
        return self._state.snapshot()

    def _current_pc(self) -> int:
        return self._state.pc

    # @intent:responsibility リセット処理。指定時はリセットベクトル($FFFC)からPCを読み込む。
    def reset(self, use_reset_vector: bool = False) -> None:
        super().reset()
        if use_reset_vector:
            self._state.pc = self._bus.read_word(RESET_VECTOR)
            logger.debug("Reset vector -> $%04X", self._state.pc)

    # @intent:responsibility 命令フェッチ。オペコードを読み、PCを1進める。
    def _fetch(self) -> int:
        opcode = self._bus.read(self._state.pc)
        self._state.pc = self._state.pc + 1
        return opcode

    # @intent:responsibility 命令デコード。未定義のオペコードは例外とする。
    def _decode(self, opcode: int, address: int) -> OpcodeEntry:
        entry = OPCODE_MAP.get(opcode)
        if entry is None:
            raise IllegalOpcode(opcode, address)
        return entry

    # @intent:responsibility アドレッシングモードを解決してから命令を実行し、実サイクル数を確定する。
    # @intent:note リゾルバがPCをオペランドの直後まで進めるため、命令関数が見るPCは次の命令の先頭。
    def _execute(self, opcode: int, decoded: OpcodeEntry) -> Operation:
        addr_res = RESOLVERS[decoded.mode](self._state, self._bus)
        next_pc = self._state.pc

        extra = decoded.execute(self._state, self._bus, addr_res) or 0
        cycles = decoded.cycles + extra
        if decoded.page_penalty and addr_res.page_crossed:
            cycles += 1

        operand = format_operand(decoded.mode, addr_res.operand_bytes, next_pc)
        return Operation(
            opcode=opcode,
            mnemonic=decoded.mnemonic,
            operands=[operand] if operand else [],
            operand_bytes=list(addr_res.operand_bytes),
            cycle_count=cycles,
            length=1 + OPERAND_LENGTH[decoded.mode],
        )

    # @intent:responsibility 外部割り込みを受け付ける。
    # @intent:return 受け付けた場合True。Iフラグが立っている間のIRQは無視してFalse。
    def interrupt(self, kind: InterruptKind) -> bool:
        if kind is InterruptKind.IRQ and self._state.p.flag_i:
            logger.debug("IRQ masked at PC:%04X", self._state.pc)
            return False
        vector = NMI_VECTOR if kind is InterruptKind.NMI else IRQ_VECTOR
        enter_interrupt(self._state, self._bus, vector, break_flag=False)
        self._cycle_count += INTERRUPT_CYCLES
        logger.debug("%s accepted, PC -> $%04X", kind.name, self._state.pc)
        return True

    # @intent:responsibility 診断用の1行表現（PC, 累計サイクル, A, X, Y, S, フラグ）。
    def render_state(self) -> str:
        r = self._state
        return (f"PC:{r.pc:04X} CLK:{self._cycle_count:04d} A:{r.a:02X} X:{r.x:02X} "
                f"Y:{r.y:02X} S:{r.s:02X} {r.p.render()}")

    def get_register_map(self) -> Dict[str, int]:
        r = self._state
        return {"A": r.a, "X": r.x, "Y": r.y, "PC": r.pc, "S": r.s, "P": r.p.value}

    def get_flag_state(self) -> Dict[str, bool]:
        p = self._state.p
        return {
            "N": p.flag_n,
            "V": p.flag_v,
            "B": p.flag_b,
            "D": p.flag_d,
            "I": p.flag_i,
            "Z": p.flag_z,
            "C": p.flag_c,
        }

    # @intent:responsibility 指定範囲の逆アセンブル結果を返す。レジスタやサイクルは変化しない。
    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return disassembler.disassemble(self._bus, start_addr, length)
