# retro_core_6502/debugger/debugger.py
"""
デバッガモジュール。

コアエンジンの実行を制御し、ユーザーが指定した条件（ブレークポイント）で
実行を中断させる責務を負います。
"""
import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, List, Optional

from retro_core_6502.core.cpu import AbstractCpu
from retro_core_6502.core.snapshot import Snapshot
from retro_core_6502.transport.bus import BusAccessType

logger = logging.getLogger(__name__)

# 履歴として保持するSnapshotの既定数
DEFAULT_HISTORY_LIMIT = 1000


# @intent:responsibility ブレークポイントの条件タイプを定義します。
class BreakpointConditionType(Enum):
    PC_MATCH = "PC_MATCH"               # プログラムカウンタが特定のアドレスに一致
    MEMORY_READ = "MEMORY_READ"         # 特定のアドレスが読み込まれた
    MEMORY_WRITE = "MEMORY_WRITE"       # 特定のアドレスに書き込まれた
    REGISTER_VALUE = "REGISTER_VALUE"   # 特定のレジスタが特定の値になった
    REGISTER_CHANGE = "REGISTER_CHANGE" # 特定のレジスタの値が変化した


# @intent:responsibility ブレークポイントをトリガーする条件を定義します。
@dataclass(frozen=True)
class BreakpointCondition:
    """
    ブレークポイントがヒットするための条件を定義するデータクラス。
    レジスタ名はRegisterSnapshotの属性名（pc, a, x, y, s, p）です。
    """
    condition_type: BreakpointConditionType
    value: Optional[int] = None           # PC_MATCH, REGISTER_VALUEで使用
    address: Optional[int] = None         # MEMORY_READ, MEMORY_WRITEで使用
    register_name: Optional[str] = None   # REGISTER_VALUE, REGISTER_CHANGEで使用
    enabled: bool = True


# @intent:responsibility コアエンジンの実行制御とブレークポイント管理を行います。
class Debugger:
    """
    CPUの実行を制御し、ブレークポイントの管理を行うクラス。
    """
    def __init__(self, cpu: AbstractCpu, history_limit: Optional[int] = DEFAULT_HISTORY_LIMIT):
        """
        `history_limit`を超えた履歴は古いものから捨てます。Noneで無制限、0で記録しません。
        """
        self._cpu = cpu
        self._breakpoints: List[BreakpointCondition] = []
        self._stop_requested: bool = False
        self._previous_state = self._cpu.get_state()
        self._last_snapshot: Optional[Snapshot] = None
        self._history: Deque[Snapshot] = deque(maxlen=history_limit)

    def add_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition not in self._breakpoints:
            self._breakpoints.append(condition)

    def remove_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition in self._breakpoints:
            self._breakpoints.remove(condition)

    def get_breakpoints(self) -> List[BreakpointCondition]:
        return list(self._breakpoints)

    def get_history(self) -> List[Snapshot]:
        return list(self._history)

    def get_last_snapshot(self) -> Optional[Snapshot]:
        return self._last_snapshot

    def _match_pc(self, pc: int) -> Optional[BreakpointCondition]:
        for bp in self._breakpoints:
            if bp.enabled and bp.condition_type == BreakpointConditionType.PC_MATCH and bp.value == pc:
                return bp
        return None

    # @intent:responsibility Snapshotに基づいてPC_MATCH以外のブレークポイントを評価します。
    def _check_other_breakpoints(self, snapshot: Snapshot) -> Optional[BreakpointCondition]:
        current_state = snapshot.state

        for bp in self._breakpoints:
            if not bp.enabled:
                continue

            if bp.condition_type == BreakpointConditionType.MEMORY_READ:
                for access in snapshot.bus_activity:
                    if access.access_type == BusAccessType.READ and access.address == bp.address:
                        return bp
            elif bp.condition_type == BreakpointConditionType.MEMORY_WRITE:
                for access in snapshot.bus_activity:
                    if access.access_type == BusAccessType.WRITE and access.address == bp.address:
                        return bp
            elif bp.condition_type == BreakpointConditionType.REGISTER_VALUE:
                if bp.register_name and hasattr(current_state, bp.register_name):
                    if getattr(current_state, bp.register_name) == bp.value:
                        return bp
            elif bp.condition_type == BreakpointConditionType.REGISTER_CHANGE:
                if bp.register_name and hasattr(current_state, bp.register_name):
                    if getattr(current_state, bp.register_name) != getattr(self._previous_state, bp.register_name):
                        return bp
        return None

    def step_instruction(self) -> Snapshot:
        """
        CPUを1命令分実行し、その結果のSnapshotを返します。
        """
        self._previous_state = self._cpu.get_state()
        snapshot = self._cpu.step()
        self._last_snapshot = snapshot
        self._history.append(snapshot)
        return snapshot

    def run(self, max_steps: Optional[int] = None) -> Optional[BreakpointCondition]:
        """
        ブレークポイントにヒットするか、停止条件を満たすまでCPUの実行を継続します。

        PC_MATCHは命令の実行前に、それ以外の条件は実行後のSnapshotで評価します。
        開始時点のPCに設定されたPC_MATCHは、同じ場所で止まり続けないよう無視します。

        @return ヒットしたブレークポイント。それ以外の理由で停止した場合はNone。
        """
        steps = 0
        first = True

        while True:
            if self._stop_requested:
                break
            if max_steps is not None and steps >= max_steps:
                break
            current_pc = self._cpu.get_state().pc
            if current_pc >= self._cpu.bus.size:
                break

            if not first:
                bp = self._match_pc(current_pc)
                if bp is not None:
                    logger.info("Breakpoint hit at PC: %#06x", current_pc)
                    return bp
            first = False

            snapshot = self.step_instruction()
            steps += 1

            bp = self._check_other_breakpoints(snapshot)
            if bp is not None:
                logger.info("Breakpoint (%s) hit at PC: %#06x", bp.condition_type.value, snapshot.state.pc)
                return bp

        self._stop_requested = False
        return None

    # @intent:responsibility 停止要求を出します。run()の前に出された要求も次のrun()で消費されます。
    def stop(self) -> None:
        self._stop_requested = True
