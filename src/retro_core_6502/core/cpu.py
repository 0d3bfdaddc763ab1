# retro_core_6502/core/cpu.py
"""
Core Layer (抽象CPU)

このモジュールは、CPUの基本的な状態管理と命令サイクル（フェッチ→デコード→実行）の駆動、
および停止条件付きの実行ループを提供します。
具体的な命令の振る舞いはInstruction Layerに移譲されます。
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from retro_core_6502.transport.bus import MemoryPort
from retro_core_6502.core.snapshot import Snapshot, Operation, Metadata

logger = logging.getLogger(__name__)


# @intent:responsibility 抽象CPUの基本機能とインターフェースを定義します。
class AbstractCpu(ABC):
    """
    全てのCPUエミュレーションの基底となる抽象クラス。
    メモリポートとのインターフェース、基本的な状態管理、命令サイクルと実行ループを提供します。

    実行ループの状態は Running と Halted の2つです。ステップ数の上限に達した場合、
    外部から停止要求があった場合、またはPCがメモリイメージの終端以降に達した場合に
    Haltedへ遷移します。不正なオペコードやメモリ範囲外アクセスは例外として送出され、
    それまでに行われたレジスタ変更は巻き戻されません。
    """
    # @intent:pre-condition `bus`は有効なMemoryPortである必要があります。
    def __init__(self, bus: MemoryPort):
        self._bus = bus
        self._state = self._create_initial_state()
        self._cycle_count: int = 0
        self._step_count: int = 0
        self._halt_requested: bool = False
        self._halted: bool = False

    # @intent:responsibility 初期状態のレジスタ群を生成します。
    @abstractmethod
    def _create_initial_state(self) -> Any:
        pass

    # @intent:responsibility CPUをリセットし、初期状態に戻します。サイクルカウンタも0に戻ります。
    def reset(self) -> None:
        self._state = self._create_initial_state()
        self._cycle_count = 0
        self._step_count = 0
        self._halt_requested = False
        self._halted = False

    @property
    def bus(self) -> MemoryPort:
        return self._bus

    @property
    def cycle_count(self) -> int:
        return self._cycle_count

    @property
    def step_count(self) -> int:
        return self._step_count

    @property
    def halted(self) -> bool:
        return self._halted

    # @intent:responsibility 現在のレジスタ状態の不変コピーを返します。
    @abstractmethod
    def get_state(self) -> Any:
        pass

    # @intent:responsibility 現在のPCからオペコードをフェッチし、PCを1進めます。
    @abstractmethod
    def _fetch(self) -> int:
        pass

    # @intent:responsibility オペコードに対応する命令定義を返します。未定義なら例外を送出します。
    @abstractmethod
    def _decode(self, opcode: int, address: int) -> Any:
        pass

    # @intent:responsibility デコードされた命令を実行し、実行結果をOperationとして返します。
    @abstractmethod
    def _execute(self, opcode: int, decoded: Any) -> Operation:
        pass

    # @intent:responsibility 実行ループの終了条件となる現在のPCを返します。
    @abstractmethod
    def _current_pc(self) -> int:
        pass

    # @intent:responsibility 診断用の1行表現を返します。
    @abstractmethod
    def render_state(self) -> str:
        pass

    # @intent:responsibility CPUを1命令サイクル進め、その結果のスナップショットを返します。
    # @intent:rationale Template Methodパターンを採用し、共通の実行フロー
    #                  （ログクリア→フェッチ→デコード→実行→サイクル加算→Snapshot生成）を定義します。
    def step(self) -> Snapshot:
        # 前サイクルまでの残存ログを破棄
        self._bus.get_and_clear_activity_log()
        initial_pc = self._current_pc()

        opcode = self._fetch()
        decoded = self._decode(opcode, initial_pc)
        operation = self._execute(opcode, decoded)

        self._cycle_count += operation.cycle_count
        self._step_count += 1

        diagnostic = self.render_state()
        logger.debug(diagnostic)

        return Snapshot(
            state=self.get_state(),
            operation=operation,
            metadata=Metadata(
                cycle_count=self._cycle_count,
                step_count=self._step_count,
                address=initial_pc,
                diagnostic=diagnostic,
            ),
            bus_activity=self._bus.get_and_clear_activity_log(),
        )

    # @intent:responsibility 停止要求を出します。実行ループは次の反復の先頭でこれを検出します。
    # run()の前に出された要求は、次のrun()が命令を実行する前に消費されます。
    def stop(self) -> None:
        self._halt_requested = True

    # @intent:responsibility Halted状態に達するまで命令を実行します。
    # @intent:return 実行した命令数。
    def run(self, max_steps: Optional[int] = None) -> int:
        """
        `max_steps`を指定した場合は最大その命令数まで実行します。
        指定しない場合は停止要求かPCがメモリ終端に達するまで実行し続けます。
        """
        self._halted = False
        executed = 0
        while True:
            if self._halt_requested:
                reason = "stop requested"
                break
            if max_steps is not None and executed >= max_steps:
                reason = "step budget exhausted"
                break
            if self._current_pc() >= self._bus.size:
                reason = "end of memory"
                break
            self.step()
            executed += 1

        self._halted = True
        self._halt_requested = False
        logger.info("Halted (%s) after %d steps, %d cycles", reason, executed, self._cycle_count)
        return executed

    @abstractmethod
    def get_register_map(self) -> Dict[str, int]:
        """
        現在のレジスタ値を辞書形式で返す。
        """
        pass

    @abstractmethod
    def get_flag_state(self) -> Dict[str, bool]:
        """
        現在のフラグ（ステータスレジスタ）の各ビットの状態を辞書形式で返す。
        """
        pass

    @abstractmethod
    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        """
        指定されたメモリ範囲を逆アセンブルし、(address, hex_bytes, text) のタプルリストを返す。
        """
        pass
