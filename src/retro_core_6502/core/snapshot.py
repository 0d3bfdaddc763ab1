# retro_core_6502/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、1命令実行後のCPUとバスの状態を記録した不変のデータ構造を定義します。
診断表示と、デバッグ時の状態記録に用いる責務を負います。
"""
from dataclasses import dataclass, field
from typing import Any, List, Optional

from retro_core_6502.transport.bus import BusAccess


# @intent:responsibility 実行された命令の詳細を記録します。
@dataclass(frozen=True)
class Operation:
    """
    実行された命令の詳細（オペコード、ニーモニック、オペランド）を記録するデータクラス。
    """
    opcode: int
    mnemonic: str  # 例: "JMP"
    operands: List[str] = field(default_factory=list)  # 例: ["$1234"]
    operand_bytes: List[int] = field(default_factory=list)  # 生のオペランドバイト
    cycle_count: int = 0  # ページ交差・分岐成立による加算を含む実サイクル数
    length: int = 1  # 命令のバイト長

    @property
    def opcode_hex(self) -> str:
        return f"{self.opcode:02X}"

    @property
    def text(self) -> str:
        if self.operands:
            return f"{self.mnemonic} {', '.join(self.operands)}"
        return self.mnemonic


# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True)
class Metadata:
    cycle_count: int  # 累計サイクル数
    step_count: int  # 累計実行命令数
    address: int  # 命令の先頭アドレス
    diagnostic: Optional[str] = None  # 例: "PC:0002 CLK:0004 A:00 ..."


# @intent:responsibility ある一時点におけるCPUとバスの状態を不変に記録します。
@dataclass(frozen=True)
class Snapshot:
    """
    ある一時点における、CPUとバスの状態を記録した不変のデータ構造。
    `state`はアーキテクチャ固有の不変レジスタ記録（例: RegisterSnapshot）です。
    """
    state: Any
    operation: Operation
    metadata: Metadata
    bus_activity: List[BusAccess] = field(default_factory=list)
