# retro_core_6502/transport/bus.py
"""
Transport Layer (メモリポート)

このモジュールは、呼び出し側が用意したバイト配列とCPUとの境界を定義します。
コアはメモリを確保も所有もせず、実行中に借用するだけです。
"""
from dataclasses import dataclass
from enum import Enum
from typing import List, MutableSequence

from retro_core_6502.common.errors import OutOfRange

STACK_PAGE = 0x0100
NMI_VECTOR = 0xFFFA
RESET_VECTOR = 0xFFFC
IRQ_VECTOR = 0xFFFE


# @intent:responsibility バスアクセスを記録するためのタイプを定義します。
class BusAccessType(Enum):
    READ = "READ"
    WRITE = "WRITE"


# @intent:responsibility 個々のバスアクセス操作を記録します。
@dataclass(frozen=True)
class BusAccess:
    """
    バス上で行われた単一のアクセス（読み込みまたは書き込み）を記録するデータクラス。
    """
    address: int
    data: int  # 8bit value
    access_type: BusAccessType


# @intent:responsibility 外部から注入されたバイト配列への読み書きを仲介し、全アクセスを記録します。
# @intent:rationale メモリのサイズは配列の長さで決まり、0x10000未満の小さなイメージも扱えます。
class MemoryPort:
    """
    外部のバイトアドレス可能な配列（bytearray, list[int]など）をラップするメモリポート。
    範囲外アクセスは`OutOfRange`を送出します。
    """
    # @intent:pre-condition `memory`は長さを持ち、添字で読み書きできる配列である必要があります。
    def __init__(self, memory: MutableSequence[int]):
        self._memory = memory
        self._bus_activity_log: List[BusAccess] = []

    @property
    def size(self) -> int:
        return len(self._memory)

    @property
    def memory(self) -> MutableSequence[int]:
        return self._memory

    def _check(self, address: int) -> None:
        if not 0 <= address < len(self._memory):
            raise OutOfRange(address, len(self._memory))

    def _log_access(self, address: int, data: int, access_type: BusAccessType) -> None:
        self._bus_activity_log.append(BusAccess(address=address, data=data, access_type=access_type))

    # @intent:responsibility 記録されたバスアクティビティログを取得し、クリアします。
    def get_and_clear_activity_log(self) -> List[BusAccess]:
        log = self._bus_activity_log
        self._bus_activity_log = []
        return log

    # @intent:responsibility 指定されたアドレスから8bitのデータを読み出します。
    def read(self, address: int) -> int:
        self._check(address)
        data = self._memory[address] & 0xFF
        self._log_access(address, data, BusAccessType.READ)
        return data

    # @intent:responsibility ログを記録せずに読み出します。逆アセンブラやダンプ用。
    def peek(self, address: int) -> int:
        self._check(address)
        return self._memory[address] & 0xFF

    # @intent:responsibility 指定されたアドレスに8bitのデータを書き込みます。
    # @intent:pre-condition データは8bit値である必要があります。
    def write(self, address: int, data: int) -> None:
        self._check(address)
        if not 0 <= data <= 0xFF:
            raise ValueError(f"Data {data} is not an 8-bit value.")
        self._memory[address] = data
        self._log_access(address, data, BusAccessType.WRITE)

    # @intent:responsibility リトルエンディアンの16bitワードを読み出します。
    def read_word(self, address: int) -> int:
        # 上位バイトの範囲外を先に検出する
        self._check(address + 1)
        lo = self.read(address)
        hi = self.read(address + 1)
        return (hi << 8) | lo

    # @intent:responsibility 連続したバイト列を配置します。プログラムのロードなど呼び出し側の用途。
    def load(self, address: int, data) -> None:
        mark = len(self._bus_activity_log)
        try:
            for offset, byte in enumerate(data):
                self.write(address + offset, byte)
        finally:
            # ロードはCPUの実行とは無関係なのでログに残さない
            del self._bus_activity_log[mark:]
