"""
共通の例外定義を提供するモジュール。

エミュレータコアが送出する全ての例外はEmulatorErrorを基底とします。
呼び出し側が組み込み例外（ValueError, IndexError）で捕捉できるよう、
それぞれ対応する組み込み例外も継承します。
"""


# @intent:responsibility エミュレータコアの全ての例外の基底クラス。
class EmulatorError(Exception):
    pass


# @intent:responsibility 0以下のビット幅でレジスタを構築しようとした。
class InvalidWidth(EmulatorError, ValueError):
    def __init__(self, width):
        super().__init__(f"Bit width must be a positive integer, got {width!r}.")
        self.width = width


# @intent:responsibility ビット/ビット範囲のインデックスがレジスタ幅を超えた。
class IndexOutOfRange(EmulatorError, IndexError):
    pass


# @intent:responsibility メモリのアドレス空間外へのアクセス。
class OutOfRange(EmulatorError, IndexError):
    def __init__(self, address: int, size: int):
        super().__init__(f"Address {address:#06x} out of range for memory of size {size:#x}.")
        self.address = address
        self.size = size


# @intent:responsibility ディスパッチテーブルに存在しないオペコードをフェッチした。
class IllegalOpcode(EmulatorError, ValueError):
    def __init__(self, opcode: int, address: int):
        super().__init__(f"Illegal opcode ${opcode:02X} at ${address:04X}.")
        self.opcode = opcode
        self.address = address
