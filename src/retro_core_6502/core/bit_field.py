# retro_core_6502/core/bit_field.py
"""
Core Layer (固定幅ビットフィールド)

このモジュールは、レジスタの値を保持する固定幅の符号なし整数コンテナを提供します。
値は常にビット幅のマスク内に収められ、算術オーバーフローは実機同様に切り捨てられます。
"""
from retro_core_6502.common.errors import IndexOutOfRange, InvalidWidth


# @intent:responsibility 固定幅でマスクされた符号なし整数を保持し、ビット単位のアクセスを提供します。
class BitField:
    """
    幅`width`ビットの符号なし整数。

    代入された値は黙ってマスクされます（例外は送出しない）。これはハードウェアの
    桁あふれによる切り捨てをモデル化したものです。
    """
    # @intent:pre-condition `width`は1以上の整数である必要があります。
    def __init__(self, width: int, value: int = 0):
        if isinstance(width, bool) or not isinstance(width, int) or width <= 0:
            raise InvalidWidth(width)
        self._width = width
        self._mask = (1 << width) - 1
        self._value = value & self._mask

    @property
    def width(self) -> int:
        return self._width

    @property
    def mask(self) -> int:
        return self._mask

    @property
    def value(self) -> int:
        return self._value

    @value.setter
    def value(self, value: int) -> None:
        self._value = value & self._mask

    def get(self) -> int:
        return self._value

    def set(self, value: int) -> None:
        self.value = value

    # @intent:responsibility 指定ビットの値(0または1)を返します。
    def bit(self, index: int) -> int:
        self._check_index(index)
        return (self._value >> index) & 1

    # @intent:responsibility 指定ビットに0または1を書き込みます。
    def set_bit(self, index: int, on) -> None:
        self._check_index(index)
        if on:
            self._value |= 1 << index
        else:
            self._value &= ~(1 << index) & self._mask

    # @intent:responsibility begin..end(両端を含む)のビット列を0ビット目に詰めて返します。
    def bit_range(self, begin: int, end: int) -> int:
        """
        `(value & ((1 << (end + 1)) - 1)) >> begin` を返します。
        """
        if begin < 0 or end >= self._width or begin > end:
            raise IndexOutOfRange(
                f"Bit range {begin}..{end} out of range for {self._width}-bit field."
            )
        return (self._value & ((1 << (end + 1)) - 1)) >> begin

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self._width:
            raise IndexOutOfRange(
                f"Bit index {index} out of range for {self._width}-bit field."
            )

    def __int__(self) -> int:
        return self._value

    def __eq__(self, other) -> bool:
        if isinstance(other, BitField):
            return self._width == other._width and self._value == other._value
        return NotImplemented

    def __repr__(self) -> str:
        digits = (self._width + 3) // 4
        return f"{type(self).__name__}(width={self._width}, value=0x{self._value:0{digits}X})"
