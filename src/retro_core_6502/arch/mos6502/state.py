# src/retro_core_6502/arch/mos6502/state.py
"""
MOS 6502 CPUの状態定義。

ステータスレジスタ（名前付きフラグ）とレジスタファイルを提供します。
どちらも値の保持とマスク処理以外の振る舞いは持ちません。
"""
from dataclasses import dataclass
from typing import Optional

from retro_core_6502.core.bit_field import BitField
from retro_core_6502.transport.bus import STACK_PAGE

# Flag bit positions
FLAG_C = 0  # Carry
FLAG_Z = 1  # Zero
FLAG_I = 2  # Interrupt Disable
FLAG_D = 3  # Decimal Mode (settable, but arithmetic stays binary)
FLAG_B = 4  # Break Command
FLAG_R = 5  # Reserved (should be 1)
FLAG_V = 6  # Overflow
FLAG_N = 7  # Negative

# 表示順（上位ビットから）
_RENDER_ORDER = (
    (FLAG_N, "N"), (FLAG_V, "V"), (FLAG_R, "R"), (FLAG_B, "B"),
    (FLAG_D, "D"), (FLAG_I, "I"), (FLAG_Z, "Z"), (FLAG_C, "C"),
)


# @intent:responsibility 8bitのステータスレジスタPを名前付きフラグとして扱います。
# @intent:rationale 汎用BitFieldを継承せず内部に保持する（合成）ことで、
#                  フラグ操作以外のビット操作APIを外部に露出させません。
class StatusRegister:
    """
    MOS 6502のステータスレジスタ。

    予約ビットRは通常1ですが、スタックから復帰したバイトを`value`に直接代入した場合は
    0のまま保持されます（自動では1に戻りません）。
    """
    C_FLAG = 1 << FLAG_C
    Z_FLAG = 1 << FLAG_Z
    I_FLAG = 1 << FLAG_I
    D_FLAG = 1 << FLAG_D
    B_FLAG = 1 << FLAG_B
    R_FLAG = 1 << FLAG_R
    V_FLAG = 1 << FLAG_V
    N_FLAG = 1 << FLAG_N

    def __init__(self, value: Optional[int] = None):
        self._bits = BitField(8)
        if value is None:
            self.reset()
        else:
            self._bits.value = value

    # @intent:responsibility 全ビットを0にし、予約ビットRのみ1にします。
    def reset(self) -> None:
        self._bits.value = 0
        self._bits.set_bit(FLAG_R, 1)

    @property
    def value(self) -> int:
        return self._bits.value

    @value.setter
    def value(self, value: int) -> None:
        self._bits.value = value

    def set_flag(self, bit: int, on=True) -> None:
        self._bits.set_bit(bit, 1 if on else 0)

    def clear_flag(self, bit: int) -> None:
        self._bits.set_bit(bit, 0)

    def get_flag(self, bit: int) -> int:
        return self._bits.bit(bit)

    def copy(self) -> "StatusRegister":
        return StatusRegister(self.value)

    # --- Per-flag helpers (return self for chaining) ---

    def set_carry(self, on=True) -> "StatusRegister":
        self.set_flag(FLAG_C, on)
        return self

    def clear_carry(self) -> "StatusRegister":
        return self.set_carry(False)

    def set_zero(self, on=True) -> "StatusRegister":
        self.set_flag(FLAG_Z, on)
        return self

    def clear_zero(self) -> "StatusRegister":
        return self.set_zero(False)

    def set_interrupt(self, on=True) -> "StatusRegister":
        self.set_flag(FLAG_I, on)
        return self

    def clear_interrupt(self) -> "StatusRegister":
        return self.set_interrupt(False)

    def set_decimal(self, on=True) -> "StatusRegister":
        self.set_flag(FLAG_D, on)
        return self

    def clear_decimal(self) -> "StatusRegister":
        return self.set_decimal(False)

    def set_break(self, on=True) -> "StatusRegister":
        self.set_flag(FLAG_B, on)
        return self

    def clear_break(self) -> "StatusRegister":
        return self.set_break(False)

    def set_overflow(self, on=True) -> "StatusRegister":
        self.set_flag(FLAG_V, on)
        return self

    def clear_overflow(self) -> "StatusRegister":
        return self.set_overflow(False)

    def set_negative(self, on=True) -> "StatusRegister":
        self.set_flag(FLAG_N, on)
        return self

    def clear_negative(self) -> "StatusRegister":
        return self.set_negative(False)

    # @intent:responsibility フラグの状態を取得するヘルパープロパティ。
    @property
    def flag_c(self) -> bool: return bool(self.value & self.C_FLAG)
    @property
    def flag_z(self) -> bool: return bool(self.value & self.Z_FLAG)
    @property
    def flag_i(self) -> bool: return bool(self.value & self.I_FLAG)
    @property
    def flag_d(self) -> bool: return bool(self.value & self.D_FLAG)
    @property
    def flag_b(self) -> bool: return bool(self.value & self.B_FLAG)
    @property
    def flag_r(self) -> bool: return bool(self.value & self.R_FLAG)
    @property
    def flag_v(self) -> bool: return bool(self.value & self.V_FLAG)
    @property
    def flag_n(self) -> bool: return bool(self.value & self.N_FLAG)

    # @intent:responsibility 診断用の固定8文字表現（N V R B D I Z Cの順、クリアは'_'）。
    def render(self) -> str:
        return "".join(letter if self.get_flag(bit) else "_" for bit, letter in _RENDER_ORDER)

    def __str__(self) -> str:
        return self.render()

    def __eq__(self, other) -> bool:
        if isinstance(other, StatusRegister):
            return self.value == other.value
        return NotImplemented

    def __repr__(self) -> str:
        return f"StatusRegister(0x{self.value:02X} {self.render()})"


# @intent:responsibility ある時点のレジスタ値を不変に記録します。Snapshotに格納されます。
@dataclass(frozen=True)
class RegisterSnapshot:
    pc: int
    a: int
    x: int
    y: int
    s: int
    p: int

    @property
    def flag_c(self) -> bool: return bool(self.p & StatusRegister.C_FLAG)
    @property
    def flag_z(self) -> bool: return bool(self.p & StatusRegister.Z_FLAG)
    @property
    def flag_i(self) -> bool: return bool(self.p & StatusRegister.I_FLAG)
    @property
    def flag_d(self) -> bool: return bool(self.p & StatusRegister.D_FLAG)
    @property
    def flag_v(self) -> bool: return bool(self.p & StatusRegister.V_FLAG)
    @property
    def flag_n(self) -> bool: return bool(self.p & StatusRegister.N_FLAG)


# @intent:responsibility MOS 6502のレジスタ群（PC, A, X, Y, S, P）を保持します。
# @intent:rationale 各レジスタはBitFieldで保持し、代入時に必ず幅でマスクされます。
#                  例えば`pc = pc + 1`は0x10000で0に戻ります。
class RegisterFile:
    """
    MOS 6502 CPUのレジスタ状態。

    構築直後はA=X=Y=PC=0、S=0xFF、Pは予約ビットRのみセットされています。
    """
    def __init__(self):
        self._pc = BitField(16)
        self._a = BitField(8)
        self._x = BitField(8)
        self._y = BitField(8)
        self._s = BitField(8, 0xFF)
        self.p = StatusRegister()

    @property
    def pc(self) -> int: return self._pc.value
    @pc.setter
    def pc(self, value: int) -> None: self._pc.value = value

    @property
    def a(self) -> int: return self._a.value
    @a.setter
    def a(self, value: int) -> None: self._a.value = value

    @property
    def x(self) -> int: return self._x.value
    @x.setter
    def x(self, value: int) -> None: self._x.value = value

    @property
    def y(self) -> int: return self._y.value
    @y.setter
    def y(self, value: int) -> None: self._y.value = value

    @property
    def s(self) -> int: return self._s.value
    @s.setter
    def s(self, value: int) -> None: self._s.value = value

    # @intent:responsibility スタックポインタが指す物理アドレス（$0100 + S）。
    @property
    def stack_address(self) -> int:
        return STACK_PAGE + self._s.value

    def snapshot(self) -> RegisterSnapshot:
        return RegisterSnapshot(pc=self.pc, a=self.a, x=self.x, y=self.y, s=self.s, p=self.p.value)

    # @intent:responsibility スナップショットからレジスタ値を復元します。
    def restore(self, snapshot: RegisterSnapshot) -> None:
        self.pc = snapshot.pc
        self.a = snapshot.a
        self.x = snapshot.x
        self.y = snapshot.y
        self.s = snapshot.s
        self.p.value = snapshot.p

    def __repr__(self) -> str:
        return (f"RegisterFile(pc=0x{self.pc:04X}, a=0x{self.a:02X}, x=0x{self.x:02X}, "
                f"y=0x{self.y:02X}, s=0x{self.s:02X}, p={self.p.render()})")
