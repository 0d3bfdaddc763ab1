"""
retro_core_6502: 6502系8bitプロセッサの命令レベルエミュレータ。
"""
from retro_core_6502.arch.mos6502 import Mos6502Cpu, RegisterFile, StatusRegister
from retro_core_6502.common.errors import (
    EmulatorError,
    IllegalOpcode,
    IndexOutOfRange,
    InvalidWidth,
    OutOfRange,
)
from retro_core_6502.core.bit_field import BitField
from retro_core_6502.transport.bus import MemoryPort

__version__ = "0.1.0"
