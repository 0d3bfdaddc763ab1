# tests/arch/mos6502/conftest.py
import pytest

from retro_core_6502.transport.bus import MemoryPort
from retro_core_6502.arch.mos6502.cpu import Mos6502Cpu

CODE_START = 0x0200


@pytest.fixture
def bus():
    return MemoryPort(bytearray(0x10000))


@pytest.fixture
def cpu(bus):
    return Mos6502Cpu(bus)


@pytest.fixture
def load(cpu, bus):
    """
    プログラムを配置してPCをその先頭に合わせるヘルパー。
    """
    def _load(code, at=CODE_START):
        bus.load(at, code)
        cpu.registers.pc = at
        return cpu
    return _load
