# src/retro_core_6502/arch/mos6502/__init__.py
"""
MOS 6502 Architecture Package
"""
from .cpu import InterruptKind, Mos6502Cpu
from .state import RegisterFile, RegisterSnapshot, StatusRegister
