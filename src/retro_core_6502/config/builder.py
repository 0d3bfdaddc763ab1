import logging
import warnings
from typing import Tuple

from retro_core_6502.transport.bus import MemoryPort
from retro_core_6502.arch.mos6502.cpu import Mos6502Cpu
from .models import SystemConfig, CpuInitialState

# initial_state.registersで指定できるレジスタ
_REGISTER_NAMES = ("a", "x", "y", "s", "p")


# @intent:responsibility システム構成（Config）に基づいて、メモリイメージとCPUを生成・接続し、初期状態を適用します。
class SystemBuilder:
    def build_system(self, config: SystemConfig) -> Tuple[Mos6502Cpu, MemoryPort]:
        if config.log_level:
            logging.getLogger("retro_core_6502").setLevel(config.log_level.upper())

        # メモリはハーネス側で確保し、コアには借用させる
        memory = bytearray(config.memory_size)
        bus = MemoryPort(memory)

        program = config.program
        image = list(program.data)
        if program.file:
            with open(program.file, 'rb') as f:
                image.extend(f.read())
        bus.load(program.load_address, image)

        cpu = Mos6502Cpu(bus)
        self.apply_initial_state(cpu, config.initial_state)
        return cpu, bus

    # @intent:responsibility システムを構築し、Configの`max_steps`を上限としてHalted状態まで実行します。
    # @intent:return 構築したCPU、メモリポート、実行した命令数。
    def run_system(self, config: SystemConfig) -> Tuple[Mos6502Cpu, MemoryPort, int]:
        cpu, bus = self.build_system(config)
        executed = cpu.run(max_steps=config.max_steps)
        return cpu, bus, executed

    # @intent:responsibility Configで定義された初期状態をCPUに適用します。
    def apply_initial_state(self, cpu: Mos6502Cpu, config_state: CpuInitialState) -> None:
        """
        CPUをリセットし、Configから指定された初期値を適用します。
        リセットベクトルを使う場合、PCはベクトルから読み込まれ`pc`の指定は無視されます。
        """
        cpu.reset(use_reset_vector=config_state.use_reset_vector)
        regs = cpu.registers

        if not config_state.use_reset_vector:
            regs.pc = config_state.pc
        regs.s = config_state.sp

        for reg_name, value in config_state.registers.items():
            if reg_name not in _REGISTER_NAMES:
                warnings.warn(f"Unknown register '{reg_name}' in initial_state, ignored")
                continue
            if reg_name == "p":
                regs.p.value = value
            else:
                setattr(regs, reg_name, value)
