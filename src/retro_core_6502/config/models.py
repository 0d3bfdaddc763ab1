from dataclasses import dataclass, field
from typing import List, Optional

DEFAULT_MEMORY_SIZE = 0x10000


@dataclass
class ProgramImage:
    load_address: int = 0x0000
    data: List[int] = field(default_factory=list)
    file: Optional[str] = None  # 生バイナリ。YAMLファイルからの相対パス


@dataclass
class CpuInitialState:
    pc: int = 0x0000
    sp: int = 0xFF
    use_reset_vector: bool = False  # プログラム配置後に$FFFCからPCを読み込む
    registers: dict = field(default_factory=dict)


@dataclass
class SystemConfig:
    memory_size: int = DEFAULT_MEMORY_SIZE
    program: ProgramImage = field(default_factory=ProgramImage)
    initial_state: CpuInitialState = field(default_factory=CpuInitialState)
    max_steps: Optional[int] = None
    log_level: Optional[str] = None
