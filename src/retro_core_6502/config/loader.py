import os
from typing import Any, Dict, Optional

import yaml

from .models import DEFAULT_MEMORY_SIZE, CpuInitialState, ProgramImage, SystemConfig


class ConfigLoader:
    def load_from_file(self, path: str) -> SystemConfig:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        config = self._parse_config(data or {})
        # 相対パスはYAMLファイルの位置を基準に解決する
        if config.program.file and not os.path.isabs(config.program.file):
            config.program.file = os.path.join(os.path.dirname(os.path.abspath(path)),
                                               config.program.file)
        return config

    def load_from_string(self, text: str) -> SystemConfig:
        return self._parse_config(yaml.safe_load(text) or {})

    def _parse_config(self, data: Dict[str, Any]) -> SystemConfig:
        if not isinstance(data, dict):
            raise ValueError(f"Configuration root must be a mapping, got {data!r}")

        memory_size = self._parse_int(data.get("memory_size", DEFAULT_MEMORY_SIZE))
        if memory_size <= 0:
            raise ValueError(f"Invalid memory_size: {memory_size}")

        # Parse Program
        program_data = data.get("program", {}) or {}
        program = ProgramImage(
            load_address=self._parse_int(program_data.get("load_address", 0)),
            data=[self._parse_int(b) for b in program_data.get("data", []) or []],
            file=program_data.get("file"),
        )

        # Parse Initial State
        initial_state_data = data.get("initial_state", {}) or {}
        registers = {
            str(name).lower(): self._parse_int(value)
            for name, value in (initial_state_data.get("registers", {}) or {}).items()
        }
        initial_state = CpuInitialState(
            pc=self._parse_int(initial_state_data.get("pc", 0)),
            sp=self._parse_int(initial_state_data.get("sp", 0xFF)),
            use_reset_vector=bool(initial_state_data.get("use_reset_vector", False)),
            registers=registers,
        )

        return SystemConfig(
            memory_size=memory_size,
            program=program,
            initial_state=initial_state,
            max_steps=self._parse_optional_int(data.get("max_steps")),
            log_level=data.get("log_level"),
        )

    def _parse_optional_int(self, value: Any) -> Optional[int]:
        if value is None:
            return None
        return self._parse_int(value)

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            try:
                if value.lower().startswith("0x"):
                    return int(value, 16)
                return int(value)
            except ValueError:
                raise ValueError(f"Invalid integer format: {value}") from None
        raise ValueError(f"Invalid integer format: {value}")
