import re
import yaml
from typing import Dict, Any, List
from .models import MachineConfig, MachineInitialState, MemoryBlock

class ConfigLoader:
    def load_from_file(self, path: str) -> MachineConfig:
        with open(path, 'r', encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return self._parse_config(data or {})

    def load_from_string(self, text: str) -> MachineConfig:
        return self._parse_config(yaml.safe_load(text) or {})

    def _parse_config(self, data: Dict[str, Any]) -> MachineConfig:
        if not isinstance(data, dict):
            raise ValueError(f"Machine config must be a mapping, got {type(data).__name__}")

        config = MachineConfig()
        if "memory_capacity" in data:
            config.memory_capacity = self._parse_int(data["memory_capacity"])
        config.zero_flag_policy = str(data.get("zero_flag_policy", config.zero_flag_policy)).lower()

        # Parse Initial State
        initial_state_data = data.get("initial_state") or {}
        config.initial_state = MachineInitialState(
            pc=self._parse_int(initial_state_data.get("pc", 0)),
            sp=self._parse_int(initial_state_data.get("sp", 0)),
            zero=self._parse_bool(initial_state_data.get("zero", False)),
            registers=self._parse_registers(initial_state_data.get("registers") or {})
        )

        # Parse Memory Blocks
        for block_data in data.get("memory") or []:
            if not isinstance(block_data, dict):
                raise ValueError(f"Memory block must be a mapping, got {type(block_data).__name__}")
            config.memory.append(MemoryBlock(
                start=self._parse_int(block_data.get("start", 0)),
                data=[self._parse_int(v) for v in block_data.get("data") or []],
                label=block_data.get("label", "")
            ))

        return config

    # @intent:utility_function レジスタ指定をリスト形式（R0から順）と辞書形式（"r3": 値）の両方で受け付けます。
    def _parse_registers(self, value: Any) -> Dict[int, int]:
        registers: Dict[int, int] = {}
        if isinstance(value, list):
            for index, reg_value in enumerate(value):
                registers[index] = self._parse_int(reg_value)
        elif isinstance(value, dict):
            for name, reg_value in value.items():
                registers[self._parse_register_name(name)] = self._parse_int(reg_value)
        else:
            raise ValueError(f"Invalid registers format: {value}")
        return registers

    def _parse_register_name(self, name: Any) -> int:
        if isinstance(name, int):
            return name
        match = re.fullmatch(r'[rR](\d+)', str(name).strip())
        if not match:
            raise ValueError(f"Invalid register name: {name}")
        return int(match.group(1))

    # @intent:utility_function 引用符付きの "false" などを真偽値として扱わず、YAMLの真偽値のみを受け付けます。
    def _parse_bool(self, value: Any) -> bool:
        if not isinstance(value, bool):
            raise ValueError(f"Invalid boolean format: {value!r}")
        return value

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            value = value.strip()
            if value.lower().startswith("0x"):
                return int(value, 16)
            return int(value)
        raise ValueError(f"Invalid integer format: {value}")
