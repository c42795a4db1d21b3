from dataclasses import dataclass, field
from typing import Dict, List

from reg16_vm.common.types import DEFAULT_MEMORY_CAPACITY

@dataclass
class MemoryBlock:
    start: int
    data: List[int] = field(default_factory=list)
    label: str = ""

@dataclass
class MachineInitialState:
    pc: int = 0x0000
    sp: int = 0x0000
    zero: bool = False
    registers: Dict[int, int] = field(default_factory=dict) # レジスタ番号 -> 値

@dataclass
class MachineConfig:
    memory_capacity: int = DEFAULT_MEMORY_CAPACITY
    zero_flag_policy: str = "never"  # "never", "arithmetic"
    initial_state: MachineInitialState = field(default_factory=MachineInitialState)
    memory: List[MemoryBlock] = field(default_factory=list)
