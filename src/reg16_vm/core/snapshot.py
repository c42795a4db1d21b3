# reg16_vm/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、1命令の実行結果を記録する不変のデータ構造と、
実行を完全に再開するために必要な最小限のマシンイメージを定義します。
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from reg16_vm.common.types import NUM_REGISTERS, is_word
from reg16_vm.core.faults import VmFault
from reg16_vm.core.state import MachineState
from reg16_vm.isa.instructions import Instruction
from reg16_vm.transport.memory import MemoryAccess

# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True) # 不変データ構造
class Metadata:
    """
    実行に関するメタデータ（累計実行命令数、命令の表示文字列）を記録するデータクラス。
    """
    step_count: int
    text: Optional[str] = None # 例: "ADD R0, R1"

# @intent:responsibility 1命令の実行結果を不変に記録します。
@dataclass(frozen=True) # 不変データ構造
class Snapshot:
    """
    1命令実行後のマシン状態（コピー）、実行した命令、フォールト、メモリアクティビティを記録します。
    faultがNoneでない場合、stateは実行前と同一です。
    """
    state: MachineState
    instruction: Instruction
    metadata: Metadata
    fault: Optional[VmFault] = None
    memory_activity: List[MemoryAccess] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.fault is None

# @intent:responsibility 実行をビット単位で再開するための最小限の状態（レジスタ、SP、PC、フラグ、メモリ全体）。
@dataclass(frozen=True)
class MachineImage:
    registers: Tuple[int, ...]
    sp: int
    pc: int
    zero: bool
    memory: Tuple[int, ...]

    def __post_init__(self):
        if len(self.registers) != NUM_REGISTERS:
            raise ValueError(f"Image must hold exactly {NUM_REGISTERS} registers, got {len(self.registers)}.")
        if not self.memory:
            raise ValueError("Image memory must not be empty.")
        for name, values in (("register", self.registers), ("memory", self.memory)):
            for value in values:
                if not is_word(value):
                    raise ValueError(f"Image {name} value {value!r} is not a 16-bit word.")
        if not is_word(self.pc):
            raise ValueError(f"Image PC {self.pc!r} is not a 16-bit word.")
        if not is_word(self.sp) or self.sp > len(self.memory):
            raise ValueError(f"Image SP {self.sp!r} is outside memory of size {len(self.memory)}.")
        if not isinstance(self.zero, bool):
            raise ValueError(f"Image zero flag {self.zero!r} is not a boolean.")

    # @intent:responsibility プレーンなdict表現に変換します。
    def to_dict(self) -> Dict[str, Any]:
        return {
            "registers": list(self.registers),
            "sp": self.sp,
            "pc": self.pc,
            "zero": self.zero,
            "memory": list(self.memory),
        }

    # @intent:responsibility dict表現からイメージを復元します。
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MachineImage':
        try:
            return cls(
                registers=tuple(data["registers"]),
                sp=data["sp"],
                pc=data["pc"],
                zero=data["zero"],
                memory=tuple(data["memory"]),
            )
        except KeyError as e:
            raise ValueError(f"Image is missing field {e}") from e
