# reg16_vm/core/state.py
"""
Core Layer (マシン状態)

このモジュールは、レジスタファイル、スタックポインタ、プログラムカウンタ、
ゼロフラグを保持するデータ構造を定義します。メモリはWordMemoryが保持します。
"""
from dataclasses import dataclass, field, replace
from typing import List

from reg16_vm.common.types import NUM_REGISTERS

# @intent:responsibility マシンのレジスタ状態を保持します。振る舞いは持ちません。
@dataclass
class MachineState:
    """
    マシンのレジスタ状態を保持するデータクラス。
    """
    registers: List[int] = field(default_factory=lambda: [0] * NUM_REGISTERS)
    sp: int = 0x0000  # Stack Pointer (次にPushする空きセル)
    pc: int = 0x0000  # Program Counter (次にフェッチする命令のインデックス)
    zero: bool = False  # Zero flag

    # @intent:responsibility レジスタリストを共有しない独立したコピーを返します。
    def copy(self) -> 'MachineState':
        return replace(self, registers=list(self.registers))

    # @intent:responsibility dataclasses.replaceのラッパー。レジスタリストは常に複製されます。
    def replace(self, **changes) -> 'MachineState':
        if "registers" not in changes:
            changes["registers"] = list(self.registers)
        return replace(self, **changes)
