# reg16_vm/core/faults.py
"""
フォールト定義。

命令の要求する操作が未定義（ゼロ除算）または安全でない（範囲外のメモリ/スタックアクセス）
場合に報告されるエラー条件を定義します。
"""
from typing import Any, Optional

from reg16_vm.common.types import FaultKind

# @intent:responsibility 全てのフォールトの基底クラス。
class VmFault(Exception):
    """
    命令実行中に検出されたフォールト。
    フォールトを起こした命令はマシン状態を一切変更しません。
    """
    kind: FaultKind

    def __init__(self, message: str, instruction: Optional[Any] = None):
        super().__init__(message)
        self.instruction = instruction

class DivisionByZero(VmFault, ZeroDivisionError):
    kind = FaultKind.DIVISION_BY_ZERO

# @intent:responsibility LOAD/STOREおよび異常なSPでのPOPのアドレス範囲外アクセス。
class MemoryOutOfBounds(VmFault, IndexError):
    kind = FaultKind.MEMORY_OUT_OF_BOUNDS

    def __init__(self, message: str, address: int, instruction: Optional[Any] = None):
        super().__init__(message, instruction)
        self.address = address

class StackOverflow(VmFault):
    kind = FaultKind.STACK_OVERFLOW

    def __init__(self, message: str, sp: int, instruction: Optional[Any] = None):
        super().__init__(message, instruction)
        self.sp = sp

class StackUnderflow(VmFault):
    kind = FaultKind.STACK_UNDERFLOW
