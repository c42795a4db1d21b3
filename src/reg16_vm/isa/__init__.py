"""
命令セット実装パッケージ。
"""
from reg16_vm.common.types import ZeroFlagPolicy
from reg16_vm.core.state import MachineState
from reg16_vm.transport.memory import WordMemory
from .instructions import Instruction
from .maps import EXECUTE_MAP

# @intent:responsibility 命令を1つ実行し、マシンの状態を変更します。
# @intent:pre-condition `instruction`は閉じた命令集合のいずれかである必要があります。
def execute_instruction(instruction: Instruction, state: MachineState, memory: WordMemory,
                        policy: ZeroFlagPolicy = ZeroFlagPolicy.NEVER) -> None:
    """
    命令を実行し、レジスタ・SP・PC・フラグ・メモリを更新します。
    フォールトはVmFaultとして送出され、その場合状態は変更されません。
    """
    executor = EXECUTE_MAP.get(type(instruction))
    if executor is None:
        raise TypeError(f"Unsupported instruction: {instruction!r}")
    executor(state, memory, instruction, policy)
