# reg16_vm/isa/control.py
"""
分岐命令（絶対/相対、条件付き）の実装。
ゼロフラグは読み出すのみで、分岐命令がフラグを変更することはありません。
PCの範囲チェックは外部のフェッチ段の責務です。
"""
from reg16_vm.common.types import WORD_MASK, ZeroFlagPolicy
from reg16_vm.core.state import MachineState
from reg16_vm.isa.instructions import (
    AbsoluteJumpInstruction, Jmp, JmpNZ, JmpNZRel, JmpRel, JmpZ, JmpZRel, RelativeJumpInstruction
)
from reg16_vm.transport.memory import WordMemory

def _jump_absolute(state: MachineState, instruction: AbsoluteJumpInstruction) -> None:
    state.pc = instruction.target

# @intent:note 相対分岐は2^16を法としてラップアラウンドします。
def _jump_relative(state: MachineState, instruction: RelativeJumpInstruction) -> None:
    state.pc = (state.pc + instruction.offset) & WORD_MASK

def execute_jmp(state: MachineState, memory: WordMemory, instruction: Jmp, policy: ZeroFlagPolicy) -> None:
    _jump_absolute(state, instruction)

def execute_jmpz(state: MachineState, memory: WordMemory, instruction: JmpZ, policy: ZeroFlagPolicy) -> None:
    if state.zero:
        _jump_absolute(state, instruction)

def execute_jmpnz(state: MachineState, memory: WordMemory, instruction: JmpNZ, policy: ZeroFlagPolicy) -> None:
    if not state.zero:
        _jump_absolute(state, instruction)

def execute_jmprel(state: MachineState, memory: WordMemory, instruction: JmpRel, policy: ZeroFlagPolicy) -> None:
    _jump_relative(state, instruction)

def execute_jmpzrel(state: MachineState, memory: WordMemory, instruction: JmpZRel, policy: ZeroFlagPolicy) -> None:
    if state.zero:
        _jump_relative(state, instruction)

def execute_jmpnzrel(state: MachineState, memory: WordMemory, instruction: JmpNZRel,
                     policy: ZeroFlagPolicy) -> None:
    if not state.zero:
        _jump_relative(state, instruction)
