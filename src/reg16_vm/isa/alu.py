# reg16_vm/isa/alu.py
"""
算術命令 (ADD, SUB, MUL, DIV) の実装。
固定幅レジスタマシンとして、結果は2^16を法としてラップアラウンドします。
"""
from reg16_vm.common.types import WORD_MASK, ZeroFlagPolicy
from reg16_vm.core.faults import DivisionByZero
from reg16_vm.core.state import MachineState
from reg16_vm.isa.instructions import Add, Div, Mul, Sub, RegRegInstruction
from reg16_vm.transport.memory import WordMemory

# @intent:responsibility 演算結果をレジスタへ書き戻し、ポリシーに応じてゼロフラグを更新します。
def _write_result(state: MachineState, instruction: RegRegInstruction, result: int,
                  policy: ZeroFlagPolicy) -> None:
    state.registers[instruction.r1] = result & WORD_MASK
    if policy is ZeroFlagPolicy.ARITHMETIC:
        state.zero = (result & WORD_MASK) == 0

def execute_add(state: MachineState, memory: WordMemory, instruction: Add, policy: ZeroFlagPolicy) -> None:
    a = state.registers[instruction.r1]
    b = state.registers[instruction.r2]
    _write_result(state, instruction, a + b, policy)

def execute_sub(state: MachineState, memory: WordMemory, instruction: Sub, policy: ZeroFlagPolicy) -> None:
    a = state.registers[instruction.r1]
    b = state.registers[instruction.r2]
    _write_result(state, instruction, a - b, policy)

def execute_mul(state: MachineState, memory: WordMemory, instruction: Mul, policy: ZeroFlagPolicy) -> None:
    a = state.registers[instruction.r1]
    b = state.registers[instruction.r2]
    _write_result(state, instruction, a * b, policy)

# @intent:responsibility 符号なし整数除算。除数0はフォールトとし、転送先レジスタは変更しません。
def execute_div(state: MachineState, memory: WordMemory, instruction: Div, policy: ZeroFlagPolicy) -> None:
    divisor = state.registers[instruction.r2]
    if divisor == 0:
        raise DivisionByZero(
            f"Division by zero: R{instruction.r2} is 0 in '{instruction}'.", instruction=instruction
        )
    _write_result(state, instruction, state.registers[instruction.r1] // divisor, policy)
