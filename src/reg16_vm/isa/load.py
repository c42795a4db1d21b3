# reg16_vm/isa/load.py
"""
データ転送命令 (MOV, STORE, LOAD, PUSH, POP) の実装。
スタックとアドレス指定メモリは同一の線形空間を共有します。
"""
from reg16_vm.common.types import ZeroFlagPolicy
from reg16_vm.core.faults import MemoryOutOfBounds, StackOverflow, StackUnderflow
from reg16_vm.core.state import MachineState
from reg16_vm.isa.instructions import Load, Mov, Pop, Push, Store
from reg16_vm.transport.memory import WordMemory

def _check_address(memory: WordMemory, address: int, instruction) -> None:
    if not memory.contains(address):
        raise MemoryOutOfBounds(
            f"Address {address:#06x} out of bounds for memory of size {memory.get_size()} in '{instruction}'.",
            address=address,
            instruction=instruction,
        )

def execute_mov(state: MachineState, memory: WordMemory, instruction: Mov, policy: ZeroFlagPolicy) -> None:
    state.registers[instruction.r1] = state.registers[instruction.r2]

# @intent:responsibility memory[reg[r1]] <- reg[r2]
def execute_store(state: MachineState, memory: WordMemory, instruction: Store, policy: ZeroFlagPolicy) -> None:
    address = state.registers[instruction.r1]
    _check_address(memory, address, instruction)
    memory.write(address, state.registers[instruction.r2])

# @intent:responsibility reg[r1] <- memory[reg[r2]]
def execute_load(state: MachineState, memory: WordMemory, instruction: Load, policy: ZeroFlagPolicy) -> None:
    address = state.registers[instruction.r2]
    _check_address(memory, address, instruction)
    state.registers[instruction.r1] = memory.read(address)

# @intent:responsibility memory[SP] <- reg; SP <- SP + 1
# @intent:pre-condition SPが容量以上の場合はStackOverflowとし、書き込みは行いません。
def execute_push(state: MachineState, memory: WordMemory, instruction: Push, policy: ZeroFlagPolicy) -> None:
    sp = state.sp
    if sp >= memory.get_size():
        raise StackOverflow(
            f"Stack overflow: SP={sp:#06x} at capacity {memory.get_size()} in '{instruction}'.",
            sp=sp,
            instruction=instruction,
        )
    memory.write(sp, state.registers[instruction.reg])
    state.sp = sp + 1

# @intent:responsibility SP <- SP - 1; reg <- memory[SP]
def execute_pop(state: MachineState, memory: WordMemory, instruction: Pop, policy: ZeroFlagPolicy) -> None:
    sp = state.sp
    if sp == 0:
        raise StackUnderflow(f"Stack underflow: SP is 0 in '{instruction}'.", instruction=instruction)
    # SPがホスト側で容量外に設定されている場合
    _check_address(memory, sp - 1, instruction)
    state.registers[instruction.reg] = memory.read(sp - 1)
    state.sp = sp - 1
