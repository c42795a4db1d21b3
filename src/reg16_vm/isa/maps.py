# reg16_vm/isa/maps.py
"""
命令クラスから実行関数へのディスパッチテーブル。
"""
from typing import Callable, Dict, Type

from reg16_vm.common.types import ZeroFlagPolicy
from reg16_vm.core.state import MachineState
from reg16_vm.isa import alu, control, load
from reg16_vm.isa.instructions import (
    Add, Div, Instruction, Jmp, JmpNZ, JmpNZRel, JmpRel, JmpZ, JmpZRel, Load, Mov, Mul, Pop, Push, Store, Sub
)
from reg16_vm.transport.memory import WordMemory

# Execution Function Type
ExecFunc = Callable[[MachineState, WordMemory, Instruction, ZeroFlagPolicy], None]

EXECUTE_MAP: Dict[Type[Instruction], ExecFunc] = {
    # --- Arithmetic ---
    Add: alu.execute_add,
    Sub: alu.execute_sub,
    Mul: alu.execute_mul,
    Div: alu.execute_div,

    # --- Data Transfer ---
    Mov: load.execute_mov,
    Store: load.execute_store,
    Load: load.execute_load,
    Push: load.execute_push,
    Pop: load.execute_pop,

    # --- Control Flow ---
    Jmp: control.execute_jmp,
    JmpZ: control.execute_jmpz,
    JmpNZ: control.execute_jmpnz,
    JmpRel: control.execute_jmprel,
    JmpZRel: control.execute_jmpzrel,
    JmpNZRel: control.execute_jmpnzrel,
}
