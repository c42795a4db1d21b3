# reg16_vm/core/processor.py
"""
Core Layer (フェッチ/実行ループ)

外部から与えられたデコード済みプログラム（命令のシーケンス）からPCの位置の命令を
フェッチし、Machine.step()に渡す駆動部を提供します。
マシン自体はデコード方式に依存しません。
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from reg16_vm.common.types import WORD_MASK
from reg16_vm.core.machine import Machine
from reg16_vm.core.snapshot import Snapshot
from reg16_vm.isa.instructions import Instruction

# @intent:responsibility PCがプログラムの範囲外を指している場合のフェッチエラー。
class ProgramCounterOutOfRange(IndexError):
    pass

# @intent:responsibility 実行停止の理由を定義します。
class StopReason(Enum):
    END_OF_PROGRAM = "END_OF_PROGRAM"
    FAULT = "FAULT"
    STEP_LIMIT = "STEP_LIMIT"
    BREAKPOINT = "BREAKPOINT"
    STOPPED = "STOPPED"
    START_OF_HISTORY = "START_OF_HISTORY"

@dataclass(frozen=True)
class RunResult:
    reason: StopReason
    steps: int
    last_snapshot: Optional[Snapshot] = None

# @intent:responsibility プログラムを1命令ずつフェッチしてマシンに供給します。
class Processor:
    """
    フェッチ → PC更新 → 実行 の命令サイクルを駆動するクラス。
    相対分岐のオフセットは、フェッチ後に進められたPC（次の命令）を基準とします。
    """
    def __init__(self, machine: Machine, program: Sequence[Instruction]):
        self._machine = machine
        self._program = program

    @property
    def machine(self) -> Machine:
        return self._machine

    @property
    def program(self) -> Sequence[Instruction]:
        return self._program

    # @intent:responsibility PCがプログラムの末尾を越えているかを返します。
    @property
    def at_end(self) -> bool:
        return self._machine.get_state().pc >= len(self._program)

    # @intent:responsibility 現在のPCの命令を返します。
    def fetch(self) -> Instruction:
        pc = self._machine.get_state().pc
        if pc >= len(self._program):
            raise ProgramCounterOutOfRange(f"PC {pc:#06x} is outside the program (length {len(self._program)}).")
        return self._program[pc]

    # @intent:responsibility 1命令サイクルを進め、その結果のスナップショットを返します。
    def step(self) -> Snapshot:
        """
        命令をフェッチし、PCを1進めてから実行します。
        フォールトが発生した場合、PCはフォールトを起こした命令を指したままになります。
        """
        state = self._machine.get_state()
        initial_pc = state.pc
        instruction = self.fetch()

        state.pc = (initial_pc + 1) & WORD_MASK
        snapshot = self._machine.step(instruction)

        if snapshot.fault is not None:
            state.pc = initial_pc
            snapshot = replace(snapshot, state=state.copy())
        return snapshot

    # @intent:responsibility プログラム末尾、フォールト、または上限ステップ数まで実行を継続します。
    def run(self, max_steps: Optional[int] = None) -> RunResult:
        steps = 0
        last_snapshot = None
        while not self.at_end:
            if max_steps is not None and steps >= max_steps:
                return RunResult(StopReason.STEP_LIMIT, steps, last_snapshot)
            last_snapshot = self.step()
            if last_snapshot.fault is not None:
                return RunResult(StopReason.FAULT, steps, last_snapshot)
            steps += 1
        return RunResult(StopReason.END_OF_PROGRAM, steps, last_snapshot)

    # @intent:responsibility 指定範囲のプログラムを (インデックス, テキスト) のリストで返します。
    def disassemble(self, start: int, length: int) -> List[Tuple[int, str]]:
        end = min(start + length, len(self._program))
        return [(index, str(self._program[index])) for index in range(max(start, 0), end)]
