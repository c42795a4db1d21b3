# reg16_vm/debugger/debugger.py
"""
デバッガモジュール。

Processorの実行を制御し、ユーザーが指定した条件（ブレークポイント）で
実行を中断させる責務を負います。フォールト時の停止やロールバックもここで扱います。
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from reg16_vm.core.processor import Processor, StopReason
from reg16_vm.core.snapshot import Snapshot
from reg16_vm.core.state import MachineState
from reg16_vm.transport.memory import MemoryAccessType

# @intent:responsibility ブレークポイントの条件タイプを定義します。
class BreakpointConditionType(Enum):
    PC_MATCH = "PC_MATCH"               # プログラムカウンタが特定のアドレスに一致
    MEMORY_READ = "MEMORY_READ"         # 特定のアドレスが読み込まれた
    MEMORY_WRITE = "MEMORY_WRITE"       # 特定のアドレスに書き込まれた
    REGISTER_VALUE = "REGISTER_VALUE"   # 特定のレジスタが特定の値になった
    REGISTER_CHANGE = "REGISTER_CHANGE" # 特定のレジスタの値が変化した
    FAULT = "FAULT"                     # フォールトが発生した（valueにFaultKindの値を指定可能）

# @intent:responsibility ブレークポイントをトリガーする条件を定義します。
@dataclass(frozen=True)
class BreakpointCondition:
    """
    ブレークポイントがヒットするための条件を定義するデータクラス。
    """
    condition_type: BreakpointConditionType
    value: Optional[object] = None        # PC_MATCH, REGISTER_VALUE, FAULTで使用
    address: Optional[int] = None         # MEMORY_READ, MEMORY_WRITEで使用
    register_name: Optional[str] = None   # REGISTER_VALUE, REGISTER_CHANGEで使用 ("R0".."R7", "SP", "PC")
    enabled: bool = True                  # 有効/無効状態

# @intent:responsibility 実行制御、ブレークポイント管理、実行履歴（タイムトラベル）を提供します。
class Debugger:
    """
    Processorの実行を制御し、ブレークポイントの管理を行うクラス。
    """
    def __init__(self, processor: Processor):
        self._processor = processor
        self._machine = processor.machine
        self._breakpoints: List[BreakpointCondition] = []
        self._running: bool = False
        self._last_snapshot: Optional[Snapshot] = None
        self._history: List[Snapshot] = []
        # @intent:responsibility 履歴が尽きた時に戻るための初期状態を保持します。
        self._initial_state: MachineState = self._machine.get_state().copy()

    def add_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition not in self._breakpoints:
            self._breakpoints.append(condition)

    def update_breakpoint(self, old_condition: BreakpointCondition, new_condition: BreakpointCondition) -> None:
        if old_condition in self._breakpoints:
            idx = self._breakpoints.index(old_condition)
            self._breakpoints[idx] = new_condition

    def remove_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition in self._breakpoints:
            self._breakpoints.remove(condition)

    def get_breakpoints(self) -> List[BreakpointCondition]:
        return list(self._breakpoints)

    def get_history(self) -> List[Snapshot]:
        return list(self._history)

    def get_last_snapshot(self) -> Optional[Snapshot]:
        return self._last_snapshot

    def _is_pc_breakpoint(self, pc: int) -> bool:
        for bp in self._breakpoints:
            if bp.enabled and bp.condition_type == BreakpointConditionType.PC_MATCH and bp.value == pc:
                return True
        return False

    # @intent:responsibility SnapshotとレジスタマップからPC_MATCH以外のブレークポイントを評価します。
    def _check_other_breakpoints(self, snapshot: Snapshot, previous_registers: Dict[str, int]) -> bool:
        current_registers = self._register_map_of(snapshot.state)

        for bp in self._breakpoints:
            if not bp.enabled:
                continue

            if bp.condition_type == BreakpointConditionType.MEMORY_READ:
                for access in snapshot.memory_activity:
                    if access.access_type == MemoryAccessType.READ and access.address == bp.address:
                        return True
            elif bp.condition_type == BreakpointConditionType.MEMORY_WRITE:
                for access in snapshot.memory_activity:
                    if access.access_type == MemoryAccessType.WRITE and access.address == bp.address:
                        return True
            elif bp.condition_type == BreakpointConditionType.REGISTER_VALUE:
                if bp.register_name in current_registers:
                    if current_registers[bp.register_name] == bp.value:
                        return True
            elif bp.condition_type == BreakpointConditionType.REGISTER_CHANGE:
                if bp.register_name in current_registers and bp.register_name in previous_registers:
                    if current_registers[bp.register_name] != previous_registers[bp.register_name]:
                        return True
            elif bp.condition_type == BreakpointConditionType.FAULT:
                if snapshot.fault is not None:
                    if bp.value is None or bp.value == snapshot.fault.kind.value:
                        return True
        return False

    @staticmethod
    def _register_map_of(state: MachineState) -> Dict[str, int]:
        reg_map = {f"R{i}": value for i, value in enumerate(state.registers)}
        reg_map["SP"] = state.sp
        reg_map["PC"] = state.pc
        return reg_map

    # @intent:responsibility 1命令分実行し、結果のSnapshotを履歴に追加して返します。
    def step_instruction(self) -> Snapshot:
        snapshot = self._processor.step()
        self._last_snapshot = snapshot
        self._history.append(snapshot)
        return snapshot

    # @intent:responsibility 実行履歴を1つ戻り、マシン状態とメモリを復元します。
    def step_back(self) -> Optional[Snapshot]:
        """
        直前の命令を取り消します。戻った先のSnapshot（履歴が尽きた場合はNone）を返します。
        """
        if not self._history:
            return None

        snapshot_to_revert = self._history.pop()

        # 書き込みを逆順に取り消す
        memory = self._machine.memory
        for access in reversed(snapshot_to_revert.memory_activity):
            if access.access_type == MemoryAccessType.WRITE and access.previous_data is not None:
                memory.load(access.address, access.previous_data)

        if self._history:
            previous_snapshot = self._history[-1]
            self._machine.restore_state(previous_snapshot.state)
            self._last_snapshot = previous_snapshot
            return previous_snapshot

        self._machine.restore_state(self._initial_state)
        self._last_snapshot = None
        return None

    # @intent:responsibility ブレークポイント、フォールト、プログラム末尾、上限ステップ数、stop()のいずれかまで実行します。
    def run(self, max_steps: Optional[int] = None) -> StopReason:
        self._running = True
        steps = 0

        # 現在のPCにブレークポイントがある場合は、まず1命令進める
        if not self._processor.at_end and self._is_pc_breakpoint(self._machine.get_state().pc):
            if max_steps is not None and steps >= max_steps:
                self._running = False
                return StopReason.STEP_LIMIT
            snapshot = self.step_instruction()
            steps += 1
            if snapshot.fault is not None:
                self._running = False
                return StopReason.FAULT

        while self._running:
            if self._processor.at_end:
                self._running = False
                return StopReason.END_OF_PROGRAM

            current_pc = self._machine.get_state().pc
            if self._is_pc_breakpoint(current_pc):
                self._running = False
                print(f"Breakpoint hit at PC: {current_pc:#06x}")
                return StopReason.BREAKPOINT

            if max_steps is not None and steps >= max_steps:
                self._running = False
                return StopReason.STEP_LIMIT

            previous_registers = self._machine.get_register_map()
            snapshot = self.step_instruction()
            steps += 1

            if self._check_other_breakpoints(snapshot, previous_registers):
                self._running = False
                print(f"Breakpoint hit at PC: {snapshot.state.pc:#06x}")
                return StopReason.BREAKPOINT

            if snapshot.fault is not None:
                self._running = False
                print(f"Fault at PC: {snapshot.state.pc:#06x}: {snapshot.fault}")
                return StopReason.FAULT

        return StopReason.STOPPED

    # @intent:responsibility 実行を逆方向（過去）へ連続的に戻します。
    def run_back(self) -> StopReason:
        self._running = True

        while self._running:
            snapshot = self.step_back()

            if snapshot is None:
                self._running = False
                print("Reached start of history.")
                return StopReason.START_OF_HISTORY

            current_pc = snapshot.state.pc
            if self._is_pc_breakpoint(current_pc):
                self._running = False
                print(f"Reverse Breakpoint hit at PC: {current_pc:#06x}")
                return StopReason.BREAKPOINT

            # 戻った時点のSnapshot（＝その命令実行直後の状態）で評価する
            previous_registers = (
                self._register_map_of(self._history[-2].state) if len(self._history) >= 2
                else self._register_map_of(self._initial_state)
            )
            if self._check_other_breakpoints(snapshot, previous_registers):
                self._running = False
                print(f"Reverse Breakpoint hit at PC: {snapshot.state.pc:#06x}")
                return StopReason.BREAKPOINT

        return StopReason.STOPPED

    def stop(self) -> None:
        self._running = False
