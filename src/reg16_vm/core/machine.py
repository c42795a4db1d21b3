# reg16_vm/core/machine.py
"""
Core Layer (マシン)

このモジュールは、マシン状態とワードメモリを所有し、
デコード済みの命令を1つずつ適用する実行エンジンの入口を提供します。
命令のフェッチ/デコードは扱いません（Processorの責務）。
"""
from typing import Dict

from reg16_vm.common.types import DEFAULT_MEMORY_CAPACITY, NUM_REGISTERS, ZeroFlagPolicy, is_word
from reg16_vm.core.faults import VmFault
from reg16_vm.core.snapshot import MachineImage, Metadata, Snapshot
from reg16_vm.core.state import MachineState
from reg16_vm.isa import execute_instruction
from reg16_vm.isa.instructions import Instruction
from reg16_vm.transport.memory import WordMemory

# @intent:responsibility 単一コンテキストの16bitレジスタマシンを表します。
class Machine:
    """
    8本の汎用レジスタ、SP、PC、ゼロフラグ、固定容量の線形メモリを持つマシン。
    step()は1命令を同期的かつ不可分に適用します。
    """
    # @intent:responsibility マシン状態とメモリを初期化します。
    # @intent:pre-condition memory_capacityは1以上MAX_MEMORY_CAPACITY以下である必要があります。
    def __init__(self, memory_capacity: int = DEFAULT_MEMORY_CAPACITY,
                 zero_flag_policy: ZeroFlagPolicy = ZeroFlagPolicy.NEVER):
        self._memory = WordMemory(memory_capacity)
        self._zero_flag_policy = ZeroFlagPolicy(zero_flag_policy)
        self._state: MachineState = self._create_initial_state()
        self._step_count: int = 0

    def _create_initial_state(self) -> MachineState:
        return MachineState()

    @property
    def memory(self) -> WordMemory:
        return self._memory

    @property
    def memory_capacity(self) -> int:
        return self._memory.get_size()

    @property
    def zero_flag_policy(self) -> ZeroFlagPolicy:
        return self._zero_flag_policy

    @property
    def step_count(self) -> int:
        return self._step_count

    # @intent:responsibility 現在のマシン状態（ライブオブジェクト）を返します。
    def get_state(self) -> MachineState:
        return self._state

    def read_register(self, index: int) -> int:
        return self._state.registers[index]

    # @intent:pre-condition valueは16bitワードである必要があります（マスクは行いません）。
    def write_register(self, index: int, value: int) -> None:
        if not 0 <= index < NUM_REGISTERS:
            raise IndexError(f"Register index {index} out of range 0-{NUM_REGISTERS - 1}.")
        if not is_word(value):
            raise ValueError(f"Register value {value!r} is not a 16-bit word.")
        self._state.registers[index] = value

    # @intent:responsibility マシンを生成直後の状態に戻します。メモリもゼロクリアされます。
    def reset(self) -> None:
        self._state = self._create_initial_state()
        self._memory.clear()
        self._step_count = 0

    # @intent:responsibility 指定された状態のコピーをマシン状態として設定します。
    def restore_state(self, state: MachineState) -> None:
        self._state = state.copy()

    # @intent:responsibility 命令を1つ実行します。フォールトは例外として送出されます。
    def execute(self, instruction: Instruction) -> None:
        """
        命令を1つ実行します。VmFaultが送出された場合、マシン状態とメモリは変更されていません。
        """
        execute_instruction(instruction, self._state, self._memory, self._zero_flag_policy)
        self._step_count += 1

    # @intent:responsibility 命令を1つ実行し、その結果のスナップショットを返します。
    def step(self, instruction: Instruction) -> Snapshot:
        """
        命令を1つ実行し、実行後の状態を記録したSnapshotを返します。
        フォールトは送出されず、Snapshot.faultとして呼び出し元に返されます。
        継続・中断・ロールバックの判断は呼び出し元が行います。
        """
        # 前サイクルまでの残存ログを破棄
        self._memory.get_and_clear_activity_log()

        fault = None
        try:
            self.execute(instruction)
        except VmFault as e:
            fault = e

        return Snapshot(
            state=self._state.copy(),
            instruction=instruction,
            metadata=Metadata(step_count=self._step_count, text=str(instruction)),
            fault=fault,
            memory_activity=self._memory.get_and_clear_activity_log(),
        )

    # @intent:responsibility 現在の状態をMachineImageとして取り出します。
    def save_image(self) -> MachineImage:
        return MachineImage(
            registers=tuple(self._state.registers),
            sp=self._state.sp,
            pc=self._state.pc,
            zero=self._state.zero,
            memory=tuple(self._memory.dump()),
        )

    # @intent:responsibility MachineImageから状態とメモリを復元します。
    # @intent:pre-condition イメージのメモリ長はこのマシンの容量と一致する必要があります。
    def load_image(self, image: MachineImage) -> None:
        if len(image.memory) != self.memory_capacity:
            raise ValueError(
                f"Image memory size ({len(image.memory)}) does not match machine capacity ({self.memory_capacity})."
            )
        self._state = MachineState(
            registers=list(image.registers), sp=image.sp, pc=image.pc, zero=image.zero
        )
        self._memory.clear()
        self._memory.load_block(0, list(image.memory))

    # @intent:responsibility 現在のレジスタ値を辞書形式で返します。
    def get_register_map(self) -> Dict[str, int]:
        reg_map = {f"R{i}": value for i, value in enumerate(self._state.registers)}
        reg_map["SP"] = self._state.sp
        reg_map["PC"] = self._state.pc
        return reg_map

    def get_flag_state(self) -> Dict[str, bool]:
        return {"Z": self._state.zero}
