from reg16_vm.common.types import NUM_REGISTERS, ZeroFlagPolicy, is_word
from reg16_vm.core.machine import Machine
from .models import MachineConfig, MachineInitialState

# @intent:responsibility 構成（Config）に基づいてMachineを生成し、初期状態とメモリ内容を適用します。
class MachineBuilder:
    def build_machine(self, config: MachineConfig) -> Machine:
        try:
            policy = ZeroFlagPolicy(config.zero_flag_policy)
        except ValueError:
            print(f"Warning: Unknown zero flag policy '{config.zero_flag_policy}', defaulting to 'never'")
            policy = ZeroFlagPolicy.NEVER

        machine = Machine(memory_capacity=config.memory_capacity, zero_flag_policy=policy)

        for block in config.memory:
            try:
                machine.memory.load_block(block.start, block.data)
            except IndexError as e:
                raise ValueError(f"Memory block '{block.label or block.start}' does not fit: {e}") from e

        # 初期状態の適用
        self.apply_initial_state(machine, config.initial_state)

        return machine

    # @intent:responsibility Configで定義された初期状態をMachineに適用します。
    def apply_initial_state(self, machine: Machine, config_state: MachineInitialState) -> None:
        """
        PC、SP、ゼロフラグ、レジスタを設定します。メモリ内容はリセットしません。
        """
        if not is_word(config_state.pc):
            raise ValueError(f"Initial PC {config_state.pc} is not a 16-bit word.")
        if not 0 <= config_state.sp <= machine.memory_capacity:
            raise ValueError(
                f"Initial SP {config_state.sp} is outside memory of size {machine.memory_capacity}."
            )

        state = machine.get_state()
        state.pc = config_state.pc
        state.sp = config_state.sp
        state.zero = config_state.zero

        for index, value in config_state.registers.items():
            if not 0 <= index < NUM_REGISTERS:
                raise ValueError(f"Register R{index} does not exist (R0-R{NUM_REGISTERS - 1}).")
            machine.write_register(index, value)
