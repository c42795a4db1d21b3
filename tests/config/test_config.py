# tests/config/test_config.py
"""
reg16_vm.configパッケージ（YAMLローダーとMachineBuilder）の単体テスト。
"""
import pytest
from unittest.mock import patch

from reg16_vm.common.types import DEFAULT_MEMORY_CAPACITY, ZeroFlagPolicy
from reg16_vm.config.builder import MachineBuilder
from reg16_vm.config.loader import ConfigLoader
from reg16_vm.config.models import MachineConfig, MachineInitialState, MemoryBlock
from reg16_vm.core.processor import Processor, StopReason
from reg16_vm.isa.instructions import Add, JmpZ

# @intent:test_suite 構成ファイルの解析とマシン構築の検証。

FULL_CONFIG = """
memory_capacity: "0x20"
zero_flag_policy: arithmetic
initial_state:
  pc: 1
  sp: "0x4"
  zero: true
  registers: [10, 3]
memory:
  - start: 0x10
    label: table
    data: [1, "0x2", 3]
"""

class TestConfigLoader:
    @pytest.fixture
    def loader(self):
        return ConfigLoader()

    def test_load_full_config(self, loader):
        config = loader.load_from_string(FULL_CONFIG)
        assert config.memory_capacity == 0x20
        assert config.zero_flag_policy == "arithmetic"
        assert config.initial_state == MachineInitialState(pc=1, sp=4, zero=True, registers={0: 10, 1: 3})
        assert config.memory == [MemoryBlock(start=0x10, data=[1, 2, 3], label="table")]

    def test_load_from_file(self, loader, tmp_path):
        config_file = tmp_path / "machine.yaml"
        config_file.write_text(FULL_CONFIG)
        assert loader.load_from_file(str(config_file)) == loader.load_from_string(FULL_CONFIG)

    def test_defaults_for_empty_document(self, loader):
        config = loader.load_from_string("")
        assert config == MachineConfig()
        assert config.memory_capacity == DEFAULT_MEMORY_CAPACITY

    def test_zero_flag_accepts_yaml_booleans(self, loader):
        assert loader.load_from_string("initial_state:\n  zero: false\n").initial_state.zero is False
        assert loader.load_from_string("initial_state:\n  zero: yes\n").initial_state.zero is True

    def test_registers_as_mapping(self, loader):
        config = loader.load_from_string("initial_state:\n  registers: {r7: 0xFFFF, R2: '0x10'}\n")
        assert config.initial_state.registers == {7: 0xFFFF, 2: 0x10}

    @pytest.mark.parametrize("text", [
        "memory_capacity: big",
        "memory_capacity: true",
        "initial_state:\n  registers: {x1: 1}",
        "initial_state:\n  registers: 5",
        "- just a list",
        "memory: [5]",
        "initial_state:\n  zero: 'false'",
        "initial_state:\n  zero: 1",
    ])
    def test_invalid_values(self, loader, text):
        with pytest.raises(ValueError):
            loader.load_from_string(text)

class TestMachineBuilder:
    @pytest.fixture
    def builder(self):
        return MachineBuilder()

    def test_build_machine(self, builder):
        config = ConfigLoader().load_from_string(FULL_CONFIG)
        machine = builder.build_machine(config)

        assert machine.memory_capacity == 0x20
        assert machine.zero_flag_policy == ZeroFlagPolicy.ARITHMETIC
        state = machine.get_state()
        assert state.pc == 1
        assert state.sp == 4
        assert state.zero is True
        assert state.registers[:3] == [10, 3, 0]
        assert machine.memory.dump()[0x10:0x13] == [1, 2, 3]
        assert machine.memory.get_and_clear_activity_log() == []

    def test_unknown_policy_falls_back(self, builder):
        config = MachineConfig(memory_capacity=4, zero_flag_policy="sometimes")
        with patch('builtins.print') as mock_print:
            machine = builder.build_machine(config)
        assert machine.zero_flag_policy == ZeroFlagPolicy.NEVER
        mock_print.assert_called_once_with("Warning: Unknown zero flag policy 'sometimes', defaulting to 'never'")

    @pytest.mark.parametrize("config", [
        MachineConfig(memory_capacity=0),
        MachineConfig(memory_capacity=4, initial_state=MachineInitialState(sp=5)),
        MachineConfig(memory_capacity=4, initial_state=MachineInitialState(pc=0x10000)),
        MachineConfig(memory_capacity=4, initial_state=MachineInitialState(registers={8: 1})),
        MachineConfig(memory_capacity=4, initial_state=MachineInitialState(registers={0: 0x10000})),
        MachineConfig(memory_capacity=4, memory=[MemoryBlock(start=3, data=[1, 2])]),
        MachineConfig(memory_capacity=4, memory=[MemoryBlock(start=0, data=[-5])]),
    ])
    def test_invalid_configs(self, builder, config):
        with pytest.raises(ValueError):
            builder.build_machine(config)

    # @intent:test_case_integration 構成から構築したマシンでプログラムを実行できることを検証します。
    def test_built_machine_runs_program(self, builder):
        config = ConfigLoader().load_from_string(
            "memory_capacity: 8\ninitial_state:\n  zero: true\n  registers: [1]\n"
        )
        machine = builder.build_machine(config)
        processor = Processor(machine, [JmpZ(2), Add(0, 0), Add(0, 0)])
        result = processor.run()
        assert result.reason == StopReason.END_OF_PROGRAM
        assert result.steps == 2
        assert machine.read_register(0) == 2
