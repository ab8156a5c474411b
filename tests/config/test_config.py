# tests/config/test_config.py
"""
chip8_tracer.config パッケージ（YAML設定の読み込みとシステム構築）の単体テスト。
"""
import pytest

from chip8_tracer.core.state import ExecutionStatus
from chip8_tracer.config.loader import ConfigLoader
from chip8_tracer.config.builder import SystemBuilder
from chip8_tracer.config.models import SystemConfig, CpuInitialState

DEMO_IMAGE = bytes([0x21, 0x00, 0x21, 0x00, 0x00, 0x00])
SUBROUTINE_IMAGE = bytes([0x80, 0x14, 0x80, 0x14, 0x00, 0xEE])

class TestConfigLoader:
    def test_load_full_config(self, tmp_path):
        (tmp_path / "demo.ch8").write_bytes(DEMO_IMAGE)
        config_file = tmp_path / "system.yaml"
        config_file.write_text(
            "program: demo.ch8\n"
            "format: binary\n"
            "load_address: 0x200\n"
            "initial_state:\n"
            "  pc: '0x200'\n"
            "  registers:\n"
            "    V0: 5\n"
            "    v1: '0x0A'\n"
            "symbols:\n"
            "  main: 0x200\n"
            "max_steps: 1000\n"
        )
        config = ConfigLoader().load_from_file(str(config_file))
        assert config.program == str(tmp_path / "demo.ch8")
        assert config.format == "binary"
        assert config.load_address == 0x200
        assert config.initial_state.pc == 0x200
        assert config.initial_state.registers == {"V0": 5, "v1": 10}
        assert config.symbols == {"main": 0x200}
        assert config.max_steps == 1000

    def test_defaults(self, tmp_path):
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")
        config = ConfigLoader().load_from_file(str(config_file))
        assert config == SystemConfig()
        assert config.load_address == 0x000
        assert config.initial_state.pc is None

    @pytest.mark.parametrize("body", [
        "load_address: zero\n",
        "format: srec\n",
        "max_steps: true\n",
        "- just\n- a list\n",
        "initial_state: [1, 2]\n",
        "initial_state: 5\n",
        "initial_state:\n  registers: [V0]\n",
        "symbols: start\n",
    ])
    def test_invalid_values(self, tmp_path, body):
        config_file = tmp_path / "bad.yaml"
        config_file.write_text(body)
        with pytest.raises(ValueError):
            ConfigLoader().load_from_file(str(config_file))

class TestSystemBuilder:
    def test_build_and_run_demo(self, tmp_path):
        program = tmp_path / "demo.ch8"
        program.write_bytes(DEMO_IMAGE + bytes(0x100 - len(DEMO_IMAGE)) + SUBROUTINE_IMAGE)
        config = SystemConfig(
            program=str(program),
            initial_state=CpuInitialState(registers={"V0": 5, "V1": 10}),
            symbols={"main": 0x000},
        )
        cpu = SystemBuilder().build_system(config)
        assert cpu.get_symbol_map() == {"main": 0x000}
        result = cpu.run()
        assert result.status == ExecutionStatus.HALTED
        assert cpu.get_state().registers[0] == 45

    def test_pc_defaults_to_load_address(self, tmp_path):
        program = tmp_path / "p.ch8"
        program.write_bytes(bytes([0x60, 0x01, 0x00, 0x00]))
        cpu = SystemBuilder().build_system(SystemConfig(program=str(program), load_address=0x200))
        assert cpu.get_state().pc == 0x200
        assert cpu.get_memory()[0x200] == 0x60
        assert cpu.run().status == ExecutionStatus.HALTED
        assert cpu.get_state().registers[0] == 1

    def test_unknown_register_warns(self, capsys):
        cpu = SystemBuilder().build_system(
            SystemConfig(initial_state=CpuInitialState(registers={"VX": 1, "vf": 2}))
        )
        assert cpu.get_state().registers[0xF] == 2
        assert "Warning: Unknown register 'VX'" in capsys.readouterr().out

    def test_register_value_out_of_range(self):
        with pytest.raises(ValueError):
            SystemBuilder().build_system(SystemConfig(initial_state=CpuInitialState(registers={"V0": 256})))
