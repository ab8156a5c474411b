from chip8_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_tracer.arch.chip8.state import REGISTER_COUNT
from chip8_tracer.loader.loader import ProgramLoader
from .models import SystemConfig, CpuInitialState

# @intent:responsibility システム構成（Config）に基づいてCPUを生成し、プログラムのロードと初期状態の適用を行います。
class SystemBuilder:
    def __init__(self, loader: ProgramLoader = None):
        self._loader = loader or ProgramLoader()

    def build_system(self, config: SystemConfig) -> Chip8Cpu:
        cpu = Chip8Cpu()

        if config.program:
            self._loader.load(config.program, cpu.get_memory(), config.load_address, config.format)

        self.apply_initial_state(cpu, config.initial_state, config.load_address)
        cpu.set_symbol_map(config.symbols)
        return cpu

    # @intent:responsibility Configで定義された初期状態をCPUに適用します。
    def apply_initial_state(self, cpu: Chip8Cpu, config_state: CpuInitialState, load_address: int = 0x000):
        """
        CPUをリセットし、Configから指定された初期値を適用します。
        PCが未指定の場合はプログラムのロード先アドレスから開始します。
        """
        cpu.reset()
        state = cpu.get_state()
        state.pc = config_state.pc if config_state.pc is not None else load_address

        for reg_name, value in config_state.registers.items():
            index = self._register_index(reg_name)
            if index is None:
                print(f"Warning: Unknown register '{reg_name}', ignored")
                continue
            if not 0 <= value <= 0xFF:
                raise ValueError(f"Register {reg_name} value {value} is not an 8-bit value.")
            state.registers[index] = value

    def _register_index(self, name: str):
        name = name.upper()
        if len(name) == 2 and name[0] == "V":
            try:
                index = int(name[1], 16)
            except ValueError:
                return None
            if index < REGISTER_COUNT:
                return index
        return None
