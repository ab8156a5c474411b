# src/chip8_tracer/arch/chip8/state.py
"""
CHIP-8 CPU固有の状態定義。
"""
from dataclasses import dataclass, field, replace
from typing import List

from chip8_tracer.core.state import CpuState
from chip8_tracer.transport.memory import Memory

# @intent:constant レジスタ数、スタック段数、キャリーフラグとして使われるレジスタ番号。
REGISTER_COUNT = 16
STACK_DEPTH = 16
VF = 0xF

# @intent:responsibility CHIP-8 CPUの全ての状態（V0-VF, PC, スタック, SP, メモリ）を保持します。
# @intent:rationale spは使用中のスタック段数（0-16）であり、次に空いているスロットの添字を兼ねます。
@dataclass
class Chip8CpuState(CpuState):
    """
    CHIP-8 CPUの状態を保持するデータクラス。
    VFは汎用レジスタであると同時に、8xy4 (ADD Vx, Vy) のキャリーフラグとしても使われます。
    """
    registers: List[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)
    stack: List[int] = field(default_factory=lambda: [0] * STACK_DEPTH)
    memory: Memory = field(default_factory=Memory)

    # @intent:accessor 外部のドライバ向けに、省略しない名前でPC/SPへアクセスするプロパティを提供します。
    @property
    def program_counter(self) -> int:
        return self.pc

    @program_counter.setter
    def program_counter(self, value: int) -> None:
        self.pc = value

    @property
    def stack_pointer(self) -> int:
        return self.sp

    @stack_pointer.setter
    def stack_pointer(self, value: int) -> None:
        self.sp = value

    @property
    def vf(self) -> int:
        return self.registers[VF]

    # @intent:rationale メモリは共有し、レジスタとスタックのみ複製します。
    def clone(self) -> "Chip8CpuState":
        return replace(self, registers=list(self.registers), stack=list(self.stack))
