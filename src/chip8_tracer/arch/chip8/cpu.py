# src/chip8_tracer/arch/chip8/cpu.py
"""
CHIP-8 CPUエミュレーションの中心モジュール。
"""
from typing import Dict, List, Optional, Tuple

from chip8_tracer.core.snapshot import Metadata, Snapshot
from chip8_tracer.core.cpu import AbstractCpu
from chip8_tracer.core.errors import OutOfBoundsError
from chip8_tracer.common.types import RegisterLayoutInfo, RegisterInfo
from chip8_tracer.transport.memory import Memory
from chip8_tracer.arch.chip8.state import Chip8CpuState, REGISTER_COUNT
from chip8_tracer.arch.chip8.instructions import decode_opcode, execute_instruction
from chip8_tracer.arch.chip8.instructions.base import Chip8Operation, InstructionKind, combine_bytes, make_operation
from chip8_tracer.arch.chip8 import disassembler

# @intent:responsibility CHIP-8 CPUの具体的なエミュレーションロジック（フェッチ、デコード、実行）を提供します。
class Chip8Cpu(AbstractCpu):
    """
    CHIP-8 CPUをエミュレートするクラス。
    生成直後はレジスタ・メモリ・スタックが全て0、PCとSPも0です。
    プログラムのロード先とPCの初期値はドライバが決めます（予約領域はありません）。
    """
    def __init__(self, memory: Optional[Memory] = None):
        super().__init__(memory if memory is not None else Memory())

    # @intent:responsibility CHIP-8の初期状態を生成します。メモリはCPUが保持するものを共有します。
    def _create_initial_state(self) -> Chip8CpuState:
        return Chip8CpuState(memory=self._memory)

    def get_state(self) -> Chip8CpuState:
        return self._state

    # @intent:responsibility PCの位置から2バイトをビッグエンディアンで読み、PCを2進めます。
    # @intent:pre-condition pc + 1 がメモリ範囲内であること。そうでなければOutOfBoundsError。
    def _fetch(self) -> int:
        p = self._state.pc
        if p < 0 or p + 1 >= self._memory.get_size():
            raise OutOfBoundsError(f"Fetch at {p:#06x} out of bounds.", address=p)
        opcode = combine_bytes(self._memory.read(p), self._memory.read(p + 1))
        self._state.pc = p + 2 # 1 opcode = 2 bytes
        return opcode

    def _decode(self, opcode: int, address: int) -> Chip8Operation:
        return decode_opcode(opcode, address)

    def _execute(self, operation: Chip8Operation) -> None:
        execute_instruction(operation, self._state)

    # @intent:responsibility HALT後のstepは何も実行せず、停止中であることを示すSnapshotを返します。
    def _handle_halt(self, current_pc: int) -> Optional[Snapshot]:
        if not self._state.halted:
            return None
        operation = make_operation(InstructionKind.HALT, "HALT (stopped)", 0x0000, current_pc)
        return Snapshot(
            state=self.get_state(),
            operation=operation,
            metadata=Metadata(step_count=self._step_count, symbol_info=f"PC: {current_pc:#05x} -> HALT (stopped)"),
            memory_activity=[]
        )

    # @intent:responsibility 現在のレジスタ値を辞書形式で提供します。
    def get_register_map(self) -> Dict[str, int]:
        s = self._state
        regs = {f"V{i:X}": s.registers[i] for i in range(REGISTER_COUNT)}
        regs["PC"] = s.pc
        regs["SP"] = s.sp
        return regs

    # @intent:responsibility レジスタ表示レイアウト（グループ化）を定義します。
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [
            RegisterLayoutInfo("General", [RegisterInfo(f"V{i:X}", 8) for i in range(REGISTER_COUNT)]),
            RegisterLayoutInfo("Pointers", [RegisterInfo("PC", 16), RegisterInfo("SP", 8)])
        ]

    # @intent:responsibility VFをキャリーフラグとして見た状態を返します。
    def get_flag_state(self) -> Dict[str, bool]:
        return {"VF": self._state.vf != 0}

    # @intent:responsibility 指定範囲のメモリを逆アセンブルします。
    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return disassembler.disassemble(self._memory, start_addr, length)
