# src/chip8_tracer/arch/chip8/instructions/load.py
"""
レジスタへのロード命令の実装。
"""
from chip8_tracer.arch.chip8.state import Chip8CpuState
from .base import Chip8Operation, InstructionKind, make_operation, reg, imm

# --- LD Vx, byte ---
# @intent:responsibility 6xkk (LD Vx, byte) 命令をデコードします。
def decode_ld_imm(opcode: int, pc: int) -> Chip8Operation:
    return make_operation(InstructionKind.LOAD_IMM, "LD", opcode, pc,
                          reg((opcode & 0x0F00) >> 8), imm(opcode & 0x00FF))

def execute_ld_imm(state: Chip8CpuState, op: Chip8Operation) -> None:
    state.registers[op.fields.x] = op.fields.kk

# --- LD Vx, Vy ---
# @intent:responsibility 8xy0 (LD Vx, Vy) 命令をデコードします。
def decode_ld_reg(opcode: int, pc: int) -> Chip8Operation:
    return make_operation(InstructionKind.MOVE, "LD", opcode, pc,
                          reg((opcode & 0x0F00) >> 8), reg((opcode & 0x00F0) >> 4))

def execute_ld_reg(state: Chip8CpuState, op: Chip8Operation) -> None:
    state.registers[op.fields.x] = state.registers[op.fields.y]
