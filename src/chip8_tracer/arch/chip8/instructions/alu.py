# src/chip8_tracer/arch/chip8/instructions/alu.py
"""
算術論理演算命令の実装。

7xkk (ADD Vx, byte) はVFに触れず、8xy4 (ADD Vx, Vy) は毎回VFをセット/クリアします。
この2つの違いは意図したものです。
"""
from chip8_tracer.arch.chip8.state import Chip8CpuState, VF
from .base import Chip8Operation, InstructionKind, make_operation, reg, imm

# @intent:utility_function レジスタ同士の演算命令のデコード共通処理。
def _decode_xy(kind: InstructionKind, mnemonic: str, opcode: int, pc: int) -> Chip8Operation:
    return make_operation(kind, mnemonic, opcode, pc,
                          reg((opcode & 0x0F00) >> 8), reg((opcode & 0x00F0) >> 4))

# --- ADD Vx, byte ---
# @intent:responsibility 7xkk (ADD Vx, byte) 命令をデコードします。
def decode_add_imm(opcode: int, pc: int) -> Chip8Operation:
    return make_operation(InstructionKind.ADD_IMM, "ADD", opcode, pc,
                          reg((opcode & 0x0F00) >> 8), imm(opcode & 0x00FF))

# @intent:responsibility Vxにkkを加算します。結果は256で折り返し、VFは変更しません。
def execute_add_imm(state: Chip8CpuState, op: Chip8Operation) -> None:
    x = op.fields.x
    state.registers[x] = (state.registers[x] + op.fields.kk) & 0xFF

# --- OR Vx, Vy ---
def decode_or(opcode: int, pc: int) -> Chip8Operation:
    return _decode_xy(InstructionKind.OR, "OR", opcode, pc)

def execute_or(state: Chip8CpuState, op: Chip8Operation) -> None:
    state.registers[op.fields.x] |= state.registers[op.fields.y]

# --- AND Vx, Vy ---
def decode_and(opcode: int, pc: int) -> Chip8Operation:
    return _decode_xy(InstructionKind.AND, "AND", opcode, pc)

def execute_and(state: Chip8CpuState, op: Chip8Operation) -> None:
    state.registers[op.fields.x] &= state.registers[op.fields.y]

# --- XOR Vx, Vy ---
def decode_xor(opcode: int, pc: int) -> Chip8Operation:
    return _decode_xy(InstructionKind.XOR, "XOR", opcode, pc)

def execute_xor(state: Chip8CpuState, op: Chip8Operation) -> None:
    state.registers[op.fields.x] ^= state.registers[op.fields.y]

# --- ADD Vx, Vy ---
# @intent:responsibility 8xy4 (ADD Vx, Vy) 命令をデコードします。
def decode_add_reg(opcode: int, pc: int) -> Chip8Operation:
    return _decode_xy(InstructionKind.ADD_REG, "ADD", opcode, pc)

# @intent:responsibility Vx += Vy を実行し、桁あふれの有無をVFに書き込みます。
# @intent:rationale VFの書き込みは結果の格納より後に行います。x == 0xF の場合もVFはキャリーの値になります。
def execute_add_reg(state: Chip8CpuState, op: Chip8Operation) -> None:
    x, y = op.fields.x, op.fields.y
    res = state.registers[x] + state.registers[y]
    state.registers[x] = res & 0xFF
    state.registers[VF] = 1 if res > 0xFF else 0
