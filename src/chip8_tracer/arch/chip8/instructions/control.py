# src/chip8_tracer/arch/chip8/instructions/control.py
"""
制御命令（停止、ジャンプ、サブルーチン、条件スキップ）の実装。

実行関数が呼ばれる時点で、PCはフェッチによって既に次の命令（+2）を指しています。
スキップ命令はそこからさらに+2し、JP/CALL/RETはPCを置き換えます。
"""
from chip8_tracer.core.errors import StackOverflowError, StackUnderflowError
from chip8_tracer.arch.chip8.state import Chip8CpuState, STACK_DEPTH
from .base import Chip8Operation, InstructionKind, make_operation, reg, imm, addr

# --- HALT ---
# @intent:responsibility 0000 (HALT) 命令をデコードします。
def decode_halt(opcode: int, pc: int) -> Chip8Operation:
    return make_operation(InstructionKind.HALT, "HALT", opcode, pc)

# @intent:responsibility 実行ループを終端状態Haltedへ遷移させます。
def execute_halt(state: Chip8CpuState, op: Chip8Operation) -> None:
    state.halted = True

# --- CLS ---
def decode_cls(opcode: int, pc: int) -> Chip8Operation:
    return make_operation(InstructionKind.CLEAR_SCREEN, "CLS", opcode, pc)

# @intent:responsibility 画面消去。表示装置を持たないため何もしません。
def execute_cls(state: Chip8CpuState, op: Chip8Operation) -> None:
    # Intentional: no display attached
    pass

# --- RET ---
# @intent:responsibility 00EE (RET) 命令をデコードします。
def decode_ret(opcode: int, pc: int) -> Chip8Operation:
    return make_operation(InstructionKind.RETURN, "RET", opcode, pc)

# @intent:responsibility スタックから戻りアドレスをポップしてPCに設定します。
def execute_ret(state: Chip8CpuState, op: Chip8Operation) -> None:
    if state.sp == 0:
        raise StackUnderflowError("Stack underflow!", address=op.address, opcode=op.opcode)
    state.sp -= 1
    state.pc = state.stack[state.sp]

# --- JP ---
# @intent:responsibility 1nnn (JP addr) 命令をデコードします。
def decode_jp(opcode: int, pc: int) -> Chip8Operation:
    return make_operation(InstructionKind.JUMP, "JP", opcode, pc, addr(opcode & 0x0FFF))

def execute_jp(state: Chip8CpuState, op: Chip8Operation) -> None:
    state.pc = op.fields.addr

# --- CALL ---
# @intent:responsibility 2nnn (CALL addr) 命令をデコードします。
def decode_call(opcode: int, pc: int) -> Chip8Operation:
    return make_operation(InstructionKind.CALL, "CALL", opcode, pc, addr(opcode & 0x0FFF))

# @intent:responsibility 戻りアドレス（前進済みのPC）をスタックに積んでからジャンプします。
def execute_call(state: Chip8CpuState, op: Chip8Operation) -> None:
    if state.sp >= STACK_DEPTH:
        raise StackOverflowError("Stack overflow!", address=op.address, opcode=op.opcode)
    # state.pc already points to the instruction after CALL
    state.stack[state.sp] = state.pc
    state.sp += 1
    state.pc = op.fields.addr

# --- SE Vx, byte ---
# @intent:responsibility 3xkk (SE Vx, byte) 命令をデコードします。
def decode_se_imm(opcode: int, pc: int) -> Chip8Operation:
    return make_operation(InstructionKind.SKIP_EQ_IMM, "SE", opcode, pc,
                          reg((opcode & 0x0F00) >> 8), imm(opcode & 0x00FF))

# @intent:responsibility Vx == kk の場合、次の命令をスキップします。
def execute_se_imm(state: Chip8CpuState, op: Chip8Operation) -> None:
    if state.registers[op.fields.x] == op.fields.kk:
        state.pc += 2

# --- SNE Vx, byte ---
# @intent:responsibility 4xkk (SNE Vx, byte) 命令をデコードします。
def decode_sne_imm(opcode: int, pc: int) -> Chip8Operation:
    return make_operation(InstructionKind.SKIP_NE_IMM, "SNE", opcode, pc,
                          reg((opcode & 0x0F00) >> 8), imm(opcode & 0x00FF))

# @intent:responsibility Vx != kk の場合、次の命令をスキップします。
def execute_sne_imm(state: Chip8CpuState, op: Chip8Operation) -> None:
    if state.registers[op.fields.x] != op.fields.kk:
        state.pc += 2

# --- SE Vx, Vy ---
# @intent:responsibility 5xy0 (SE Vx, Vy) 命令をデコードします。
def decode_se_reg(opcode: int, pc: int) -> Chip8Operation:
    return make_operation(InstructionKind.SKIP_EQ_REG, "SE", opcode, pc,
                          reg((opcode & 0x0F00) >> 8), reg((opcode & 0x00F0) >> 4))

# @intent:responsibility Vx == Vy の場合、次の命令をスキップします。
def execute_se_reg(state: Chip8CpuState, op: Chip8Operation) -> None:
    if state.registers[op.fields.x] == state.registers[op.fields.y]:
        state.pc += 2
