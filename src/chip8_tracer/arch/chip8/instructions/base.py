# src/chip8_tracer/arch/chip8/instructions/base.py
"""
CHIP-8命令実装用の共通定義（命令種別、オペコードのフィールド抽出）。
"""
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple

from chip8_tracer.core.snapshot import Operation

# @intent:map 命令の閉じた集合。デコード結果は必ずこのいずれかになります。
class InstructionKind(Enum):
    HALT = "HALT"                      # 0000
    CLEAR_SCREEN = "CLEAR_SCREEN"      # 00E0
    RETURN = "RETURN"                  # 00EE
    JUMP = "JUMP"                      # 1nnn
    CALL = "CALL"                      # 2nnn
    SKIP_EQ_IMM = "SKIP_EQ_IMM"        # 3xkk
    SKIP_NE_IMM = "SKIP_NE_IMM"        # 4xkk
    SKIP_EQ_REG = "SKIP_EQ_REG"        # 5xy0
    LOAD_IMM = "LOAD_IMM"              # 6xkk
    ADD_IMM = "ADD_IMM"                # 7xkk
    MOVE = "MOVE"                      # 8xy0
    OR = "OR"                          # 8xy1
    AND = "AND"                        # 8xy2
    XOR = "XOR"                        # 8xy3
    ADD_REG = "ADD_REG"                # 8xy4

# @intent:data_structure オペコードから固定マスクで取り出した5つのフィールド。
class OpcodeFields(NamedTuple):
    x: int         # bits 8-11
    y: int         # bits 4-7
    kk: int        # bits 0-7
    op_minor: int  # bits 0-3
    addr: int      # bits 0-11

# @intent:utility_function 16bitオペコードから各フィールドを抽出します。
def extract_fields(opcode: int) -> OpcodeFields:
    return OpcodeFields(
        x=(opcode & 0x0F00) >> 8,
        y=(opcode & 0x00F0) >> 4,
        kk=opcode & 0x00FF,
        op_minor=opcode & 0x000F,
        addr=opcode & 0x0FFF,
    )

# @intent:utility_function 2バイトをビッグエンディアンで16bitオペコードに結合します。
def combine_bytes(high: int, low: int) -> int:
    """Big-endian 16-bit word."""
    return (high << 8) | low

# @intent:responsibility 型付きオペランド（種別と抽出済みフィールド）を持つCHIP-8の命令。
@dataclass(frozen=True)
class Chip8Operation(Operation):
    kind: InstructionKind = InstructionKind.HALT
    fields: OpcodeFields = OpcodeFields(0, 0, 0, 0, 0)

# @intent:utility_function デコード結果のChip8Operationを生成する共通処理。
def make_operation(kind: InstructionKind, mnemonic: str, opcode: int, pc: int, *operands: str) -> Chip8Operation:
    return Chip8Operation(
        opcode=opcode,
        mnemonic=mnemonic,
        operands=list(operands),
        address=pc,
        kind=kind,
        fields=extract_fields(opcode),
    )

# @intent:utility_function オペランド表示用の書式。
def reg(index: int) -> str:
    return f"V{index:X}"

def imm(value: int) -> str:
    return f"#${value:02X}"

def addr(value: int) -> str:
    return f"${value:03X}"
