# src/chip8_tracer/arch/chip8/instructions/maps.py
"""
オペコードと命令実装のマッピング定義。

デコードは「完全一致」→「上位ニブル」→「8xxx系の下位ニブル」の順に検索します。
0x0xxx帯は完全一致のオペコード（0000, 00E0, 00EE）以外の命令を持たないため、
上位ニブル0は族テーブルに登録しません。
"""
from . import load
from . import alu
from . import control
from .base import InstructionKind

# @intent:map 完全一致で判定するオペコードからデコード関数へのマッピング。
EXACT_DECODE_MAP = {
    0x0000: control.decode_halt,
    0x00E0: control.decode_cls,
    0x00EE: control.decode_ret,
}

# @intent:map 上位ニブル（命令族）からデコード関数へのマッピング。
FAMILY_DECODE_MAP = {
    0x1: control.decode_jp,
    0x2: control.decode_call,
    0x3: control.decode_se_imm,
    0x4: control.decode_sne_imm,
    0x6: load.decode_ld_imm,
    0x7: alu.decode_add_imm,
}

# @intent:map 5xyN のうち定義済みの下位ニブル。
SKIP_REG_DECODE_MAP = {
    0x0: control.decode_se_reg,
}

# @intent:map 8xyN の下位ニブル（op_minor）からデコード関数へのマッピング。
ALU_DECODE_MAP = {
    0x0: load.decode_ld_reg,
    0x1: alu.decode_or,
    0x2: alu.decode_and,
    0x3: alu.decode_xor,
    0x4: alu.decode_add_reg,
}

# @intent:map 下位ニブルで命令を選択する命令族。
MINOR_DECODE_MAPS = {
    0x5: SKIP_REG_DECODE_MAP,
    0x8: ALU_DECODE_MAP,
}

# @intent:map 命令種別から実行関数へのマッピングテーブル。
EXECUTE_MAP = {
    # Control
    InstructionKind.HALT: control.execute_halt,
    InstructionKind.CLEAR_SCREEN: control.execute_cls,
    InstructionKind.RETURN: control.execute_ret,
    InstructionKind.JUMP: control.execute_jp,
    InstructionKind.CALL: control.execute_call,
    InstructionKind.SKIP_EQ_IMM: control.execute_se_imm,
    InstructionKind.SKIP_NE_IMM: control.execute_sne_imm,
    InstructionKind.SKIP_EQ_REG: control.execute_se_reg,

    # Load
    InstructionKind.LOAD_IMM: load.execute_ld_imm,
    InstructionKind.MOVE: load.execute_ld_reg,

    # ALU
    InstructionKind.ADD_IMM: alu.execute_add_imm,
    InstructionKind.OR: alu.execute_or,
    InstructionKind.AND: alu.execute_and,
    InstructionKind.XOR: alu.execute_xor,
    InstructionKind.ADD_REG: alu.execute_add_reg,
}
