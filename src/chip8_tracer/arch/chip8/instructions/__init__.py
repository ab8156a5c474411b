# src/chip8_tracer/arch/chip8/instructions/__init__.py
"""
CHIP-8命令セット実装パッケージ。
"""
from chip8_tracer.core.errors import UnimplementedOpcodeError
from chip8_tracer.arch.chip8.state import Chip8CpuState
from .base import Chip8Operation, InstructionKind, OpcodeFields, extract_fields
from .maps import EXACT_DECODE_MAP, FAMILY_DECODE_MAP, MINOR_DECODE_MAPS, EXECUTE_MAP

# @intent:responsibility CHIP-8のオペコードをデコードします。
# @intent:rationale 純粋関数です。状態を参照・変更せず、未知のオペコードはUnimplementedOpcodeErrorとして報告します。
def decode_opcode(opcode: int, pc: int = 0) -> Chip8Operation:
    """
    16bitオペコードをデコードし、Chip8Operationを返します。
    pcは命令の先頭アドレスで、表示とエラー報告にのみ使用されます。
    """
    decoder = EXACT_DECODE_MAP.get(opcode)
    if decoder is None:
        family = (opcode & 0xF000) >> 12
        minor_map = MINOR_DECODE_MAPS.get(family)
        if minor_map is not None:
            decoder = minor_map.get(opcode & 0x000F)
        else:
            decoder = FAMILY_DECODE_MAP.get(family)
    if decoder is None:
        raise UnimplementedOpcodeError(opcode, address=pc)
    return decoder(opcode, pc)

# @intent:responsibility デコードされたCHIP-8命令を実行します。
def execute_instruction(operation: Chip8Operation, state: Chip8CpuState) -> None:
    """
    デコードされたCHIP-8命令を実行し、CPUの状態を変更します。
    """
    executor = EXECUTE_MAP.get(operation.kind)
    if executor is None:
        raise UnimplementedOpcodeError(operation.opcode, address=operation.address)
    executor(state, operation)
