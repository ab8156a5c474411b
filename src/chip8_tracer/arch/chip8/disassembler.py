# src/chip8_tracer/arch/chip8/disassembler.py
"""
CHIP-8 Disassembler

メモリ上のバイナリデータを解析し、CHIP-8のアセンブリ言語（ニーモニック）に変換します。
Instruction Layerのデコードロジックを再利用し、メモリはpeek（ログなし読み込み）で参照します。
"""
from typing import List, Tuple

from chip8_tracer.core.errors import UnimplementedOpcodeError
from chip8_tracer.transport.memory import Memory
from chip8_tracer.arch.chip8.instructions import decode_opcode
from chip8_tracer.arch.chip8.instructions.base import combine_bytes

# @intent:responsibility 指定されたメモリ範囲を逆アセンブルし、表示用データを生成します。
def disassemble(memory: Memory, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
    """
    指定された範囲のメモリを2バイト単位で逆アセンブルします。
    未実装のオペコードは "DW $xxxx" として表示します。

    Returns:
        List of (address, hex_bytes, mnemonic) tuples.
    """
    result = []
    current_addr = start_addr
    end_addr = min(start_addr + length, memory.get_size() - 1)

    while current_addr < end_addr:
        opcode = combine_bytes(memory.peek(current_addr), memory.peek(current_addr + 1))
        try:
            mnemonic_str = decode_opcode(opcode, current_addr).render()
        except UnimplementedOpcodeError:
            mnemonic_str = f"DW ${opcode:04X}"

        result.append((current_addr, f"{opcode:04X}", mnemonic_str))
        current_addr += 2

    return result
