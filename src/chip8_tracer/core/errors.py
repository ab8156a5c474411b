# chip8_tracer/core/errors.py
"""
実行エンジンの致命的エラー定義。

いずれのエラーも1回のrun内では回復不能であり、実行ループを即座に終了させます。
状態のロールバックは行いません（フェッチ時のPC前進などはそのまま残ります）。
"""
from typing import Optional

# @intent:responsibility 全ての致命的エラーの基底クラス。発生アドレスとオペコードを保持します。
class CpuFault(Exception):
    """
    実行エンジンが報告する致命的エラーの基底クラス。

    address: 命令の先頭アドレス（フェッチ失敗時はフェッチしようとしたアドレス）
    opcode: 原因となったオペコード。フェッチ前に失敗した場合はNone。
    """
    def __init__(self, message: str, address: Optional[int] = None, opcode: Optional[int] = None):
        super().__init__(message)
        self.address = address
        self.opcode = opcode

# @intent:responsibility メモリ範囲外へのアクセスを表します。
# @intent:rationale IndexErrorを継承し、従来のIndexErrorによる範囲外検出とも互換にします。
class OutOfBoundsError(CpuFault, IndexError):
    pass

# @intent:responsibility コールスタックが満杯の状態でのCALLを表します。
class StackOverflowError(CpuFault):
    pass

# @intent:responsibility コールスタックが空の状態でのRETを表します。
class StackUnderflowError(CpuFault):
    pass

# @intent:responsibility 未実装（または未知）のオペコードのデコードを表します。
class UnimplementedOpcodeError(CpuFault):
    def __init__(self, opcode: int, address: Optional[int] = None):
        location = f" at {address:#05x}" if address is not None else ""
        super().__init__(f"Unimplemented opcode {opcode:04X}{location}", address=address, opcode=opcode)
