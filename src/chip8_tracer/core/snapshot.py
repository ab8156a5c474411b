# chip8_tracer/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、1命令の実行結果（CPU状態、命令、メモリアクセス）を記録した
不変のデータ構造を定義します。トレース出力とデバッガへの情報提供に用います。
"""
from dataclasses import dataclass, field
from typing import List, Optional

from chip8_tracer.core.state import CpuState
from chip8_tracer.transport.memory import MemoryAccess, MemoryAccessType

# @intent:responsibility 実行された命令の詳細を記録します。
@dataclass(frozen=True) # 不変データ構造
class Operation:
    """
    デコードされた命令の詳細（オペコード、ニーモニック、オペランド）を記録するデータクラス。
    アーキテクチャ固有の型付きオペランドはサブクラスで追加します。
    """
    opcode: int # 例: 0x8014
    mnemonic: str # 例: "ADD"
    operands: List[str] = field(default_factory=list) # 例: ["V0", "V1"]
    address: int = 0 # 命令の先頭アドレス
    length: int = 2 # 命令のバイト長

    @property
    def opcode_hex(self) -> str:
        return f"{self.opcode:04X}"

    # @intent:responsibility "ADD V0, V1" 形式の表示文字列を返します。
    def render(self) -> str:
        text = self.mnemonic
        if self.operands:
            text += " " + ", ".join(self.operands)
        return text

# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True)
class Metadata:
    """
    実行に関するメタデータ（累計実行命令数、シンボル情報など）を記録するデータクラス。
    """
    step_count: int
    symbol_info: Optional[str] = None # 例: "add_twice: ADD V0, V1"

# @intent:responsibility ある一時点におけるCPUの状態と、直前の命令によるメモリアクセスを記録します。
@dataclass(frozen=True)
class Snapshot:
    """
    1命令実行直後のCPU状態と、その命令が行ったメモリアクセスの記録。
    """
    state: CpuState
    operation: Operation
    metadata: Metadata
    memory_activity: List[MemoryAccess] = field(default_factory=list)

    # @intent:rationale stateは実行中のCpuStateへの参照であり、コピーではありません。
    #                  過去の値が必要な呼び出し元（デバッガ等）はstep前に自分で値を退避します。
