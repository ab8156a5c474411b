# chip8_tracer/core/state.py
"""
Core Layer (CPU状態)

このモジュールは、CPUの基本的な状態（PC, SP, 停止フラグ）と実行状態を定義します。
"""
from dataclasses import dataclass, replace
from enum import Enum

# @intent:responsibility 実行ループの状態遷移（Running -> Halted / Faulted）を表します。
class ExecutionStatus(Enum):
    RUNNING = "RUNNING"
    HALTED = "HALTED"    # 終端状態（正常終了）
    FAULTED = "FAULTED"  # 終端状態（致命的エラー）

# @intent:responsibility CPUのレジスタ状態を保持します。アーキテクチャ固有のレジスタはこれを拡張します。
@dataclass
class CpuState:
    """
    CPUのレジスタ状態を保持するデータクラス。
    これは抽象的な基底状態であり、特定のCPUアーキテクチャに応じて拡張されます。
    """
    pc: int = 0x0000  # Program Counter
    sp: int = 0x0000  # Stack Pointer
    halted: bool = False  # HALT命令の実行後にTrueとなる

    # @intent:responsibility 実行履歴用に、その時点のレジスタ値を固定したコピーを返します。
    def clone(self) -> "CpuState":
        return replace(self)
