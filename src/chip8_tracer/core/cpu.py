# chip8_tracer/core/cpu.py
"""
Core Layer (抽象CPU)

このモジュールは、CPUの基本的な状態管理と命令サイクルの駆動に関する抽象化を提供します。
具体的な命令の振る舞いはInstruction Layerに移譲されます。
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, List, Dict, Tuple

from chip8_tracer.transport.memory import Memory
from chip8_tracer.core.snapshot import Snapshot, Operation, Metadata
from chip8_tracer.core.state import CpuState, ExecutionStatus
from chip8_tracer.core.errors import CpuFault
from chip8_tracer.common.types import SymbolMap, RegisterLayoutInfo

# @intent:responsibility run()の終端状態を呼び出し元へ返します。
@dataclass(frozen=True)
class RunResult:
    status: ExecutionStatus
    fault: Optional[CpuFault] = None # FAULTEDの場合のみ設定される
    steps: int = 0 # このrun呼び出しで実行した命令数

# @intent:responsibility 抽象CPUの基本機能とインターフェースを定義します。
class AbstractCpu(ABC):
    """
    全てのCPUエミュレーションの基底となる抽象クラス。
    メモリとのインターフェース、基本的な状態管理、命令サイクルの抽象化を提供します。
    """
    # @intent:responsibility CPUの状態とメモリへの参照を初期化します。
    def __init__(self, memory: Memory):
        self._memory = memory
        self._state: CpuState = self._create_initial_state()
        self._step_count: int = 0
        self._fault: Optional[CpuFault] = None
        self._symbol_map: SymbolMap = {}
        self._reverse_symbol_map: Dict[int, str] = {}
        # @intent:rationale Stateオブジェクトの直接操作を避けるため、protectedな命名規則を採用。
        #                  外部からのアクセスは`get_state()`メソッドを介して行う。

    # @intent:responsibility シンボルマップを設定します。
    def set_symbol_map(self, symbol_map: SymbolMap) -> None:
        """
        シンボルマップ（名前とアドレスの対応表）を設定します。
        """
        self._symbol_map = dict(symbol_map)
        # 逆引きマップを作成して、アドレスからラベルを素早く引けるようにする
        self._reverse_symbol_map = {addr: name for name, addr in symbol_map.items()}

    def get_symbol_map(self) -> SymbolMap:
        return self._symbol_map

    # @intent:responsibility 初期状態のCpuStateオブジェクトを生成します。
    @abstractmethod
    def _create_initial_state(self) -> CpuState:
        """
        CPUの初期状態を生成して返します。
        具体的なCPUアーキテクチャはこのメソッドを実装し、
        そのアーキテクチャに特化したCpuStateのサブクラスを返します。
        """
        pass

    # @intent:responsibility CPUをリセットし、初期状態に戻します。
    def reset(self) -> None:
        """
        レジスタ・スタック・PCを初期値に戻し、Halted/Faulted状態を解除します。
        メモリの内容（ロード済みプログラム）は保持されます。
        """
        self._state = self._create_initial_state()
        self._step_count = 0
        self._fault = None

    def get_state(self) -> CpuState:
        return self._state

    def get_memory(self) -> Memory:
        return self._memory

    # @intent:responsibility 現在の実行状態（Running / Halted / Faulted）を返します。
    @property
    def status(self) -> ExecutionStatus:
        if self._fault is not None:
            return ExecutionStatus.FAULTED
        if self._state.halted:
            return ExecutionStatus.HALTED
        return ExecutionStatus.RUNNING

    @property
    def fault(self) -> Optional[CpuFault]:
        return self._fault

    # @intent:responsibility メモリから次の命令（オペコード）をフェッチします。
    @abstractmethod
    def _fetch(self) -> int:
        """
        現在のPCからメモリの次の命令（オペコード）をフェッチし、その値を返します。
        フェッチ後、PCは次の命令の先頭を指すように更新されるべきです。
        """
        pass

    # @intent:responsibility フェッチしたオペコードを解析し、Operationオブジェクトに変換します。
    @abstractmethod
    def _decode(self, opcode: int, address: int) -> Operation:
        pass

    # @intent:responsibility デコードされた命令を実行し、CPUの状態を更新します。
    @abstractmethod
    def _execute(self, operation: Operation) -> None:
        pass

    # @intent:responsibility CPUを1命令サイクル進め、その結果のスナップショットを返します。
    # @intent:rationale Template Methodパターンを採用し、共通の実行フロー（ログクリア→フェッチ(PC前進)→デコード→実行→Snapshot生成）を定義します。
    #                  PCの前進はデコードより前に行うため、デコードや実行が失敗しても前進は取り消されません。
    def step(self) -> Snapshot:
        """
        CPUを1命令サイクル進め、その時点でのCPUとメモリアクセスを含むSnapshotオブジェクトを返します。
        致命的エラーはCpuFaultとして送出され、以降のstepは同じエラーを送出します。
        """
        if self._fault is not None:
            raise self._fault

        # 1. 前処理: 前サイクルまでの残存ログを破棄
        self._memory.get_and_clear_activity_log()
        initial_pc = self._state.pc

        # 2. HALT判定 (Hook)
        halt_snapshot = self._handle_halt(initial_pc)
        if halt_snapshot:
            return halt_snapshot

        try:
            # 3. フェッチ (PC前進を含む)
            opcode = self._fetch()

            # 4. デコード
            operation = self._decode(opcode, initial_pc)

            # 5. 実行
            self._execute(operation)
        except CpuFault as fault:
            self._fault = fault
            raise

        # 6. 後処理 & Snapshot生成
        return self._create_snapshot(initial_pc, operation)

    # @intent:responsibility Haltedになるか致命的エラーが発生するまで命令を実行し続けます。
    # @intent:rationale 命令数の上限は持ちません。停止しないプログラムは永久に実行されます。
    #                  上限が必要な呼び出し元はDebugger.run(max_steps=...)を使用します。
    def run(self) -> RunResult:
        """
        状態機械 Running -> (Halted | Faulted) を駆動し、終端状態を返します。
        CpuFault以外の例外はそのまま伝播します。
        """
        steps = 0
        while self.status == ExecutionStatus.RUNNING:
            try:
                self.step()
            except CpuFault as fault:
                return RunResult(ExecutionStatus.FAULTED, fault, steps)
            steps += 1
        return RunResult(self.status, self._fault, steps)

    # @intent:responsibility HALT状態の場合の処理を行います。
    # @intent:return HALT中であればその状態のSnapshot、そうでなければNone。
    def _handle_halt(self, current_pc: int) -> Optional[Snapshot]:
        """
        HALT状態の場合の処理。デフォルトは何もしない（Noneを返す）。
        """
        return None

    # @intent:responsibility スナップショットを生成します。
    def _create_snapshot(self, initial_pc: int, operation: Operation) -> Snapshot:
        memory_activity = self._memory.get_and_clear_activity_log()
        self._step_count += 1

        symbol_label = self._reverse_symbol_map.get(initial_pc, "")
        symbol_info = f"{symbol_label}: " if symbol_label else ""
        symbol_info += operation.render()

        return Snapshot(
            state=self.get_state(),
            operation=operation,
            metadata=Metadata(step_count=self._step_count, symbol_info=symbol_info),
            memory_activity=memory_activity
        )

    @abstractmethod
    def get_register_map(self) -> Dict[str, int]:
        """
        現在のレジスタ値を辞書形式で返す。
        呼び出し元がCPUの内部構造を知らなくても値を表示できるようにするために使用される。
        """
        pass

    @abstractmethod
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        pass

    @abstractmethod
    def get_flag_state(self) -> Dict[str, bool]:
        pass

    @abstractmethod
    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        """
        指定されたメモリ範囲を逆アセンブルし、(address, hex_bytes, mnemonic) のタプルリストを返す。
        """
        pass
