# chip8_tracer/debugger/debugger.py
"""
デバッガモジュール。

コアエンジンの実行を制御し、ユーザーが指定した条件（ブレークポイント、命令数の上限）で
実行を中断させる責務を負います。コアのrun()は命令数の上限を持たないため、
上限付きの実行はこのモジュールが提供します。
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Optional

from chip8_tracer.core.cpu import AbstractCpu
from chip8_tracer.core.errors import CpuFault
from chip8_tracer.core.snapshot import Snapshot, MemoryAccessType
from chip8_tracer.core.state import ExecutionStatus

# @intent:responsibility ブレークポイントの条件タイプを定義します。
class BreakpointConditionType(Enum):
    PC_MATCH = "PC_MATCH"               # プログラムカウンタが特定のアドレスに一致
    MEMORY_READ = "MEMORY_READ"         # 特定のアドレスが読み込まれた
    REGISTER_VALUE = "REGISTER_VALUE"   # 特定のレジスタが特定の値になった
    REGISTER_CHANGE = "REGISTER_CHANGE" # 特定のレジスタの値が変化した

# @intent:responsibility run()が停止した理由を表します。
class StopReason(Enum):
    HALTED = "HALTED"
    FAULTED = "FAULTED"
    BREAKPOINT = "BREAKPOINT"
    STEP_LIMIT = "STEP_LIMIT"
    STOPPED = "STOPPED"

# @intent:responsibility ブレークポイントをトリガーする条件を定義します。
@dataclass(frozen=True)
class BreakpointCondition:
    """
    ブレークポイントがヒットするための条件を定義するデータクラス。
    register_nameは "V0".."VF", "PC", "SP" のいずれかです。
    """
    condition_type: BreakpointConditionType
    value: Optional[int] = None           # PC_MATCH, REGISTER_VALUEで使用
    address: Optional[int] = None         # MEMORY_READで使用
    register_name: Optional[str] = None   # REGISTER_VALUE, REGISTER_CHANGEで使用
    enabled: bool = True

# @intent:responsibility コアエンジンの実行制御とブレークポイント管理を行います。
class Debugger:
    """
    CPUの実行を制御し、ブレークポイントの管理を行うクラス。
    """
    def __init__(self, cpu: AbstractCpu, max_history: int = 1000):
        self._cpu = cpu
        self._breakpoints: List[BreakpointCondition] = []
        self._running: bool = False
        self._previous_registers: Dict[str, int] = cpu.get_register_map()
        self._last_snapshot: Optional[Snapshot] = None
        self._last_fault: Optional[CpuFault] = None
        self._max_history = max_history
        # @intent:responsibility 直近の実行履歴を保持します（古いものから破棄）。
        self._history: List[Snapshot] = []

    def add_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition not in self._breakpoints:
            self._breakpoints.append(condition)

    def remove_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition in self._breakpoints:
            self._breakpoints.remove(condition)

    def get_breakpoints(self) -> List[BreakpointCondition]:
        return list(self._breakpoints)

    def get_history(self) -> List[Snapshot]:
        return list(self._history)

    def get_last_snapshot(self) -> Optional[Snapshot]:
        return self._last_snapshot

    @property
    def last_fault(self) -> Optional[CpuFault]:
        return self._last_fault

    def _check_pc_breakpoint(self, pc: int) -> bool:
        for bp in self._breakpoints:
            if bp.enabled and bp.condition_type == BreakpointConditionType.PC_MATCH and bp.value == pc:
                return True
        return False

    def _check_other_breakpoints(self, snapshot: Snapshot) -> bool:
        """
        Snapshotに基づいてPC_MATCH以外のブレークポイントをチェックします。
        """
        registers = self._cpu.get_register_map()

        for bp in self._breakpoints:
            if not bp.enabled:
                continue

            if bp.condition_type == BreakpointConditionType.MEMORY_READ:
                for access in snapshot.memory_activity:
                    if access.access_type == MemoryAccessType.READ and access.address == bp.address:
                        return True
            elif bp.condition_type == BreakpointConditionType.REGISTER_VALUE:
                if bp.register_name in registers and registers[bp.register_name] == bp.value:
                    return True
            elif bp.condition_type == BreakpointConditionType.REGISTER_CHANGE:
                name = bp.register_name
                if name in registers and name in self._previous_registers:
                    if registers[name] != self._previous_registers[name]:
                        return True
        return False

    def step_instruction(self) -> Snapshot:
        """
        CPUを1命令分実行し、その結果のSnapshotを返します。
        致命的エラーはそのまま送出されます。
        """
        self._previous_registers = self._cpu.get_register_map()
        snapshot = self._cpu.step()
        self._last_snapshot = snapshot

        # 履歴にはその時点のstateの複製を保持する
        self._history.append(replace(snapshot, state=snapshot.state.clone()))
        if len(self._history) > self._max_history:
            del self._history[0]

        return snapshot

    # @intent:responsibility 停止条件を満たすまでCPUの実行を継続します。
    # @intent:rationale 致命的エラーは再送出せずlast_faultに記録し、StopReason.FAULTEDとして返します。
    def run(self, max_steps: Optional[int] = None) -> StopReason:
        """
        Halted, Faulted, ブレークポイント, 命令数の上限, stop() のいずれかで停止します。
        """
        self._running = True
        steps = 0

        # Breakpoint at current PC is stepped over once
        can_step = max_steps is None or max_steps > 0
        if can_step and self._cpu.status == ExecutionStatus.RUNNING and self._check_pc_breakpoint(self._cpu.get_state().pc):
            reason = self._guarded_step()
            if reason is not None:
                return reason
            steps += 1

        while self._running:
            if self._cpu.status == ExecutionStatus.HALTED:
                self._running = False
                return StopReason.HALTED
            if self._cpu.status == ExecutionStatus.FAULTED:
                self._running = False
                self._last_fault = self._cpu.fault
                return StopReason.FAULTED

            current_pc = self._cpu.get_state().pc
            if self._check_pc_breakpoint(current_pc):
                self._running = False
                print(f"Breakpoint hit at PC: {current_pc:#06x}")
                return StopReason.BREAKPOINT

            if max_steps is not None and steps >= max_steps:
                self._running = False
                return StopReason.STEP_LIMIT

            reason = self._guarded_step()
            if reason is not None:
                return reason
            steps += 1

        return StopReason.STOPPED

    def _guarded_step(self) -> Optional[StopReason]:
        try:
            snapshot = self.step_instruction()
        except CpuFault as fault:
            self._running = False
            self._last_fault = fault
            return StopReason.FAULTED

        if self._cpu.status == ExecutionStatus.HALTED:
            self._running = False
            return StopReason.HALTED

        if self._check_other_breakpoints(snapshot):
            self._running = False
            print(f"Breakpoint hit at PC: {snapshot.state.pc:#06x}")
            return StopReason.BREAKPOINT
        return None

    def stop(self) -> None:
        self._running = False
