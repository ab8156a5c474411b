from dataclasses import dataclass, field
from typing import Dict, Optional

@dataclass
class CpuInitialState:
    pc: Optional[int] = None  # Noneの場合はload_addressから開始
    registers: Dict[str, int] = field(default_factory=dict)  # {"V0": 5, ...}

@dataclass
class SystemConfig:
    program: Optional[str] = None
    format: str = "binary"  # "binary", "ihex"
    load_address: int = 0x000
    initial_state: CpuInitialState = field(default_factory=CpuInitialState)
    symbols: Dict[str, int] = field(default_factory=dict)
    max_steps: Optional[int] = None
