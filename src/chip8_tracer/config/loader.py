import os
import yaml
from typing import Dict, Any, Optional
from .models import SystemConfig, CpuInitialState

class ConfigLoader:
    def load_from_file(self, path: str) -> SystemConfig:
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}
        config = self._parse_config(data)
        # プログラムのパスは設定ファイルからの相対パスとして解決する
        if config.program and not os.path.isabs(config.program):
            config.program = os.path.join(os.path.dirname(os.path.abspath(path)), config.program)
        return config

    def _parse_config(self, data: Dict[str, Any]) -> SystemConfig:
        if not isinstance(data, dict):
            raise ValueError("Config root must be a mapping.")

        fmt = data.get("format", "binary")
        if fmt not in ("binary", "ihex"):
            raise ValueError(f"Unsupported program format: {fmt}")

        initial_state_data = self._parse_mapping(data.get("initial_state"), "initial_state")
        registers = {
            str(name): self._parse_int(value)
            for name, value in self._parse_mapping(initial_state_data.get("registers"), "initial_state.registers").items()
        }
        initial_state = CpuInitialState(
            pc=self._parse_optional_int(initial_state_data.get("pc")),
            registers=registers
        )

        symbols = {
            str(name): self._parse_int(value)
            for name, value in self._parse_mapping(data.get("symbols"), "symbols").items()
        }

        return SystemConfig(
            program=data.get("program"),
            format=fmt,
            load_address=self._parse_int(data.get("load_address", 0)),
            initial_state=initial_state,
            symbols=symbols,
            max_steps=self._parse_optional_int(data.get("max_steps"))
        )

    def _parse_optional_int(self, value: Any) -> Optional[int]:
        if value is None:
            return None
        return self._parse_int(value)

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            try:
                if value.lower().startswith("0x"):
                    return int(value, 16)
                return int(value)
            except ValueError:
                pass
        raise ValueError(f"Invalid integer format: {value}")

    def _parse_mapping(self, value: Any, key: str) -> Dict[str, Any]:
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise ValueError(f"'{key}' must be a mapping.")
        return value
