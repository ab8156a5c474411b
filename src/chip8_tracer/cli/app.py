# chip8_tracer/cli/app.py
"""
コマンドラインのエントリポイント。
設定とプログラムを読み込んでCPUを構築し、停止するまで実行して結果を表示します。
"""
import argparse
import sys
from typing import List, Optional

import yaml
from rich.console import Console
from rich.table import Table

from chip8_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_tracer.config.builder import SystemBuilder
from chip8_tracer.config.loader import ConfigLoader
from chip8_tracer.config.models import SystemConfig
from chip8_tracer.debugger.debugger import Debugger, StopReason

EXIT_HALTED = 0
EXIT_FAULTED = 1
EXIT_INTERRUPTED = 2
EXIT_USAGE = 3

def _parse_int(text: str) -> int:
    return int(text, 0)

def _parse_assignment(text: str):
    name, sep, value = text.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"Expected NAME=VALUE, got '{text}'")
    try:
        return name.strip(), _parse_int(value.strip())
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid value in '{text}'")

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chip8-tracer", description="CHIP-8 execution core tracer")
    parser.add_argument("program", nargs="?", help="Program image to load")
    parser.add_argument("--config", "-c", help="YAML system configuration")
    parser.add_argument("--format", choices=["binary", "ihex"], help="Program image format")
    parser.add_argument("--load-address", type=_parse_int, help="Base address for the program (default 0x000)")
    parser.add_argument("--set", dest="registers", action="append", type=_parse_assignment, default=[],
                        metavar="VX=VALUE", help="Initial register value, e.g. V0=5")
    parser.add_argument("--max-steps", type=int, help="Stop after N instructions")
    parser.add_argument("--trace", action="store_true", help="Print every executed instruction")
    parser.add_argument("--disassemble", action="store_true", help="Disassemble the loaded program and exit")
    return parser

# @intent:responsibility 設定ファイルとコマンドライン引数を合成してSystemConfigを作ります。
def _resolve_config(args: argparse.Namespace) -> SystemConfig:
    config = ConfigLoader().load_from_file(args.config) if args.config else SystemConfig()
    if args.program:
        config.program = args.program
    if args.format:
        config.format = args.format
    if args.load_address is not None:
        config.load_address = args.load_address
    for name, value in args.registers:
        config.initial_state.registers[name] = value
    if args.max_steps is not None:
        config.max_steps = args.max_steps
    return config

def _register_table(cpu: Chip8Cpu) -> Table:
    table = Table(title="Registers")
    table.add_column("Register", style="cyan")
    table.add_column("Hex", justify="right")
    table.add_column("Dec", justify="right")
    for name, value in cpu.get_register_map().items():
        width = 3 if name == "PC" else 2
        table.add_row(name, f"{value:0{width}X}", str(value))
    return table

def _disassembly_table(listing) -> Table:
    table = Table(title="Disassembly")
    table.add_column("Address", style="cyan")
    table.add_column("Opcode")
    table.add_column("Instruction")
    for address, hex_bytes, mnemonic in listing:
        table.add_row(f"{address:03X}", hex_bytes, mnemonic)
    return table

# @intent:responsibility 1命令ずつ実行し、実行した命令を表示します。
def _run_traced(console: Console, debugger: Debugger, max_steps: Optional[int]) -> StopReason:
    steps = 0
    printed = None
    while True:
        if max_steps is not None and steps >= max_steps:
            return StopReason.STEP_LIMIT
        reason = debugger.run(max_steps=1)
        snapshot = debugger.get_last_snapshot()
        if snapshot is not None and snapshot is not printed:
            op = snapshot.operation
            console.print(f"{op.address:03X}  {op.opcode_hex}  {snapshot.metadata.symbol_info}")
            printed = snapshot
        if reason != StopReason.STEP_LIMIT:
            return reason
        steps += 1

def main(argv: Optional[List[str]] = None) -> int:
    """
    アプリケーションのメイン関数。終了コードを返します。
    """
    args = build_parser().parse_args(argv)
    console = Console()

    try:
        config = _resolve_config(args)
        if not config.program:
            console.print("[red]Error: no program given (argument or 'program' in config)[/red]")
            return EXIT_USAGE
        cpu = SystemBuilder().build_system(config)
    except (OSError, ValueError, yaml.YAMLError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return EXIT_USAGE

    if args.disassemble:
        length = cpu.get_memory().get_size() - config.load_address
        listing = cpu.disassemble(config.load_address, length)
        # 末尾のゼロ埋め（HALT）の連続は表示しない
        while len(listing) > 1 and listing[-1][1] == "0000" and listing[-2][1] == "0000":
            listing.pop()
        console.print(_disassembly_table(listing))
        return EXIT_HALTED

    debugger = Debugger(cpu)
    if args.trace:
        reason = _run_traced(console, debugger, config.max_steps)
    else:
        reason = debugger.run(max_steps=config.max_steps)

    console.print(_register_table(cpu))
    last = debugger.get_last_snapshot()
    steps = last.metadata.step_count if last is not None else 0
    if reason == StopReason.HALTED:
        console.print(f"[green]HALTED[/green] after {steps} instructions")
        return EXIT_HALTED
    if reason == StopReason.FAULTED:
        fault = debugger.last_fault
        detail = f" (address {fault.address:#05x})" if fault is not None and fault.address is not None else ""
        console.print(f"[red]FAULTED[/red]: {type(fault).__name__}: {fault}{detail}")
        return EXIT_FAULTED
    console.print(f"[yellow]{reason.value}[/yellow] after {steps} instructions")
    return EXIT_INTERRUPTED

if __name__ == '__main__':
    sys.exit(main())
