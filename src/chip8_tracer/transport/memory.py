# chip8_tracer/transport/memory.py
"""
Transport Layer (メモリ)

このモジュールは、CPUが専有する固定長のメモリ空間を抽象化し、
範囲チェック付きの読み書きと、アクセス履歴の記録を提供します。
"""
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List

from chip8_tracer.core.errors import OutOfBoundsError

# @intent:constant CHIP-8のアドレス空間サイズ（0x000-0xFFF）。
MEMORY_SIZE = 0x1000

# @intent:responsibility メモリアクセスを記録するためのタイプを定義します。
class MemoryAccessType(Enum):
    READ = "READ"
    WRITE = "WRITE"

# @intent:responsibility 個々のメモリアクセス操作を記録します。
@dataclass(frozen=True) # 不変データ構造
class MemoryAccess:
    """
    メモリ上で行われた単一のアクセス（読み込みまたは書き込み）を記録するデータクラス。
    """
    address: int
    data: int # 8bit value
    access_type: MemoryAccessType

# @intent:responsibility 範囲チェック付きの固定長バイト配列と、そのアクセスログを管理します。
# @intent:rationale 範囲外アクセスをプロセスのクラッシュではなくOutOfBoundsErrorとして報告し、
#                  実行エンジンがFaulted状態へ遷移できるようにします。
class Memory:
    """
    CPUのメモリ空間。予約領域は持たず、0x000から全域が読み書き可能です。
    実行中に行われた全ての読み書きを記録する機能を提供します。
    """
    def __init__(self, size: int = MEMORY_SIZE):
        if not isinstance(size, int) or size <= 0:
            raise ValueError("Memory size must be a positive integer.")
        self._memory = bytearray(size)
        self._size = size
        self._activity_log: List[MemoryAccess] = []

    def __len__(self) -> int:
        return self._size

    # @intent:responsibility ログを残さないインデックスアクセス。ドライバやテストからの初期化用。
    def __getitem__(self, address: int) -> int:
        return self.peek(address)

    def __setitem__(self, address: int, data: int) -> None:
        self._check_address(address)
        self._check_data(data)
        self._memory[address] = data

    def _check_address(self, address: int) -> None:
        if not 0 <= address < self._size:
            raise OutOfBoundsError(f"Address {address:#06x} out of bounds for memory of size {self._size}.", address=address)

    def _check_data(self, data: int) -> None:
        if not 0 <= data <= 0xFF:
            raise ValueError(f"Data {data} is not an 8-bit value.")

    def _log_access(self, address: int, data: int, access_type: MemoryAccessType) -> None:
        self._activity_log.append(MemoryAccess(address=address, data=data, access_type=access_type))

    # @intent:responsibility 記録されたアクセスログを取得し、クリアします。
    def get_and_clear_activity_log(self) -> List[MemoryAccess]:
        """
        現在のアクセスログを返し、内部ログをクリアします。
        """
        log = self._activity_log
        self._activity_log = []
        return log

    # @intent:responsibility 指定されたアドレスから8bitのデータを読み出します。
    # @intent:pre-condition アドレスはメモリの有効範囲内である必要があります。
    def read(self, address: int) -> int:
        """
        指定されたアドレスから8bitのデータを読み出します。
        アクセスはログに記録されます。
        """
        self._check_address(address)
        data = self._memory[address]
        self._log_access(address, data, MemoryAccessType.READ)
        return data

    # @intent:responsibility ログを記録せずに指定されたアドレスからデータを読み出します。
    def peek(self, address: int) -> int:
        """
        指定されたアドレスから8bitのデータを読み出します（ログ記録なし）。
        逆アセンブラなどのインスペクタ用。
        """
        self._check_address(address)
        return self._memory[address]

    # @intent:responsibility 指定されたアドレスに8bitのデータを書き込みます。
    def write(self, address: int, data: int) -> None:
        self._check_address(address)
        self._check_data(data)
        self._memory[address] = data
        self._log_access(address, data, MemoryAccessType.WRITE)

    # @intent:responsibility プログラムイメージを一括でロードします（ログ記録なし）。
    # @intent:pre-condition イメージ全体がメモリ範囲内に収まる必要があります。
    def load(self, address: int, data: Iterable[int]) -> int:
        """
        指定アドレスからバイト列を書き込み、書き込んだバイト数を返します。
        ローダー用のAPIであり、アクセスログには残りません。
        """
        image = bytes(data)
        if address < 0 or address + len(image) > self._size:
            raise OutOfBoundsError(
                f"Image of {len(image)} bytes at {address:#06x} does not fit in memory of size {self._size}.",
                address=address
            )
        self._memory[address:address + len(image)] = image
        return len(image)

    # @intent:responsibility メモリのサイズを返します。
    def get_size(self) -> int:
        return self._size
