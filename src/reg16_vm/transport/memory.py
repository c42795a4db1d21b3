# reg16_vm/transport/memory.py
"""
Transport Layer (ワードメモリ)

このモジュールは、スタックとロード/ストアが共有する線形メモリ空間を提供し、
全ての読み書きアクセスを記録する責務を負います。
"""
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from reg16_vm.common.types import MAX_MEMORY_CAPACITY, is_word

# @intent:responsibility メモリアクセスを記録するためのタイプを定義します。
class MemoryAccessType(Enum):
    READ = "READ"
    WRITE = "WRITE"

# @intent:responsibility 個々のメモリアクセス操作を記録します。
@dataclass(frozen=True) # 不変データ構造
class MemoryAccess:
    """
    メモリ上で行われた単一のアクセス（読み込みまたは書き込み）を記録するデータクラス。
    書き込みの場合、previous_dataに上書き前の値を保持します（ステップバック用）。
    """
    address: int
    data: int # 16bit value
    access_type: MemoryAccessType
    previous_data: Optional[int] = None

# @intent:responsibility 固定容量・ゼロ初期化のワードメモリを提供します。
class WordMemory:
    """
    16bitワードを要素とする線形メモリ。
    容量は生成時に固定され、以後拡張されることはありません。
    """
    # @intent:responsibility 指定された容量のメモリ領域をゼロで初期化します。
    # @intent:pre-condition capacityは1以上MAX_MEMORY_CAPACITY以下の整数である必要があります。
    def __init__(self, capacity: int):
        if not isinstance(capacity, int) or isinstance(capacity, bool) or capacity <= 0:
            raise ValueError("Memory capacity must be a positive integer.")
        if capacity > MAX_MEMORY_CAPACITY:
            raise ValueError(f"Memory capacity {capacity} exceeds the maximum of {MAX_MEMORY_CAPACITY} words.")
        self._memory: List[int] = [0] * capacity
        self._capacity = capacity
        self._activity_log: List[MemoryAccess] = []

    # @intent:responsibility メモリの容量（ワード数）を返します。
    def get_size(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return self._capacity

    # @intent:responsibility アドレスが有効範囲内かを判定します。
    def contains(self, address: int) -> bool:
        return 0 <= address < self._capacity

    def _check_address(self, address: int) -> None:
        if not self.contains(address):
            raise IndexError(f"Address {address} out of bounds for memory of size {self._capacity}.")

    @staticmethod
    def _check_data(data: int) -> None:
        if not is_word(data):
            raise ValueError(f"Data {data} is not a 16-bit value.")

    # @intent:responsibility メモリアクセスをログに記録します。
    def _log_access(self, address: int, data: int, access_type: MemoryAccessType,
                    previous_data: Optional[int] = None) -> None:
        self._activity_log.append(
            MemoryAccess(address=address, data=data, access_type=access_type, previous_data=previous_data)
        )

    # @intent:responsibility 記録されたアクティビティログを取得し、クリアします。
    def get_and_clear_activity_log(self) -> List[MemoryAccess]:
        """
        現在のアクティビティログを返し、内部ログをクリアします。
        """
        log = self._activity_log
        self._activity_log = []
        return log

    # @intent:responsibility 指定されたアドレスからワードを読み出します。アクセスはログに記録されます。
    # @intent:pre-condition アドレスはメモリの有効範囲内である必要があります。
    def read(self, address: int) -> int:
        self._check_address(address)
        data = self._memory[address]
        self._log_access(address, data, MemoryAccessType.READ)
        return data

    # @intent:responsibility ログを記録せずに指定されたアドレスからワードを読み出します。
    def peek(self, address: int) -> int:
        """
        インスペクタ用の読み出し（ログ記録なし）。
        """
        self._check_address(address)
        return self._memory[address]

    # @intent:responsibility 指定されたアドレスにワードを書き込みます。アクセスはログに記録されます。
    # @intent:pre-condition アドレスは有効範囲内であり、データは16bit値である必要があります。
    def write(self, address: int, data: int) -> None:
        self._check_address(address)
        self._check_data(data)
        previous = self._memory[address]
        self._memory[address] = data
        self._log_access(address, data, MemoryAccessType.WRITE, previous_data=previous)

    # @intent:responsibility ログを記録せずにワードを書き込みます（初期化・Undo用）。
    def load(self, address: int, data: int) -> None:
        self._check_address(address)
        self._check_data(data)
        self._memory[address] = data

    # @intent:responsibility 連続したワード列を指定アドレスから書き込みます（ログなし）。
    def load_block(self, start: int, data: List[int]) -> None:
        if data and not self.contains(start + len(data) - 1):
            raise IndexError(
                f"Block of {len(data)} words at {start} does not fit in memory of size {self._capacity}."
            )
        # 書き込み前にブロック全体を検証する
        for value in data:
            self._check_data(value)
        for offset, value in enumerate(data):
            self.load(start + offset, value)

    # @intent:responsibility メモリ全体の内容のコピーを返します。
    def dump(self) -> List[int]:
        return list(self._memory)

    # @intent:responsibility 全セルを0に戻し、ログを破棄します。
    def clear(self) -> None:
        self._memory = [0] * self._capacity
        self._activity_log = []
