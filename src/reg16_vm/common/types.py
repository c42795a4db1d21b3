"""
共通の型定義を提供するモジュール。
プロジェクト全体で使用されるワード定数、列挙型などを定義します。
"""
from enum import Enum

# @intent:constant マシンのネイティブ値（ワード）は符号なし16bit。
WORD_BITS = 16
WORD_MASK = 0xFFFF

# @intent:constant 汎用レジスタの本数 (R0-R7)。
NUM_REGISTERS = 8

# @intent:constant メモリ容量の既定値と上限（ワード単位）。
# 上限はSPが最終セルへのPush後も16bitに収まる値。
DEFAULT_MEMORY_CAPACITY = 256
MAX_MEMORY_CAPACITY = 0xFFFF

# @intent:responsibility 算術命令がゼロフラグを更新するかどうかのポリシーを定義します。
class ZeroFlagPolicy(Enum):
    NEVER = "never"             # どの命令もフラグを書き換えない（既定）
    ARITHMETIC = "arithmetic"   # ADD/SUB/MUL/DIVの結果が0ならフラグを立てる

# @intent:responsibility フォールトの種別を定義します。
class FaultKind(Enum):
    DIVISION_BY_ZERO = "DIVISION_BY_ZERO"
    MEMORY_OUT_OF_BOUNDS = "MEMORY_OUT_OF_BOUNDS"
    STACK_OVERFLOW = "STACK_OVERFLOW"
    STACK_UNDERFLOW = "STACK_UNDERFLOW"

# @intent:utility_function 値が16bitワードの範囲内かを判定します。
def is_word(value: int) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= WORD_MASK
