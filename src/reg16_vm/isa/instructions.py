# reg16_vm/isa/instructions.py
"""
命令セット定義。

15種類の命令をそれぞれ不変のデータクラスとして定義します。
命令は純粋なデータであり、実行は (状態, 命令) -> 変更された状態 という関数として
maps.py のディスパッチテーブルが担います。
"""
from dataclasses import dataclass
from typing import ClassVar, List, Union

from reg16_vm.common.types import NUM_REGISTERS, WORD_MASK, is_word

# @intent:utility_function レジスタ番号を検証します。
def _check_register(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value < NUM_REGISTERS:
        raise ValueError(f"Operand '{name}' must be a register index 0-{NUM_REGISTERS - 1}, got {value!r}.")

def _check_word(name: str, value: int) -> None:
    if not is_word(value):
        raise ValueError(f"Operand '{name}' must be a 16-bit word, got {value!r}.")

def format_register(index: int) -> str:
    return f"R{index}"

def format_address(value: int) -> str:
    return f"${value:04X}"

# @intent:utility_function 16bitワードを符号付きオフセットとして解釈します。
def to_signed(value: int) -> int:
    return value - 0x10000 if value & 0x8000 else value

# @intent:responsibility 全命令の基底クラス。ニーモニックとオペランド文字列を提供します。
@dataclass(frozen=True)
class Instruction:
    mnemonic: ClassVar[str] = ""

    @property
    def operands(self) -> List[str]:
        return []

    def __str__(self) -> str:
        if self.operands:
            return f"{self.mnemonic} " + ", ".join(self.operands)
        return self.mnemonic

# --- Operand Shapes ---

# @intent:responsibility 2つのレジスタオペランドを取る命令の共通部分。
@dataclass(frozen=True)
class RegRegInstruction(Instruction):
    r1: int
    r2: int

    def __post_init__(self):
        _check_register("r1", self.r1)
        _check_register("r2", self.r2)

    @property
    def operands(self) -> List[str]:
        return [format_register(self.r1), format_register(self.r2)]

@dataclass(frozen=True)
class RegInstruction(Instruction):
    reg: int

    def __post_init__(self):
        _check_register("reg", self.reg)

    @property
    def operands(self) -> List[str]:
        return [format_register(self.reg)]

# @intent:responsibility 絶対アドレスへの分岐命令の共通部分。
@dataclass(frozen=True)
class AbsoluteJumpInstruction(Instruction):
    target: int

    def __post_init__(self):
        _check_word("target", self.target)

    @property
    def operands(self) -> List[str]:
        return [format_address(self.target)]

# @intent:responsibility 相対分岐命令の共通部分。
# @intent:note 負のオフセット(-0x8000まで)は16bitの2の補数表現に正規化して保持します。
@dataclass(frozen=True)
class RelativeJumpInstruction(Instruction):
    offset: int

    def __post_init__(self):
        offset = self.offset
        if isinstance(offset, int) and not isinstance(offset, bool) and -0x8000 <= offset < 0:
            object.__setattr__(self, "offset", offset & WORD_MASK)
        _check_word("offset", self.offset)

    @property
    def signed_offset(self) -> int:
        return to_signed(self.offset)

    @property
    def operands(self) -> List[str]:
        return [f"{self.signed_offset:+d}"]

# --- Arithmetic ---

@dataclass(frozen=True)
class Add(RegRegInstruction):
    mnemonic: ClassVar[str] = "ADD"

@dataclass(frozen=True)
class Sub(RegRegInstruction):
    mnemonic: ClassVar[str] = "SUB"

@dataclass(frozen=True)
class Mul(RegRegInstruction):
    mnemonic: ClassVar[str] = "MUL"

@dataclass(frozen=True)
class Div(RegRegInstruction):
    mnemonic: ClassVar[str] = "DIV"

# --- Data Transfer ---

@dataclass(frozen=True)
class Mov(RegRegInstruction):
    """r1 <- r2"""
    mnemonic: ClassVar[str] = "MOV"

@dataclass(frozen=True)
class Store(RegRegInstruction):
    """memory[reg[r1]] <- reg[r2] (r1: アドレスレジスタ, r2: 値レジスタ)"""
    mnemonic: ClassVar[str] = "STORE"

@dataclass(frozen=True)
class Load(RegRegInstruction):
    """reg[r1] <- memory[reg[r2]] (r1: 転送先, r2: アドレスレジスタ)"""
    mnemonic: ClassVar[str] = "LOAD"

@dataclass(frozen=True)
class Push(RegInstruction):
    mnemonic: ClassVar[str] = "PUSH"

@dataclass(frozen=True)
class Pop(RegInstruction):
    mnemonic: ClassVar[str] = "POP"

# --- Control Flow ---

@dataclass(frozen=True)
class Jmp(AbsoluteJumpInstruction):
    mnemonic: ClassVar[str] = "JMP"

@dataclass(frozen=True)
class JmpZ(AbsoluteJumpInstruction):
    mnemonic: ClassVar[str] = "JMPZ"

@dataclass(frozen=True)
class JmpNZ(AbsoluteJumpInstruction):
    mnemonic: ClassVar[str] = "JMPNZ"

@dataclass(frozen=True)
class JmpRel(RelativeJumpInstruction):
    mnemonic: ClassVar[str] = "JMPREL"

@dataclass(frozen=True)
class JmpZRel(RelativeJumpInstruction):
    mnemonic: ClassVar[str] = "JMPZREL"

@dataclass(frozen=True)
class JmpNZRel(RelativeJumpInstruction):
    mnemonic: ClassVar[str] = "JMPNZREL"

# @intent:data_structure 閉じた命令集合（タグ付き共用体）。
AnyInstruction = Union[
    Add, Sub, Mul, Div, Mov, Store, Load, Push, Pop,
    Jmp, JmpZ, JmpNZ, JmpRel, JmpZRel, JmpNZRel,
]

ALL_INSTRUCTIONS = (
    Add, Sub, Mul, Div, Mov, Store, Load, Push, Pop,
    Jmp, JmpZ, JmpNZ, JmpRel, JmpZRel, JmpNZRel,
)
