"""Intermediate representation for instructions and their operands.

WHY: The folding engine, the section grammar, the printer, and anyone
building modules in code all need one shared vocabulary of values:
indices, integer literals, value types, instructions, and the folded vs.
unfolded expressions that wrap them. Keeping these in one module makes
the data model the contract between parsing and rendering.

HOW: Frozen dataclasses, built once and never mutated:
  Integer       — a literal with its sign, source text, digits, radix
  NumericIndex  — an index written as an integer literal
  SymbolicIndex — an index written as $name
  ValueType     — i32 / i64 / f32 / f64
  BlockType     — the optional (result ...) of block, loop, and if
  MemArg        — the optional offset=/align= of memory instructions
  Instruction   — keyword, operand values, nested child expressions
  Folded / Unfolded — the two ways an Instruction can be written
Every operand value knows how to turn itself into tree expressions via
to_exprs(); Instruction uses that to render without consulting the
instruction table.

RULES:
- Integer.src is the exact source text and is what gets rendered
- SymbolicIndex equality and hashing ignore the source span
- Operand values appear in the instruction's declared field order;
  None means an absent optional field, a tuple means a repeated field
- Unfolded instructions never carry nested expressions
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Any, List, Optional, Tuple, Union

from wat_formatter.core.sexpr import Atom, Expr, Node, SExpr, render


class Sign(enum.Enum):
    """Explicit sign of an integer literal. The value is its source text."""

    NONE = ""
    POSITIVE = "+"
    NEGATIVE = "-"


@dataclass(frozen=True)
class Integer:
    """An integer literal that round-trips to its exact source text.

    Attributes:
        sign: Explicit sign, or Sign.NONE.
        src: Original source text, e.g. ``"-0x1A_b2"``.
        digits: Digits and separators without sign or ``0x``, e.g. ``"1A_b2"``.
        hex: True for hexadecimal literals.
    """

    sign: Sign
    src: str
    digits: str
    hex: bool = False

    @property
    def radix(self) -> int:
        return 16 if self.hex else 10

    @property
    def value(self) -> int:
        """Numeric value with the sign applied."""
        n = int(self.digits.replace("_", ""), self.radix)
        return -n if self.sign is Sign.NEGATIVE else n

    def to_exprs(self) -> List[Expr]:
        return [Atom(self.src)]

    def __str__(self) -> str:
        return self.src


@dataclass(frozen=True)
class Span:
    """Source position of a token."""

    offset: int
    line: int
    column: int


@dataclass(frozen=True)
class NumericIndex:
    """An index written as an integer literal, e.g. ``0``."""

    integer: Integer

    def to_exprs(self) -> List[Expr]:
        return [Atom(str(self))]

    def __str__(self) -> str:
        return self.integer.src


@dataclass(frozen=True)
class SymbolicIndex:
    """An index written as ``$name``; ``name`` excludes the ``$``.

    span is only set when the index was parsed from source. It is left
    out of equality and hashing so parsed and hand-built trees compare
    equal.
    """

    name: str
    span: Optional[Span] = field(default=None, compare=False, hash=False, repr=False)

    def to_exprs(self) -> List[Expr]:
        return [Atom(str(self))]

    def __str__(self) -> str:
        return "${}".format(self.name)


Index = Union[NumericIndex, SymbolicIndex]


class ValueType(enum.Enum):
    I32 = "i32"
    I64 = "i64"
    F32 = "f32"
    F64 = "f64"

    def to_exprs(self) -> List[Expr]:
        return [Atom(self.value)]

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class BlockType:
    """Result types of a structured instruction: ``(result i32 ...)``."""

    results: Tuple[ValueType, ...] = ()

    def to_exprs(self) -> List[Expr]:
        return [Node("result", tuple(Atom(vt.value) for vt in self.results))]


@dataclass(frozen=True)
class MemArg:
    """Static offset and alignment immediates of a load or store."""

    offset: Optional[Integer] = None
    align: Optional[Integer] = None

    def to_exprs(self) -> List[Expr]:
        v: List[Expr] = []
        if self.offset is not None:
            v.append(Atom("offset={}".format(self.offset.src)))
        if self.align is not None:
            v.append(Atom("align={}".format(self.align.src)))
        return v


def operand_exprs(value: Any) -> List[Expr]:
    """Serialize one operand field value (possibly None or a tuple)."""
    if value is None:
        return []
    if isinstance(value, tuple):
        v: List[Expr] = []
        for item in value:
            v.extend(item.to_exprs())
        return v
    return value.to_exprs()


@dataclass(frozen=True)
class Instruction(SExpr):
    """One instruction: keyword, operand values, nested child expressions.

    Attributes:
        keyword: A keyword registered in the instruction table, e.g. ``"call"``.
        operands: Field values in declared order (see core.instructions).
        exprs: Nested expressions of a folded instruction, in source order.
    """

    keyword: str
    operands: Tuple[Any, ...] = ()
    exprs: Tuple["Expression", ...] = ()

    def with_exprs(self, exprs: List["Expression"]) -> "Instruction":
        """Return a copy carrying exprs as its nested children."""
        return replace(self, exprs=tuple(exprs))

    def operand_exprs(self) -> List[Expr]:
        v: List[Expr] = []
        for value in self.operands:
            v.extend(operand_exprs(value))
        return v

    def head(self) -> str:
        return self.keyword

    def children(self) -> List[Expr]:
        return self.operand_exprs() + [e.to_expr() for e in self.exprs]


@dataclass(frozen=True)
class Expression(ABC):
    """An instruction together with the notation it was written in.

    Closed over Folded and Unfolded; the base class cannot be instantiated.
    """

    instr: Instruction

    @property
    @abstractmethod
    def folded(self) -> bool:
        """True for ``(keyword ...)`` notation."""

    @abstractmethod
    def to_expr(self) -> Expr:
        """The tree this expression renders as."""


@dataclass(frozen=True)
class Folded(Expression):
    """Written as ``(keyword operands nested...)``."""

    @property
    def folded(self) -> bool:
        return True

    def to_expr(self) -> Expr:
        return self.instr.to_node()


@dataclass(frozen=True)
class Unfolded(Expression):
    """Written flat, as one element of a stack-machine sequence."""

    def __post_init__(self) -> None:
        if self.instr.exprs:
            raise ValueError(
                "unfolded `{}` cannot carry nested expressions".format(self.instr.keyword)
            )

    @property
    def folded(self) -> bool:
        return False

    def to_expr(self) -> Expr:
        parts = [self.instr.keyword]
        parts.extend(render(e, 0) for e in self.instr.operand_exprs())
        return Atom(" ".join(parts))
