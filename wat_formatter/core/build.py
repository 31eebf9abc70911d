"""Convenience constructors for building instruction trees in code.

WHY: Tools that generate modules (rather than parse them) still want the
canonical printer. Spelling out Instruction("global.get",
(SymbolicIndex("x"),)) by hand is noisy and easy to get wrong, so the
common shapes get one-line helpers.

HOW: Thin wrappers that validate literals through core.literals and
return frozen IR values. instruction() is the generic escape hatch: it
checks the keyword and operand count against the instruction table.

RULES:
- Names passed to symbolic helpers exclude the leading ``$``
- Integer text is validated exactly as the parser would validate it
- instruction() rejects unknown keywords and wrong operand counts
"""

from __future__ import annotations

from typing import Any, Iterable, Union

from wat_formatter.core.instructions import INSTRUCTIONS
from wat_formatter.core.ir import (
    Expression,
    Folded,
    Index,
    Instruction,
    NumericIndex,
    SymbolicIndex,
    Unfolded,
)
from wat_formatter.core.literals import parse_integer

IndexLike = Union[Index, str, int]


def symbolic(name: str) -> SymbolicIndex:
    return SymbolicIndex(name)


def numeric(value: Union[int, str]) -> NumericIndex:
    return NumericIndex(parse_integer(str(value)))


def _index(idx: IndexLike) -> Index:
    if isinstance(idx, (NumericIndex, SymbolicIndex)):
        return idx
    if isinstance(idx, int):
        return numeric(idx)
    return symbolic(idx)


def fold(instr: Instruction, *exprs: Expression) -> Folded:
    """Wrap instr as a folded expression with exprs nested inside."""
    return Folded(instr.with_exprs(list(exprs)))


def unfold(instr: Instruction) -> Unfolded:
    return Unfolded(instr)


def instruction(keyword: str, *operands: Any, exprs: Iterable[Expression] = ()) -> Instruction:
    """Build any registered instruction from already-typed operand values.

    Raises:
        KeyError: keyword is not in the instruction table.
        ValueError: operand count differs from the keyword's schema.
    """
    spec = INSTRUCTIONS[keyword]
    if len(operands) != len(spec.fields):
        raise ValueError(
            "`{}` takes {} operand(s) ({}), got {}".format(
                keyword, len(spec.fields), ", ".join(spec.field_names()), len(operands)
            )
        )
    return Instruction(keyword, tuple(operands), tuple(exprs))


def global_get(name: IndexLike) -> Instruction:
    return instruction("global.get", _index(name))


def global_set(name: IndexLike) -> Instruction:
    return instruction("global.set", _index(name))


def local_get(name: IndexLike) -> Instruction:
    return instruction("local.get", _index(name))


def local_set(name: IndexLike) -> Instruction:
    return instruction("local.set", _index(name))


def local_tee(name: IndexLike) -> Instruction:
    return instruction("local.tee", _index(name))


def call(name: IndexLike) -> Instruction:
    return instruction("call", _index(name))


def i32_const(text: Union[str, int]) -> Instruction:
    """``i32.const`` from literal text, e.g. ``i32_const("0x10")``."""
    return instruction("i32.const", parse_integer(str(text)))


def i64_const(text: Union[str, int]) -> Instruction:
    return instruction("i64.const", parse_integer(str(text)))
