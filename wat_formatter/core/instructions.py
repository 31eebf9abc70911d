"""Instruction table: keyword → ordered operand schema, plus the generic parser.

WHY: Every instruction follows the same shape (a keyword followed by a
fixed sequence of immediates) and differs only in which immediates it
takes. Describing the whole family as data keeps the parser and the
printer to one routine each, and adding an instruction is one table row.

HOW: INSTRUCTIONS maps each keyword to an InstructionSpec (its ordered
FieldSpecs). parse_instruction() peeks the keyword, looks it up, then
runs the sub-parser registered for each field kind in order. Rendering
needs no table lookup: the operand values render themselves (see
core.ir.Instruction).

RULES:
- The table is a read-only mapping built once at import time
- Field kinds: index, optional_index, indices, integer, value_type,
  block_type, memarg
- An unknown keyword raises UnrecognizedInstructionError listing every
  registered keyword
- Sub-parser errors (bad literal, missing index) propagate unchanged
- A freshly parsed instruction has no nested expressions; the folding
  engine attaches them
"""

from __future__ import annotations

import enum
import types
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from wat_formatter.core.ir import BlockType, Instruction, Integer, MemArg, ValueType
from wat_formatter.core.literals import parse_integer
from wat_formatter.errors import LiteralError, UnrecognizedInstructionError
from wat_formatter.reader.cursor import Cursor


class FieldKind(enum.Enum):
    INDEX = "index"
    OPTIONAL_INDEX = "optional_index"
    INDICES = "indices"
    INTEGER = "integer"
    VALUE_TYPE = "value_type"
    BLOCK_TYPE = "block_type"
    MEMARG = "memarg"


@dataclass(frozen=True)
class FieldSpec:
    name: str
    kind: FieldKind


@dataclass(frozen=True)
class InstructionSpec:
    """Operand schema of one instruction keyword."""

    keyword: str
    fields: Tuple[FieldSpec, ...] = ()

    def field_names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fields)


# ---------------------------------------------------------------------------
# Field sub-parsers
# ---------------------------------------------------------------------------

_VALUE_TYPES = {vt.value: vt for vt in ValueType}


def parse_value_type(cursor: Cursor) -> ValueType:
    """Consume one of i32, i64, f32, f64."""
    if cursor.peek_keyword():
        tok = cursor.peek()
        if tok.text in _VALUE_TYPES:
            cursor.keyword()
            return _VALUE_TYPES[tok.text]
    raise cursor.error(
        "expected a value type ({}), found {}".format(
            ", ".join(_VALUE_TYPES), cursor.describe_next()
        )
    )


def _parse_optional_index(cursor: Cursor) -> Any:
    if cursor.peek_index():
        return cursor.index()
    return None


def _parse_indices(cursor: Cursor) -> Tuple[Any, ...]:
    idxs = [cursor.index()]
    while cursor.peek_index():
        idxs.append(cursor.index())
    return tuple(idxs)


def _parse_block_type(cursor: Cursor) -> Optional[BlockType]:
    if not cursor.peek2_keyword("result"):
        return None

    def _results(c: Cursor) -> BlockType:
        c.keyword("result")
        results: List[ValueType] = []
        while not c.is_empty():
            results.append(parse_value_type(c))
        return BlockType(tuple(results))

    return cursor.parens(_results)


_MEMARG_KEYS = ("offset=", "align=")


def _parse_memarg(cursor: Cursor) -> Optional[MemArg]:
    found: Dict[str, Integer] = {}
    for key in _MEMARG_KEYS:
        tok = cursor.peek()
        if tok is not None and cursor.peek_keyword() and tok.text.startswith(key):
            cursor.keyword()
            try:
                found[key] = parse_integer(tok.text[len(key):])
            except LiteralError as err:
                raise err.at_position(tok.offset, tok.line, tok.column)
    if not found:
        return None
    return MemArg(offset=found.get("offset="), align=found.get("align="))


_FIELD_PARSERS: Mapping[FieldKind, Callable[[Cursor], Any]] = types.MappingProxyType({
    FieldKind.INDEX: lambda c: c.index(),
    FieldKind.OPTIONAL_INDEX: _parse_optional_index,
    FieldKind.INDICES: _parse_indices,
    FieldKind.INTEGER: lambda c: c.integer(),
    FieldKind.VALUE_TYPE: parse_value_type,
    FieldKind.BLOCK_TYPE: _parse_block_type,
    FieldKind.MEMARG: _parse_memarg,
})

# ---------------------------------------------------------------------------
# The table
# ---------------------------------------------------------------------------

_LABEL = FieldSpec("label", FieldKind.OPTIONAL_INDEX)
_BLOCK_TYPE = FieldSpec("block_type", FieldKind.BLOCK_TYPE)
_IDX = FieldSpec("idx", FieldKind.INDEX)
_INTEGER = FieldSpec("integer", FieldKind.INTEGER)
_MEMARG = FieldSpec("memarg", FieldKind.MEMARG)

_STRUCTURED = ("block", "loop", "if")
_LABELLED = ("br", "br_if", "call", "local.get", "local.set", "local.tee", "global.get", "global.set")
_PLAIN = (
    "then", "else", "end", "return", "drop", "nop", "unreachable", "select",
    "i32.add", "i32.sub", "i32.mul", "i32.div_u", "i32.rem_u",
    "i32.and", "i32.or", "i32.xor", "i32.shl", "i32.shr_u",
    "i32.eq", "i32.eqz", "i32.ne", "i32.gt_u", "i32.lt_u", "i32.ge_u", "i32.le_u",
    "i64.add", "i64.sub", "i64.eq", "i64.eqz",
    "i32.wrap_i64", "i64.extend_i32_u",
    "memory.size", "memory.grow",
)
_MEMORY = ("i32.load", "i32.store", "i64.load", "i64.store", "i32.load8_u", "i32.store8")


def _build_table() -> Mapping[str, InstructionSpec]:
    table: Dict[str, InstructionSpec] = {}
    for kw in _STRUCTURED:
        table[kw] = InstructionSpec(kw, (_LABEL, _BLOCK_TYPE))
    for kw in _LABELLED:
        table[kw] = InstructionSpec(kw, (_IDX,))
    for kw in _PLAIN:
        table[kw] = InstructionSpec(kw)
    for kw in _MEMORY:
        table[kw] = InstructionSpec(kw, (_MEMARG,))
    table["br_table"] = InstructionSpec("br_table", (FieldSpec("labels", FieldKind.INDICES),))
    table["i32.const"] = InstructionSpec("i32.const", (_INTEGER,))
    table["i64.const"] = InstructionSpec("i64.const", (_INTEGER,))
    table["local"] = InstructionSpec("local", (
        FieldSpec("idx", FieldKind.OPTIONAL_INDEX),
        FieldSpec("value_type", FieldKind.VALUE_TYPE),
    ))
    return types.MappingProxyType(table)


INSTRUCTIONS: Mapping[str, InstructionSpec] = _build_table()
"""Every supported instruction keyword and its operand schema."""

EXPECTED_KEYWORDS: Tuple[str, ...] = tuple(sorted(INSTRUCTIONS))


def spec_for(keyword: str) -> InstructionSpec:
    """Look up a keyword's schema; KeyError if it is not registered."""
    return INSTRUCTIONS[keyword]


def peek_instruction(cursor: Cursor) -> bool:
    """True if the next token is a registered instruction keyword."""
    tok = cursor.peek()
    return cursor.peek_keyword() and tok.text in INSTRUCTIONS


def parse_instruction(cursor: Cursor) -> Instruction:
    """Parse one instruction: keyword, then each declared field in order.

    Raises:
        UnrecognizedInstructionError: The next token is not a registered keyword.
        ParseError / LiteralError: A field failed under its sub-parser.
    """
    if not peek_instruction(cursor):
        tok = cursor.peek()
        span = cursor.span()
        found = tok.text if tok is not None else "end of input"
        raise UnrecognizedInstructionError(
            found, EXPECTED_KEYWORDS, span.offset, span.line, span.column
        )

    spec = INSTRUCTIONS[cursor.keyword()]
    operands = tuple(_FIELD_PARSERS[f.kind](cursor) for f in spec.fields)
    return Instruction(spec.keyword, operands)
