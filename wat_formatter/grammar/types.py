"""Type-level grammar pieces shared by several module fields.

WHY: Function signatures, memory limits, and global types show up in
more than one place: a type definition, an import descriptor, a function
header. Parsing and rendering them once keeps the section parsers short
and guarantees that ``(param i32)`` prints the same wherever it appears.

HOW: Each piece is a frozen dataclass. Pieces that render as their own
parenthesized node (param, result, func, type, mut, export) subclass
SExpr; pieces that contribute bare atoms to their parent (limits, a
whole typeuse) expose exprs(). parse_* functions for parenthesized
pieces expect the cursor just inside the parens, head keyword not yet
consumed; the others peek for their own opening paren.

RULES:
- ``(param $name vt)`` carries exactly one value type
- ``(param vt*)`` and ``(result vt*)`` may be empty
- A typeuse is ``(type idx)? (param ...)* (result ...)*`` in that order
- A global type is a bare value type or ``(mut vt)``
- Strings keep their quotes
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from wat_formatter.core.instructions import parse_value_type
from wat_formatter.core.ir import Index, Integer, SymbolicIndex, ValueType
from wat_formatter.core.sexpr import Atom, Expr, SExpr
from wat_formatter.reader.cursor import Cursor


def index_exprs(idx: Optional[Index]) -> List[Expr]:
    """Zero or one atom for an optional leading identifier."""
    if idx is None:
        return []
    return idx.to_exprs()


def parse_optional_id(cursor: Cursor) -> Optional[SymbolicIndex]:
    if cursor.peek_id():
        return cursor.id()
    return None


# ---------------------------------------------------------------------------
# Function signatures
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Param(SExpr):
    """``(param i32 i64)`` or, with a name, ``(param $x i32)``."""

    value_types: Tuple[ValueType, ...] = ()
    name: Optional[SymbolicIndex] = None

    def head(self) -> str:
        return "param"

    def children(self) -> List[Expr]:
        return index_exprs(self.name) + [Atom(vt.value) for vt in self.value_types]


@dataclass(frozen=True)
class Result(SExpr):
    value_types: Tuple[ValueType, ...] = ()

    def head(self) -> str:
        return "result"

    def children(self) -> List[Expr]:
        return [Atom(vt.value) for vt in self.value_types]


def _value_types(cursor: Cursor) -> Tuple[ValueType, ...]:
    vts: List[ValueType] = []
    while not cursor.is_empty():
        vts.append(parse_value_type(cursor))
    return tuple(vts)


def parse_param(cursor: Cursor) -> Param:
    cursor.keyword("param")
    if cursor.peek_id():
        name = cursor.id()
        return Param((parse_value_type(cursor),), name)
    return Param(_value_types(cursor))


def parse_result(cursor: Cursor) -> Result:
    cursor.keyword("result")
    return Result(_value_types(cursor))


def _params_and_results(cursor: Cursor) -> Tuple[Tuple[Param, ...], Tuple[Result, ...]]:
    params: List[Param] = []
    results: List[Result] = []
    while cursor.peek2_keyword("param"):
        params.append(cursor.parens(parse_param))
    while cursor.peek2_keyword("result"):
        results.append(cursor.parens(parse_result))
    return tuple(params), tuple(results)


@dataclass(frozen=True)
class FuncType(SExpr):
    """The ``(func (param ...)* (result ...)*)`` of a type definition."""

    params: Tuple[Param, ...] = ()
    results: Tuple[Result, ...] = ()

    def head(self) -> str:
        return "func"

    def children(self) -> List[Expr]:
        return [p.to_node() for p in self.params] + [r.to_node() for r in self.results]


def parse_func_type(cursor: Cursor) -> FuncType:
    cursor.keyword("func")
    params, results = _params_and_results(cursor)
    return FuncType(params, results)


@dataclass(frozen=True)
class TypeRef(SExpr):
    """``(type $sig)`` inside a typeuse."""

    idx: Index

    def head(self) -> str:
        return "type"

    def children(self) -> List[Expr]:
        return self.idx.to_exprs()


@dataclass(frozen=True)
class TypeUse:
    """Signature of a function or imported function.

    Contributes its nodes directly to the enclosing ``func`` node; it has
    no parens of its own.
    """

    type_ref: Optional[TypeRef] = None
    params: Tuple[Param, ...] = ()
    results: Tuple[Result, ...] = ()

    def exprs(self) -> List[Expr]:
        v: List[Expr] = []
        if self.type_ref is not None:
            v.append(self.type_ref.to_node())
        v.extend(p.to_node() for p in self.params)
        v.extend(r.to_node() for r in self.results)
        return v


def parse_type_ref(cursor: Cursor) -> TypeRef:
    cursor.keyword("type")
    return TypeRef(cursor.index())


def parse_type_use(cursor: Cursor) -> TypeUse:
    type_ref = None
    if cursor.peek2_keyword("type"):
        type_ref = cursor.parens(parse_type_ref)
    params, results = _params_and_results(cursor)
    return TypeUse(type_ref, params, results)


# ---------------------------------------------------------------------------
# Memories and globals
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Limits:
    """``min max?`` page counts of a memory."""

    min: Integer
    max: Optional[Integer] = None

    def exprs(self) -> List[Expr]:
        v: List[Expr] = [Atom(self.min.src)]
        if self.max is not None:
            v.append(Atom(self.max.src))
        return v


def parse_limits(cursor: Cursor) -> Limits:
    minimum = cursor.integer()
    maximum = cursor.integer() if cursor.peek_integer() else None
    return Limits(minimum, maximum)


@dataclass(frozen=True)
class MutGlobalType(SExpr):
    value_type: ValueType

    def head(self) -> str:
        return "mut"

    def children(self) -> List[Expr]:
        return [Atom(self.value_type.value)]


GlobalType = Union[ValueType, MutGlobalType]


def global_type_expr(global_type: GlobalType) -> Expr:
    if isinstance(global_type, MutGlobalType):
        return global_type.to_node()
    return Atom(global_type.value)


def _parse_mut(cursor: Cursor) -> MutGlobalType:
    cursor.keyword("mut")
    return MutGlobalType(parse_value_type(cursor))


def parse_global_type(cursor: Cursor) -> GlobalType:
    if cursor.peek2_keyword("mut"):
        return cursor.parens(_parse_mut)
    return parse_value_type(cursor)


# ---------------------------------------------------------------------------
# Inline exports
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InlineExport(SExpr):
    """``(export "name")`` written inside a func, memory, or global."""

    name: str

    def head(self) -> str:
        return "export"

    def children(self) -> List[Expr]:
        return [Atom(self.name)]


def parse_inline_export(cursor: Cursor) -> Optional[InlineExport]:
    """Consume an ``(export "name")`` if one comes next."""
    if not cursor.peek2_keyword("export"):
        return None

    def _export(c: Cursor) -> InlineExport:
        c.keyword("export")
        return InlineExport(c.string())

    return cursor.parens(_export)
