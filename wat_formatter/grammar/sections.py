"""Module fields (type, import, func, memory, global, export, data).

WHY: A module is a flat list of fields, each a parenthesized form whose
head keyword says what it is. The folding engine only understands
instruction sequences; something has to recognize each field, pull out
its identifier, signature, and limits, and hand the instruction parts
(function bodies, global initializers, data offsets) to the engine.

HOW: One frozen dataclass plus one parse function per field kind. The
parse functions run inside the field's parens (via Cursor.parens) and
start by consuming the head keyword. FIELD_PARSERS maps each head
keyword to its parse function; module.py uses it for lookahead dispatch.
Consecutive fields of the same kind are grouped into a Section, which
only affects the in-memory shape; rendering is a flat list of fields.

RULES:
- Function bodies are whatever the folding engine returns, verbatim
- A global has zero or one initializer expression; more is an error
- A data offset is ``(offset instr*)`` or a single folded instruction,
  and must hold exactly one expression
- Export descriptors are ``func``, ``memory``, or ``global`` plus an index
- FIELD_PARSERS is read-only and built at import time
"""

from __future__ import annotations

import logging
import types
from dataclasses import dataclass, field
from typing import Callable, List, Mapping, Optional, Tuple, Union

from wat_formatter.core.folding import ExpressionParser
from wat_formatter.core.ir import Expression, Index, SymbolicIndex
from wat_formatter.core.sexpr import Atom, Expr, Node, SExpr
from wat_formatter.grammar.types import (
    FuncType,
    GlobalType,
    InlineExport,
    Limits,
    TypeUse,
    global_type_expr,
    index_exprs,
    parse_func_type,
    parse_global_type,
    parse_inline_export,
    parse_limits,
    parse_optional_id,
    parse_type_use,
)
from wat_formatter.reader.cursor import Cursor

logger = logging.getLogger(__name__)


def _export_exprs(export: Optional[InlineExport]) -> List[Expr]:
    return [export.to_node()] if export is not None else []


# ---------------------------------------------------------------------------
# type
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TypeEntry(SExpr):
    """``(type $id? (func ...))``"""

    idx: Optional[SymbolicIndex]
    func_type: FuncType

    def head(self) -> str:
        return "type"

    def children(self) -> List[Expr]:
        return index_exprs(self.idx) + [self.func_type.to_node()]


def parse_type_entry(cursor: Cursor) -> TypeEntry:
    cursor.keyword("type")
    idx = parse_optional_id(cursor)
    return TypeEntry(idx, cursor.parens(parse_func_type))


# ---------------------------------------------------------------------------
# import
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ImportFunc(SExpr):
    idx: Optional[SymbolicIndex]
    type_use: TypeUse

    def head(self) -> str:
        return "func"

    def children(self) -> List[Expr]:
        return index_exprs(self.idx) + self.type_use.exprs()


@dataclass(frozen=True)
class ImportMemory(SExpr):
    idx: Optional[SymbolicIndex]
    limits: Limits

    def head(self) -> str:
        return "memory"

    def children(self) -> List[Expr]:
        return index_exprs(self.idx) + self.limits.exprs()


@dataclass(frozen=True)
class ImportGlobal(SExpr):
    idx: Optional[SymbolicIndex]
    global_type: GlobalType

    def head(self) -> str:
        return "global"

    def children(self) -> List[Expr]:
        return index_exprs(self.idx) + [global_type_expr(self.global_type)]


ImportDesc = Union[ImportFunc, ImportMemory, ImportGlobal]


def parse_import_desc(cursor: Cursor) -> ImportDesc:
    if cursor.peek_keyword("func"):
        cursor.keyword()
        return ImportFunc(parse_optional_id(cursor), parse_type_use(cursor))
    if cursor.peek_keyword("memory"):
        cursor.keyword()
        return ImportMemory(parse_optional_id(cursor), parse_limits(cursor))
    if cursor.peek_keyword("global"):
        cursor.keyword()
        return ImportGlobal(parse_optional_id(cursor), parse_global_type(cursor))
    raise cursor.error(
        "expected an import descriptor (func, memory, global), found {}".format(
            cursor.describe_next()
        )
    )


@dataclass(frozen=True)
class ImportEntry(SExpr):
    """``(import "module" "name" desc)``; names keep their quotes."""

    module: str
    name: str
    desc: ImportDesc

    def head(self) -> str:
        return "import"

    def children(self) -> List[Expr]:
        return [Atom(self.module), Atom(self.name), self.desc.to_node()]


def parse_import_entry(cursor: Cursor) -> ImportEntry:
    cursor.keyword("import")
    module = cursor.string()
    name = cursor.string()
    return ImportEntry(module, name, cursor.parens(parse_import_desc))


# ---------------------------------------------------------------------------
# func
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FuncEntry(SExpr):
    """A function definition; ``body`` holds locals and instructions."""

    idx: Optional[SymbolicIndex] = None
    export: Optional[InlineExport] = None
    type_use: TypeUse = field(default_factory=TypeUse)
    body: Tuple[Expression, ...] = ()

    def head(self) -> str:
        return "func"

    def children(self) -> List[Expr]:
        v = index_exprs(self.idx) + _export_exprs(self.export) + self.type_use.exprs()
        v.extend(e.to_expr() for e in self.body)
        return v


def parse_func_entry(cursor: Cursor) -> FuncEntry:
    cursor.keyword("func")
    idx = parse_optional_id(cursor)
    export = parse_inline_export(cursor)
    type_use = parse_type_use(cursor)
    body = ExpressionParser().parse(cursor)
    return FuncEntry(idx, export, type_use, tuple(body))


# ---------------------------------------------------------------------------
# memory
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MemoryEntry(SExpr):
    idx: Optional[SymbolicIndex]
    export: Optional[InlineExport]
    limits: Limits

    def head(self) -> str:
        return "memory"

    def children(self) -> List[Expr]:
        return index_exprs(self.idx) + _export_exprs(self.export) + self.limits.exprs()


def parse_memory_entry(cursor: Cursor) -> MemoryEntry:
    cursor.keyword("memory")
    idx = parse_optional_id(cursor)
    export = parse_inline_export(cursor)
    return MemoryEntry(idx, export, parse_limits(cursor))


# ---------------------------------------------------------------------------
# global
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GlobalEntry(SExpr):
    """``(global $id? (export "n")? globaltype init?)``"""

    idx: Optional[SymbolicIndex]
    export: Optional[InlineExport]
    global_type: GlobalType
    init: Optional[Expression] = None

    def head(self) -> str:
        return "global"

    def children(self) -> List[Expr]:
        v = index_exprs(self.idx) + _export_exprs(self.export)
        v.append(global_type_expr(self.global_type))
        if self.init is not None:
            v.append(self.init.to_expr())
        return v


def parse_global_entry(cursor: Cursor) -> GlobalEntry:
    cursor.keyword("global")
    idx = parse_optional_id(cursor)
    export = parse_inline_export(cursor)
    global_type = parse_global_type(cursor)
    exprs = ExpressionParser().parse(cursor)
    if len(exprs) > 1:
        raise cursor.error(
            "a global takes at most one init expression, found {}".format(len(exprs))
        )
    return GlobalEntry(idx, export, global_type, exprs[0] if exprs else None)


# ---------------------------------------------------------------------------
# export
# ---------------------------------------------------------------------------

EXPORT_KINDS = ("func", "memory", "global")


@dataclass(frozen=True)
class ExportDesc(SExpr):
    """``(func $f)``, ``(memory 0)``, or ``(global $g)``."""

    kind: str
    idx: Index

    def head(self) -> str:
        return self.kind

    def children(self) -> List[Expr]:
        return self.idx.to_exprs()


def parse_export_desc(cursor: Cursor) -> ExportDesc:
    if not any(cursor.peek_keyword(kind) for kind in EXPORT_KINDS):
        raise cursor.error(
            "expected an export descriptor ({}), found {}".format(
                ", ".join(EXPORT_KINDS), cursor.describe_next()
            )
        )
    kind = cursor.keyword()
    return ExportDesc(kind, cursor.index())


@dataclass(frozen=True)
class ExportEntry(SExpr):
    name: str
    desc: ExportDesc

    def head(self) -> str:
        return "export"

    def children(self) -> List[Expr]:
        return [Atom(self.name), self.desc.to_node()]


def parse_export_entry(cursor: Cursor) -> ExportEntry:
    cursor.keyword("export")
    name = cursor.string()
    return ExportEntry(name, cursor.parens(parse_export_desc))


# ---------------------------------------------------------------------------
# data
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DataOffset:
    """Offset expression of a data segment.

    explicit is True when the source wrapped it as ``(offset ...)``; the
    wrapper is reproduced on render.
    """

    expr: Expression
    explicit: bool = False

    def to_expr(self) -> Expr:
        if self.explicit:
            return Node("offset", (self.expr.to_expr(),))
        return self.expr.to_expr()


def _parse_offset_region(cursor: Cursor) -> List[Expression]:
    cursor.keyword("offset")
    return ExpressionParser().parse(cursor)


def parse_data_offset(cursor: Cursor) -> DataOffset:
    if cursor.peek2_keyword("offset"):
        exprs = cursor.parens(_parse_offset_region)
        if len(exprs) != 1:
            raise cursor.error(
                "a data offset takes exactly one expression, found {}".format(len(exprs))
            )
        return DataOffset(exprs[0], explicit=True)
    if cursor.peek_lparen():
        return DataOffset(ExpressionParser().parse_folded(cursor))
    raise cursor.error(
        "expected a data offset expression, found {}".format(cursor.describe_next())
    )


@dataclass(frozen=True)
class DataEntry(SExpr):
    """``(data $id? offset "bytes"*)``; strings keep their quotes."""

    idx: Optional[Index]
    offset: DataOffset
    strings: Tuple[str, ...] = ()

    def head(self) -> str:
        return "data"

    def children(self) -> List[Expr]:
        v = index_exprs(self.idx) + [self.offset.to_expr()]
        v.extend(Atom(s) for s in self.strings)
        return v


def parse_data_entry(cursor: Cursor) -> DataEntry:
    cursor.keyword("data")
    idx = cursor.index() if cursor.peek_index() else None
    offset = parse_data_offset(cursor)
    strings: List[str] = []
    while not cursor.is_empty():
        strings.append(cursor.string())
    return DataEntry(idx, offset, tuple(strings))


# ---------------------------------------------------------------------------
# Dispatch and grouping
# ---------------------------------------------------------------------------

Field = Union[TypeEntry, ImportEntry, FuncEntry, MemoryEntry, GlobalEntry, ExportEntry, DataEntry]

FIELD_PARSERS: Mapping[str, Callable[[Cursor], Field]] = types.MappingProxyType({
    "type": parse_type_entry,
    "import": parse_import_entry,
    "func": parse_func_entry,
    "memory": parse_memory_entry,
    "global": parse_global_entry,
    "export": parse_export_entry,
    "data": parse_data_entry,
})
"""Head keyword of each module field → its parse function."""


@dataclass(frozen=True)
class Section:
    """A run of consecutive module fields with the same head keyword."""

    kind: str
    entries: Tuple[Field, ...]

    def exprs(self) -> List[Expr]:
        return [entry.to_node() for entry in self.entries]


def group_sections(fields: List[Tuple[str, Field]]) -> Tuple[Section, ...]:
    """Group (kind, field) pairs into Sections, keeping source order."""
    sections: List[Section] = []
    run: List[Field] = []
    kind: Optional[str] = None
    for field_kind, entry in fields:
        if field_kind != kind and run:
            sections.append(Section(kind, tuple(run)))
            run = []
        kind = field_kind
        run.append(entry)
    if run:
        sections.append(Section(kind, tuple(run)))
    logger.debug("Grouped %d field(s) into %d section(s)", len(fields), len(sections))
    return tuple(sections)
