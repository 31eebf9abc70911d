"""S-expression tree model and the canonical width-aware printer.

WHY: Every entity in a module (instructions, section entries, type
descriptors) prints the same way: a parenthesized head keyword followed
by its children. Centralizing that in one tree model and one printer
keeps output deterministic and lets each entity describe only its head
and children.

HOW: Two node kinds form a closed union:
  Atom — already-formatted text (a literal, keyword, or $name)
  Node — a head keyword plus an ordered tuple of children
Domain entities subclass SExpr and implement head() and children();
to_node() turns them into a Node. render() decides per node whether the
single-line candidate fits the canonical width, otherwise breaks the
node into one child per indented line.

RULES:
- Atom renders as its text, prefixed by indent_level * indent_size spaces
- Node without children renders as "(head)"
- Single-line candidate: "(head " + children rendered at indent 0 joined
  by spaces + ")", with the node's own indent prefix; kept if len <= width
- Multi-line: "(head" line, each child at indent_level + 1 plus newline,
  then ")" at the node's own indent
- Children are rendered in stored order; rendering has no hidden state
- Sink errors (OSError) propagate unchanged
"""

from __future__ import annotations

import io
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, TextIO, Tuple, Union

from wat_formatter.config import CANONICAL_WIDTH, DEFAULT_INDENT_SIZE


@dataclass(frozen=True)
class Atom:
    """An opaque, already-formatted text token."""

    text: str


@dataclass(frozen=True)
class Node:
    """A headed tree element owning an ordered tuple of children."""

    head: str
    children: Tuple["Expr", ...] = ()

    def __post_init__(self) -> None:
        # Accept any iterable (lists from callers) but store a tuple.
        object.__setattr__(self, "children", tuple(self.children))


Expr = Union[Atom, Node]


class SExpr(ABC):
    """Capability shared by everything that renders as a tree node.

    Subclasses provide the head keyword and the ordered children; the
    printer only ever sees the Node produced by to_node().
    """

    @abstractmethod
    def head(self) -> str:
        """Head keyword, e.g. ``"func"`` or ``"i32.const"``."""

    @abstractmethod
    def children(self) -> List[Expr]:
        """Ordered children as Atoms and Nodes."""

    def to_node(self) -> Node:
        return Node(self.head(), tuple(self.children()))


def render(
    expr: Expr,
    indent_level: int = 0,
    indent_size: int = DEFAULT_INDENT_SIZE,
    width: int = CANONICAL_WIDTH,
) -> str:
    """Render an Atom or Node to canonical text.

    Args:
        expr: The tree to render.
        indent_level: Nesting depth of expr; the prefix is
            indent_level * indent_size spaces.
        indent_size: Spaces per nesting level.
        width: Maximum length of a single-line candidate.

    Returns:
        The rendered text, without a trailing newline.
    """
    buf = io.StringIO()
    write_sexpr(expr, buf, indent_level, indent_size, width)
    return buf.getvalue()


def write_sexpr(
    expr: Expr,
    sink: TextIO,
    indent_level: int = 0,
    indent_size: int = DEFAULT_INDENT_SIZE,
    width: int = CANONICAL_WIDTH,
) -> None:
    """Stream the canonical rendering of expr into sink.

    The sink only needs a ``write(str)`` method. Write failures are not
    caught.
    """
    prefix = " " * (indent_level * indent_size)

    if isinstance(expr, Atom):
        sink.write(prefix + expr.text)
        return

    open_ = "{}({}".format(prefix, expr.head)
    if not expr.children:
        sink.write(open_ + ")")
        return

    flat = " ".join(render(child, 0, indent_size, width) for child in expr.children)
    candidate = "{} {})".format(open_, flat)
    if len(candidate) <= width:
        sink.write(candidate)
        return

    sink.write(open_ + "\n")
    for child in expr.children:
        write_sexpr(child, sink, indent_level + 1, indent_size, width)
        sink.write("\n")
    sink.write(prefix + ")")
