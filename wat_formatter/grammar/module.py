"""Module and document: the top of the parse tree.

WHY: A source file holds exactly one ``(module ...)`` form. Callers want
one call that turns text into a tree and one that turns the tree back
into canonical text; everything between is the section layer's job.

HOW: parse_document() tokenizes, enters the module's parens, and
dispatches each field by peeking at ``(`` plus its head keyword against
FIELD_PARSERS. Fields are grouped into Sections. Document.to_text()
renders the module node through the canonical printer.

RULES:
- The document is exactly one module form; trailing tokens are an error
- A stray ``)`` after the module raises UnexpectedCloseParenError
- An unknown field keyword raises ParseError("unexpected section ...")
- An empty module renders as ``(module)``
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Tuple

from wat_formatter.config import CANONICAL_WIDTH, DEFAULT_INDENT_SIZE
from wat_formatter.core.sexpr import Expr, SExpr, render
from wat_formatter.errors import ParseError, UnexpectedCloseParenError
from wat_formatter.grammar.sections import FIELD_PARSERS, Field, Section, group_sections
from wat_formatter.reader.cursor import Cursor
from wat_formatter.reader.lexer import TokenKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Module(SExpr):
    sections: Tuple[Section, ...] = ()

    def head(self) -> str:
        return "module"

    def children(self) -> List[Expr]:
        v: List[Expr] = []
        for section in self.sections:
            v.extend(section.exprs())
        return v

    def fields(self) -> List[Field]:
        """Every field in source order, across sections."""
        return [entry for section in self.sections for entry in section.entries]


@dataclass(frozen=True)
class Document:
    """A parsed source file.

    Attributes:
        module: The module tree.
        source_name: Where the text came from (a path, or ``"<string>"``).
    """

    module: Module
    source_name: str = "<string>"

    def to_text(self, indent_size: int = DEFAULT_INDENT_SIZE) -> str:
        """Canonical text, without a trailing newline."""
        return render(self.module.to_node(), 0, indent_size, CANONICAL_WIDTH)

    def __str__(self) -> str:
        return self.to_text()


def _field_keyword(cursor: Cursor) -> str:
    second = cursor.peek(1)
    if second is not None and second.kind is TokenKind.KEYWORD:
        return second.text
    return ""


def parse_module(cursor: Cursor) -> Module:
    """Parse a module's fields; the cursor is just inside ``(module``."""
    cursor.keyword("module")
    fields = []
    while not cursor.is_empty():
        keyword = _field_keyword(cursor) if cursor.peek_lparen() else ""
        parse = FIELD_PARSERS.get(keyword)
        if parse is None:
            raise cursor.error(
                "unexpected section {}, expected one of: {}".format(
                    cursor.describe_next() if not keyword else "`{}`".format(keyword),
                    ", ".join(FIELD_PARSERS),
                )
            )
        fields.append((keyword, cursor.parens(parse)))
    return Module(group_sections(fields))


def parse_document(source: str, source_name: str = "<string>") -> Document:
    """Parse a complete source file.

    Args:
        source: Text containing one ``(module ...)`` form.
        source_name: Recorded on the Document for output naming.

    Returns:
        The parsed Document.

    Raises:
        LexError: The text could not be tokenized.
        ParseError: The text does not match the grammar (including the
            UnrecognizedInstructionError, UnterminatedExpressionError and
            UnexpectedCloseParenError subclasses).
        LiteralError: A numeric literal or index is malformed.
    """
    cursor = Cursor.from_source(source)
    if not cursor.peek2_keyword("module"):
        raise cursor.error("expected `(module`, found {}".format(cursor.describe_next()))
    module = cursor.parens(parse_module)
    if cursor.peek_rparen():
        raise cursor.error("unexpected `)` with no open `(`", UnexpectedCloseParenError)
    if not cursor.at_end():
        raise cursor.error(
            "unexpected {} after the module".format(cursor.describe_next()), ParseError
        )
    logger.debug("Parsed %s: %d field(s)", source_name, len(module.fields()))
    return Document(module, source_name)


def format_source(source: str, indent_size: int = DEFAULT_INDENT_SIZE) -> str:
    """Parse source and return its canonical text (no trailing newline)."""
    return parse_document(source).to_text(indent_size)
