"""Token cursor with peek/consume operations and positioned errors.

WHY: The folding engine and the section grammar need to look at the
next token (or the next two) to decide what to parse, consume it, and
report failures at the right line and column. A cursor over a token list
gives them exactly that and nothing else; they never touch raw text.

HOW: Cursor wraps the token list from reader.lexer and an index into it.
peek_* methods inspect without consuming; the matching consume methods
return the token's value or raise ParseError. is_empty() follows the
"region" convention: a parenthesized region ends at the next ``)`` or at
end of input, so a parser handed the cursor inside ``( ... )`` sees an
empty stream exactly when its region is used up. parens() runs a
sub-parser inside one ``( ... )`` pair.

RULES:
- is_empty() is True at end of input OR when the next token is ``)``
- at_end() is True only at end of input
- Expecting ``)`` at end of input raises UnterminatedExpressionError
- Integer and index tokens are validated by core.literals; literal
  errors are re-raised with the token's position attached
- The cursor is single-use and not shared between parses
"""

from __future__ import annotations

from typing import Callable, List, Optional, TypeVar

from wat_formatter.core.ir import Index, Integer, Span, SymbolicIndex
from wat_formatter.core.literals import lex_identifier, lex_index, parse_integer
from wat_formatter.errors import (
    LiteralError,
    ParseError,
    UnterminatedExpressionError,
)
from wat_formatter.reader.lexer import Token, TokenKind, tokenize

T = TypeVar("T")


class Cursor:
    """Sequential reader over a token list."""

    def __init__(self, tokens: List[Token], source_length: int = 0) -> None:
        self._tokens = tokens
        self._pos = 0
        self._source_length = source_length

    @classmethod
    def from_source(cls, source: str) -> "Cursor":
        """Tokenize source and return a cursor at its first token."""
        return cls(tokenize(source), len(source))

    # ------------------------------------------------------------------
    # Position and errors
    # ------------------------------------------------------------------

    def peek(self, ahead: int = 0) -> Optional[Token]:
        """The token ``ahead`` positions from the current one, or None."""
        i = self._pos + ahead
        if i < len(self._tokens):
            return self._tokens[i]
        return None

    def at_end(self) -> bool:
        return self._pos >= len(self._tokens)

    def is_empty(self) -> bool:
        """True when the current region has no tokens left."""
        tok = self.peek()
        return tok is None or tok.kind is TokenKind.RPAREN

    def span(self) -> Span:
        """Position of the current token (end of input past the last one)."""
        tok = self.peek()
        if tok is not None:
            return Span(tok.offset, tok.line, tok.column)
        if self._tokens:
            last = self._tokens[-1]
            return Span(last.offset + len(last.text), last.line, last.column + len(last.text))
        return Span(self._source_length, 1, self._source_length + 1)

    def error(self, message: str, cls: type = ParseError) -> ParseError:
        """Build (not raise) a ParseError positioned at the current token."""
        span = self.span()
        return cls(message, span.offset, span.line, span.column)

    def describe_next(self) -> str:
        tok = self.peek()
        if tok is None:
            return "end of input"
        return "`{}`".format(tok.text)

    def _take(self, kind: TokenKind, what: str) -> Token:
        tok = self.peek()
        if tok is None and kind is TokenKind.RPAREN:
            raise self.error("unterminated expression: expected `)`", UnterminatedExpressionError)
        if tok is None or tok.kind is not kind:
            raise self.error("expected {}, found {}".format(what, self.describe_next()))
        self._pos += 1
        return tok

    # ------------------------------------------------------------------
    # Parens
    # ------------------------------------------------------------------

    def peek_lparen(self) -> bool:
        tok = self.peek()
        return tok is not None and tok.kind is TokenKind.LPAREN

    def peek_rparen(self) -> bool:
        tok = self.peek()
        return tok is not None and tok.kind is TokenKind.RPAREN

    def lparen(self) -> None:
        self._take(TokenKind.LPAREN, "`(`")

    def rparen(self) -> None:
        self._take(TokenKind.RPAREN, "`)`")

    def parens(self, parse: Callable[["Cursor"], T]) -> T:
        """Run parse inside one ``( ... )`` pair and return its result."""
        self.lparen()
        result = parse(self)
        self.rparen()
        return result

    # ------------------------------------------------------------------
    # Keywords
    # ------------------------------------------------------------------

    def peek_keyword(self, keyword: Optional[str] = None) -> bool:
        """True if the next token is a keyword (optionally a specific one)."""
        tok = self.peek()
        if tok is None or tok.kind is not TokenKind.KEYWORD:
            return False
        return keyword is None or tok.text == keyword

    def peek2_keyword(self, keyword: str) -> bool:
        """True if the next tokens are ``(`` followed by keyword."""
        second = self.peek(1)
        return (
            self.peek_lparen()
            and second is not None
            and second.kind is TokenKind.KEYWORD
            and second.text == keyword
        )

    def keyword(self, keyword: Optional[str] = None) -> str:
        """Consume a keyword token (optionally a specific one) and return it."""
        if keyword is not None and not self.peek_keyword(keyword):
            raise self.error("expected `{}`, found {}".format(keyword, self.describe_next()))
        return self._take(TokenKind.KEYWORD, "a keyword").text

    # ------------------------------------------------------------------
    # Identifiers, integers, indices, strings
    # ------------------------------------------------------------------

    def peek_id(self) -> bool:
        tok = self.peek()
        return tok is not None and tok.kind is TokenKind.ID

    def id(self) -> SymbolicIndex:
        """Consume a ``$name`` token."""
        tok = self._take(TokenKind.ID, "an identifier")
        try:
            name = lex_identifier(tok.text)
        except LiteralError as err:
            raise err.at_position(tok.offset, tok.line, tok.column)
        return SymbolicIndex(name, Span(tok.offset, tok.line, tok.column))

    def peek_integer(self) -> bool:
        tok = self.peek()
        return tok is not None and tok.kind is TokenKind.INTEGER

    def integer(self) -> Integer:
        """Consume and validate an integer literal token."""
        tok = self._take(TokenKind.INTEGER, "an integer")
        try:
            return parse_integer(tok.text)
        except LiteralError as err:
            raise err.at_position(tok.offset, tok.line, tok.column)

    def peek_index(self) -> bool:
        return self.peek_integer() or self.peek_id()

    def index(self) -> Index:
        """Consume an index: an integer literal or a ``$name`` (see lex_index)."""
        tok = self.peek()
        if tok is None or tok.kind not in (TokenKind.INTEGER, TokenKind.ID):
            raise self.error("expected an index, found {}".format(self.describe_next()))
        self._pos += 1
        try:
            idx = lex_index(tok.text)
        except LiteralError as err:
            raise err.at_position(tok.offset, tok.line, tok.column)
        if isinstance(idx, SymbolicIndex):
            return SymbolicIndex(idx.name, Span(tok.offset, tok.line, tok.column))
        return idx

    def peek_string(self) -> bool:
        tok = self.peek()
        return tok is not None and tok.kind is TokenKind.STRING

    def string(self) -> str:
        """Consume a string literal; the result keeps its quotes."""
        return self._take(TokenKind.STRING, "a string").text
