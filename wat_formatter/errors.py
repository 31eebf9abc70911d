"""Exception hierarchy for literal lexing, parsing, and tokenizing.

WHY: Callers (the CLI, tests, embedding tools) need to tell a malformed
number apart from an unknown instruction or an unclosed paren, and they
need a position to point the user at. A small class hierarchy gives both
without string matching.

HOW: Everything derives from WatError. Literal helpers raise LiteralError
subclasses that know the offending text and, for InvalidCharacterError,
the character index. Grammar-level failures raise ParseError, which
carries the byte offset plus 1-based line/column of the token where the
problem was found. The cursor attaches a position to literal errors via
at_position() so the error kind is preserved.

RULES:
- Parse errors are fatal to the current parse call; nothing is recovered
- I/O failures are never wrapped; OSError propagates unchanged
- Messages are lowercase and start with what went wrong
"""

from __future__ import annotations

from typing import Optional, Sequence


class WatError(Exception):
    """Base class for every error raised by wat_formatter."""

    offset: Optional[int] = None
    line: Optional[int] = None
    column: Optional[int] = None

    def at_position(self, offset: int, line: int, column: int) -> "WatError":
        """Attach a source position and return self (for ``raise err.at_position(...)``)."""
        self.offset = offset
        self.line = line
        self.column = column
        return self

    def __str__(self) -> str:
        message = super().__str__()
        if self.line is not None:
            return "{}:{}: {}".format(self.line, self.column, message)
        return message


# ---------------------------------------------------------------------------
# Literal lexing
# ---------------------------------------------------------------------------


class LiteralError(WatError):
    """A numeric literal or index token could not be lexed."""


class EmptyExpressionError(LiteralError):
    """The literal source string was empty."""

    def __init__(self) -> None:
        super().__init__("expression cannot be empty")


class MalformedPatternError(LiteralError):
    """The literal has no extractable digits (e.g. ``+`` alone)."""

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__("malformed pattern: {}".format(text))


class InvalidCharacterError(LiteralError):
    """A character at ``position`` is not allowed there.

    Raised for a ``_`` separator in first or last position of the digit run,
    and for any character outside the literal's radix.
    """

    def __init__(self, position: int, text: str) -> None:
        self.position = position
        self.text = text
        super().__init__(
            "invalid character at position {} in string: {}".format(position, text)
        )


class NotAnIndexError(LiteralError):
    """The token is neither a numeric literal nor a ``$name`` identifier."""

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__("not an index: {}".format(text))


# ---------------------------------------------------------------------------
# Grammar
# ---------------------------------------------------------------------------


class ParseError(WatError):
    """A token did not fit the grammar at its position."""

    def __init__(
        self,
        message: str,
        offset: Optional[int] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.offset = offset
        self.line = line
        self.column = column


class LexError(ParseError):
    """The tokenizer hit text that cannot start any token."""


class UnrecognizedInstructionError(ParseError):
    """Lookahead matched none of the registered instruction keywords."""

    def __init__(
        self,
        found: str,
        expected: Sequence[str],
        offset: Optional[int] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        self.found = found
        self.expected = tuple(expected)
        message = "unexpected token `{}`, expected one of: {}".format(
            found, ", ".join(self.expected)
        )
        super().__init__(message, offset, line, column)


class UnterminatedExpressionError(ParseError):
    """Input ended while at least one paren was still open."""


class UnexpectedCloseParenError(ParseError):
    """A ``)`` appeared with no open paren to close."""
