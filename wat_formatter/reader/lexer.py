"""Tokenizer for the WebAssembly text format.

WHY: The grammar and the folding engine work on tokens (parens,
keywords, $identifiers, literals), never on raw characters. A separate
tokenizer keeps whitespace, comments, and string escapes out of the
parsing logic and gives every token a position for error messages.

HOW: One compiled regex alternation is matched repeatedly from the
current offset. Whitespace and line comments are skipped by the regex;
block comments nest, so they are skipped by a small depth counter.
Runs of identifier characters are classified after matching:
  $...           → ID
  [+-]?digit...  → INTEGER (validated later by core.literals)
  a-z...         → KEYWORD
  anything else  → RESERVED

RULES:
- Strings keep their quotes and escapes verbatim (owned, round-trippable)
- Block comments ``(; ... ;)`` nest
- Unterminated strings or block comments raise LexError
- A character that cannot start any token raises LexError
- Line and column are 1-based
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import List

from wat_formatter.errors import LexError


class TokenKind(enum.Enum):
    LPAREN = "("
    RPAREN = ")"
    KEYWORD = "keyword"
    ID = "identifier"
    INTEGER = "integer"
    STRING = "string"
    RESERVED = "reserved"


@dataclass(frozen=True)
class Token:
    """One token with its source position."""

    kind: TokenKind
    text: str
    offset: int
    line: int
    column: int


# Identifier characters per the text-format grammar.
_IDCHARS = r"[0-9A-Za-z!#$%&'*+\-./:<=>?@\\^_`|~]"

_TOKEN_RE = re.compile(
    r"""
      (?P<ws>[ \t\n\r]+)
    | (?P<line_comment>;;[^\n]*)
    | (?P<block_comment>\(;)
    | (?P<lparen>\()
    | (?P<rparen>\))
    | (?P<string>"(?:[^"\\\n]|\\.)*")
    | (?P<unterminated_string>")
    | (?P<idchars>{idchars}+)
    """.format(idchars=_IDCHARS),
    re.VERBOSE,
)

_INTEGER_RE = re.compile(r"^[+-]?[0-9]")


def _classify(text: str) -> TokenKind:
    if text.startswith("$"):
        return TokenKind.ID
    if _INTEGER_RE.match(text):
        return TokenKind.INTEGER
    if "a" <= text[0] <= "z":
        return TokenKind.KEYWORD
    return TokenKind.RESERVED


def _skip_block_comment(source: str, start: int) -> int:
    """Return the offset just past the block comment opened at start."""
    depth = 0
    i = start
    while i < len(source):
        pair = source[i:i + 2]
        if pair == "(;":
            depth += 1
            i += 2
        elif pair == ";)":
            depth -= 1
            i += 2
            if depth == 0:
                return i
        else:
            i += 1
    return -1


def tokenize(source: str) -> List[Token]:
    """Split source text into tokens.

    Args:
        source: Complete text-format source.

    Returns:
        Tokens in source order, without whitespace or comments.

    Raises:
        LexError: On an unterminated string or block comment, or a
            character that cannot start a token.
    """
    tokens: List[Token] = []
    pos = 0
    line = 1
    line_start = 0

    def _advance(to: int) -> None:
        nonlocal pos, line, line_start
        newlines = source.count("\n", pos, to)
        if newlines:
            line += newlines
            line_start = source.rfind("\n", pos, to) + 1
        pos = to

    while pos < len(source):
        column = pos - line_start + 1
        m = _TOKEN_RE.match(source, pos)
        if m is None:
            raise LexError(
                "unexpected character {!r}".format(source[pos]), pos, line, column
            )
        kind = m.lastgroup
        if kind == "block_comment":
            end = _skip_block_comment(source, pos)
            if end < 0:
                raise LexError("unterminated block comment", pos, line, column)
            _advance(end)
            continue
        if kind == "unterminated_string":
            raise LexError("unterminated string", pos, line, column)
        if kind == "lparen":
            tokens.append(Token(TokenKind.LPAREN, "(", pos, line, column))
        elif kind == "rparen":
            tokens.append(Token(TokenKind.RPAREN, ")", pos, line, column))
        elif kind == "string":
            tokens.append(Token(TokenKind.STRING, m.group(), pos, line, column))
        elif kind == "idchars":
            text = m.group()
            tokens.append(Token(_classify(text), text, pos, line, column))
        _advance(m.end())

    return tokens
