"""Integer literal and index validation for the text format.

WHY: The tokenizer only groups characters into runs; it does not know
whether ``0x1A_b2`` is a well-formed hexadecimal literal or whether
``123_`` ends in an illegal separator. The instruction parser needs
validated, normalized literals with the original text kept for
round-trip output.

HOW: lex_decimal() and lex_hexadecimal() walk the characters once,
peel off an optional sign, check the digit run and its ``_`` separators,
and return a small frozen value. lex_integer() picks the radix from the
``0x`` prefix. lex_index() tries a numeric literal first, then a
``$name`` identifier.

RULES:
- Empty input → EmptyExpressionError
- Sign with no digits → MalformedPatternError
- ``_`` as the first or last character of the digit run → InvalidCharacterError
- Two ``_`` in a row → InvalidCharacterError at the second one
- Any character outside the radix → InvalidCharacterError
- Error positions are indexes into the full input string, sign included
- Hex prefix is exactly ``0x`` (lowercase x)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

from wat_formatter.core.ir import Index, Integer, NumericIndex, Sign, SymbolicIndex
from wat_formatter.errors import (
    EmptyExpressionError,
    InvalidCharacterError,
    LiteralError,
    MalformedPatternError,
    NotAnIndexError,
)

_DECIMAL_DIGITS = frozenset("0123456789")
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_SEPARATOR = "_"

# Characters allowed in an identifier after the leading "$".
_ID_CHARS = frozenset(
    "0123456789"
    "abcdefghijklmnopqrstuvwxyz"
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "!#$%&'*+-./:<=>?@\\^_`|~"
)


@dataclass(frozen=True)
class Decimal:
    """A validated decimal literal, e.g. ``-1_000``."""

    sign: Sign
    digits: str

    def __str__(self) -> str:
        return "{}{}".format(self.sign.value, self.digits)


@dataclass(frozen=True)
class Hexadecimal:
    """A validated hexadecimal literal; ``digits`` excludes the ``0x`` prefix."""

    sign: Sign
    digits: str

    def __str__(self) -> str:
        return "{}0x{}".format(self.sign.value, self.digits)


def _split_sign(text: str) -> Tuple[Sign, int]:
    if not text:
        raise EmptyExpressionError()
    first = text[0]
    if first == "+":
        return Sign.POSITIVE, 1
    if first == "-":
        return Sign.NEGATIVE, 1
    if first == _SEPARATOR:
        raise InvalidCharacterError(0, text)
    return Sign.NONE, 0


def _check_digits(text: str, start: int, allowed: frozenset) -> str:
    """Validate text[start:] as a separator-delimited digit run and return it."""
    run = text[start:]
    if not run:
        raise MalformedPatternError(text)
    if run[0] == _SEPARATOR:
        raise InvalidCharacterError(start, text)
    if run[-1] == _SEPARATOR:
        raise InvalidCharacterError(len(text) - 1, text)
    for i, c in enumerate(run):
        if c == _SEPARATOR:
            if run[i - 1] == _SEPARATOR:
                raise InvalidCharacterError(start + i, text)
        elif c not in allowed:
            raise InvalidCharacterError(start + i, text)
    return run


def lex_decimal(text: str) -> Decimal:
    """Validate a decimal literal such as ``123``, ``+7`` or ``1_000_000``.

    Raises:
        EmptyExpressionError: text is empty.
        MalformedPatternError: no digits after the sign.
        InvalidCharacterError: misplaced separator or non-digit character.
    """
    sign, start = _split_sign(text)
    return Decimal(sign=sign, digits=_check_digits(text, start, _DECIMAL_DIGITS))


def lex_hexadecimal(text: str) -> Hexadecimal:
    """Validate a hexadecimal literal such as ``0xFF`` or ``-0x1A_b2``.

    Raises:
        EmptyExpressionError: text is empty.
        MalformedPatternError: too short to hold ``0x`` plus a digit.
        InvalidCharacterError: missing ``0x`` prefix, misplaced separator,
            or a non-hex character.
    """
    sign, start = _split_sign(text)
    if len(text) < start + 2:
        raise MalformedPatternError(text)
    if text[start] != "0":
        raise InvalidCharacterError(start, text)
    if text[start + 1] != "x":
        raise InvalidCharacterError(start + 1, text)
    return Hexadecimal(sign=sign, digits=_check_digits(text, start + 2, _HEX_DIGITS))


def is_hex_literal(text: str) -> bool:
    """True if text (after an optional sign) starts with the ``0x`` prefix."""
    body = text[1:] if text[:1] in ("+", "-") else text
    return body.startswith("0x")


def lex_integer(text: str) -> Union[Decimal, Hexadecimal]:
    """Validate an integer literal of either radix."""
    if is_hex_literal(text):
        return lex_hexadecimal(text)
    return lex_decimal(text)


def lex_identifier(text: str) -> str:
    """Return the name of a ``$name`` identifier, without the ``$``.

    Raises:
        NotAnIndexError: text does not start with ``$``, is only ``$``,
            or contains characters outside the identifier alphabet.
    """
    if len(text) < 2 or text[0] != "$":
        raise NotAnIndexError(text)
    name = text[1:]
    if any(c not in _ID_CHARS for c in name):
        raise NotAnIndexError(text)
    return name


def lex_index(text: str) -> Index:
    """Lex an index reference: a numeric literal or a ``$name`` identifier.

    Numeric form wins when it validates; otherwise the symbolic form is
    tried. Input that is neither raises NotAnIndexError.
    """
    try:
        return NumericIndex(parse_integer(text))
    except LiteralError:
        pass
    return SymbolicIndex(lex_identifier(text))


def parse_integer(text: str) -> Integer:
    """Validate text and build an Integer that remembers its source form."""
    literal = lex_integer(text)
    return Integer(
        sign=literal.sign,
        src=text,
        digits=literal.digits,
        hex=isinstance(literal, Hexadecimal),
    )
