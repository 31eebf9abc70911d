"""Unit tests for the tokenizer.

WHY: Every later stage trusts the token kinds and positions. A string
split at an escaped quote, or a nested block comment closed too early,
would surface as a baffling grammar error far from the real problem.

HOW: Tokenize small snippets and compare kinds, texts, and positions.

RULES:
- Line and column are 1-based
- Comments and whitespace never produce tokens
"""

import pytest

from wat_formatter.errors import LexError
from wat_formatter.reader.lexer import TokenKind, tokenize


def _kinds(source):
    return [t.kind for t in tokenize(source)]


def _texts(source):
    return [t.text for t in tokenize(source)]


class TestTokenKinds:
    def test_instruction_sequence(self):
        assert _kinds("(call $g (i32.const -1))") == [
            TokenKind.LPAREN,
            TokenKind.KEYWORD,
            TokenKind.ID,
            TokenKind.LPAREN,
            TokenKind.KEYWORD,
            TokenKind.INTEGER,
            TokenKind.RPAREN,
            TokenKind.RPAREN,
        ]

    def test_memarg_is_keyword(self):
        assert _kinds("offset=8 align=4") == [TokenKind.KEYWORD, TokenKind.KEYWORD]

    def test_hex_integer(self):
        assert _kinds("+0x1F") == [TokenKind.INTEGER]

    def test_reserved(self):
        assert _kinds("= Foo -") == [TokenKind.RESERVED] * 3

    def test_string_keeps_quotes_and_escapes(self):
        assert _texts(r'"a\"b" "\00"') == [r'"a\"b"', r'"\00"']


class TestComments:
    def test_line_comment(self):
        assert _texts("nop ;; drop\nreturn") == ["nop", "return"]

    def test_nested_block_comment(self):
        assert _texts("nop (; outer (; inner ;) still ;) drop") == ["nop", "drop"]

    def test_unterminated_block_comment(self):
        with pytest.raises(LexError, match="unterminated block comment"):
            tokenize("nop (; never closed")


class TestPositions:
    def test_line_and_column(self):
        tokens = tokenize("(module\n  (func))")
        assert [(t.text, t.line, t.column) for t in tokens] == [
            ("(", 1, 1),
            ("module", 1, 2),
            ("(", 2, 3),
            ("func", 2, 4),
            (")", 2, 8),
            (")", 2, 9),
        ]

    def test_offsets(self):
        tokens = tokenize("  nop drop")
        assert [t.offset for t in tokens] == [2, 6]


class TestErrors:
    def test_unterminated_string(self):
        with pytest.raises(LexError) as exc_info:
            tokenize('(data "abc')
        assert exc_info.value.column == 7

    def test_unexpected_character(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("nop\n  , drop")
        assert (exc_info.value.line, exc_info.value.column) == (2, 3)
        assert str(exc_info.value).startswith("2:3: ")

    def test_empty_source(self):
        assert tokenize("") == []
