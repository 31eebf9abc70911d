"""Tokenizer and token cursor.

WHY: The folding engine and the module grammar reason about tokens, not
characters. Keeping tokenizing and lookahead in one package means the
parsers never touch raw text.

HOW: lexer.tokenize() turns source into positioned Tokens; Cursor walks
them with peek/consume methods and builds positioned errors.

RULES:
- Tokens are produced eagerly, once per parse
- Cursors are single-use and never shared between parses
"""

from wat_formatter.reader.cursor import Cursor
from wat_formatter.reader.lexer import Token, TokenKind, tokenize

__all__ = ["Cursor", "Token", "TokenKind", "tokenize"]
