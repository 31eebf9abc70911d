"""Folding stack machine: flat and nested instruction notation → one tree.

WHY: The text format lets the same code be written two ways. Folded
form nests operands inside the instruction's own parens,
``(i32.add (local.get 0) (i32.const 1))``; unfolded form lists them
flat, stack-machine style, ``local.get 0 i32.const 1 i32.add``. Both may
be mixed freely in one function body. Formatting must preserve exactly
what the author wrote, so the parser has to recover the nesting implied
by the parens without reordering anything.

HOW: One left-to-right pass over the cursor with a stack of open Levels.
Each iteration looks only at the next structural token:
  ``(``       → parse an instruction, push it as an open folded Level
  ``)``       → pop the top Level, attach its children, hand it upward
  otherwise  → parse an instruction as Unfolded, append it to the top
               Level (or to the output list when nothing is open)
The loop ends when the region is used up and no Level is open.

RULES:
- One pass, no backtracking across a parsed instruction
- A ``)`` with an empty stack ends the region and is NOT consumed;
  the caller owns that paren (see UnexpectedCloseParenError in
  parse_expressions for a stray one at top level)
- End of input with an open Level → UnterminatedExpressionError
- Any error aborts the whole parse; no partial result is returned
- Each ExpressionParser instance serves one parse call
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from wat_formatter.core.instructions import parse_instruction
from wat_formatter.core.ir import Expression, Folded, Instruction, Unfolded
from wat_formatter.errors import UnexpectedCloseParenError, UnterminatedExpressionError
from wat_formatter.reader.cursor import Cursor

logger = logging.getLogger(__name__)


@dataclass
class Level:
    """An open folded instruction and the expressions collected inside it."""

    instr: Instruction
    children: List[Expression] = field(default_factory=list)

    def close(self) -> Folded:
        return Folded(self.instr.with_exprs(self.children))


class ExpressionParser:
    """Single-use folding stack machine.

    Usage::

        exprs = ExpressionParser().parse(cursor)
    """

    def __init__(self) -> None:
        self._exprs: List[Expression] = []
        self._stack: List[Level] = []
        self._used = False

    def _emit(self, expr: Expression) -> None:
        if self._stack:
            self._stack[-1].children.append(expr)
        else:
            self._exprs.append(expr)

    def _step(self, cursor: Cursor) -> None:
        if cursor.peek_lparen():
            cursor.lparen()
            self._stack.append(Level(parse_instruction(cursor)))
        elif cursor.peek_rparen() and self._stack:
            cursor.rparen()
            self._emit(self._stack.pop().close())
        else:
            self._emit(Unfolded(parse_instruction(cursor)))

    def _run(self, cursor: Cursor, single: bool) -> List[Expression]:
        if self._used:
            raise RuntimeError("ExpressionParser instances are single-use")
        self._used = True

        while not cursor.is_empty() or self._stack:
            if cursor.at_end():
                raise cursor.error(
                    "unterminated expression: {} open `(` at end of input".format(
                        len(self._stack)
                    ),
                    UnterminatedExpressionError,
                )
            self._step(cursor)
            if single and self._exprs and not self._stack:
                break

        logger.debug("Folded %d top-level expression(s)", len(self._exprs))
        return self._exprs

    def parse(self, cursor: Cursor) -> List[Expression]:
        """Parse every expression up to the end of the current region.

        Args:
            cursor: Positioned at the first instruction of the region
                (inside the enclosing paren, if any).

        Returns:
            Top-level expressions in source order.

        Raises:
            UnterminatedExpressionError: Input ended with an open paren.
            UnrecognizedInstructionError: A token is not an instruction.
        """
        return self._run(cursor, single=False)

    def parse_folded(self, cursor: Cursor) -> Expression:
        """Parse exactly one folded expression, e.g. ``(i32.const 8)``.

        Raises:
            ParseError: The next token is not ``(``.
        """
        if not cursor.peek_lparen():
            raise cursor.error(
                "expected a folded expression, found {}".format(cursor.describe_next())
            )
        return self._run(cursor, single=True)[0]


def parse_expressions(source: str) -> List[Expression]:
    """Tokenize a bare instruction sequence and fold it.

    The whole input must be consumed: a ``)`` that closes nothing is
    reported as UnexpectedCloseParenError.

    Example::

        parse_expressions("i32.const 1 call $g")
        # [Unfolded(i32.const 1), Unfolded(call $g)]
    """
    cursor = Cursor.from_source(source)
    exprs = ExpressionParser().parse(cursor)
    if not cursor.at_end():
        raise cursor.error("unexpected `)` with no open `(`", UnexpectedCloseParenError)
    return exprs

