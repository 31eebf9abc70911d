"""Unit tests for the programmatic tree builders.

WHY: Generated modules go through the same printer as parsed ones, so a
builder that produces a slightly different tree (a different Integer
source text, an index with a stray ``$``) prints differently from the
equivalent parsed input.

HOW: Compare builder output with parsed trees and rendered text.
"""

import pytest

from wat_formatter.core.build import (
    call,
    fold,
    global_get,
    global_set,
    i32_const,
    i64_const,
    instruction,
    local_get,
    local_set,
    local_tee,
    numeric,
    symbolic,
    unfold,
)
from wat_formatter.core.folding import parse_expressions
from wat_formatter.core.ir import NumericIndex, SymbolicIndex, ValueType
from wat_formatter.core.sexpr import render
from wat_formatter.errors import InvalidCharacterError


class TestIndices:
    def test_symbolic(self):
        assert symbolic("x") == SymbolicIndex("x")
        assert str(symbolic("x")) == "$x"

    def test_numeric(self):
        idx = numeric(3)
        assert isinstance(idx, NumericIndex)
        assert str(idx) == "3"

    def test_helpers_accept_any_index_form(self):
        assert str(local_get("a").operands[0]) == "$a"
        assert str(local_get(2).operands[0]) == "2"
        assert local_get(symbolic("a")) == local_get("a")


class TestInstructions:
    def test_matches_parsed_tree(self):
        built = fold(call("f"), fold(i32_const(1)))
        assert parse_expressions("(call $f (i32.const 1))") == [built]
        assert render(built.to_expr()) == "(call $f (i32.const 1))"

    def test_unfolded_sequence(self):
        seq = [unfold(global_get("counter")), unfold(i32_const(1)), unfold(global_set("counter"))]
        assert " ".join(render(e.to_expr()) for e in seq) == (
            "global.get $counter i32.const 1 global.set $counter"
        )

    def test_local_helpers(self):
        assert local_set("x").keyword == "local.set"
        assert local_tee(0).keyword == "local.tee"

    def test_const_keeps_literal_text(self):
        assert render(i64_const("0xFF_FF").to_node()) == "(i64.const 0xFF_FF)"

    def test_const_validates_literal(self):
        with pytest.raises(InvalidCharacterError):
            i32_const("1__0")

    def test_generic_instruction(self):
        instr = instruction("local", symbolic("t"), ValueType.I32)
        assert render(instr.to_node()) == "(local $t i32)"

    def test_unknown_keyword(self):
        with pytest.raises(KeyError):
            instruction("f32.add")

    def test_wrong_operand_count(self):
        with pytest.raises(ValueError, match="takes 1 operand"):
            instruction("call")
