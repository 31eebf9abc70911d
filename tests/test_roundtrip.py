"""Formatting is idempotent and preserves meaning.

WHY: A formatter that changes its own output on a second run makes
``--check`` useless and produces endless diffs in CI.

HOW: Format a handful of modules that exercise both layout branches,
then format the result again and reparse it; the text must not change
and the tree must equal the tree of the original input.
"""

import pytest

from wat_formatter import format_source, parse_document

MODULES = [
    "(module)",
    '(module (import "env" "f" (func $f (param i32))))',
    """
    (module
      (type $bin (func (param i32 i32) (result i32)))
      (func $sum (type $bin) (param $a i32) (param $b i32) (result i32)
        (local $t i32)
        (block $done (result i32)
          (loop $again
            (br_if $done (i32.eqz (local.get $a)))
            (local.set $t (i32.add (local.get $t) (local.get $b)))
            (local.set $a (i32.sub (local.get $a) (i32.const 1)))
            br $again)
          local.get $t))
      (export "sum" (func $sum)))
    """,
    """
    (module
      (memory 1 2)
      (func $copy (param $p i32)
        (i32.store8 offset=4 (local.get $p) (i32.load8_u align=1 (local.get $p)))
        (call $copy (i32.const 0) (i32.const 1) (i32.const 2) (i32.const 3) (i32.const 4)))
      (data (offset (i32.const 0)) "abc"))
    """,
]


@pytest.mark.parametrize("source", MODULES)
def test_format_is_idempotent(source):
    once = format_source(source)
    assert format_source(once) == once


@pytest.mark.parametrize("source", MODULES)
def test_format_preserves_tree(source):
    assert parse_document(format_source(source)).module == parse_document(source).module


def test_lines_fit_unless_unbreakable():
    text = format_source(MODULES[2])
    assert all(len(line) <= 80 for line in text.splitlines())
