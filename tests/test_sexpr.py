"""Unit tests for the s-expression tree and the canonical printer.

WHY: The printer's width rule defines canonical output. An off-by-one at
the 80-column boundary, or a child rendered with the wrong indent, would
change every formatted file.

HOW: Build Atom/Node trees directly and compare rendered text, with
special attention to the exact width boundary and to sink failures.

RULES:
- A node is single-line iff its candidate (indent prefix included) is
  at most 80 characters
"""

import io

import pytest

from wat_formatter.core.sexpr import Atom, Node, SExpr, render, write_sexpr


class TestAtoms:
    def test_atom_with_indent(self):
        assert render(Atom("$f"), 2) == "    $f"


class TestNodes:
    def test_childless_node(self):
        assert render(Node("module")) == "(module)"
        assert render(Node("module"), 1) == "  (module)"

    def test_children_become_tuple(self):
        node = Node("param", [Atom("i32")])
        assert node.children == (Atom("i32"),)
        assert node == Node("param", (Atom("i32"),))

    def test_nested_single_line(self):
        node = Node("func", [Atom("$f"), Node("param", [Atom("i32")])])
        assert render(node) == "(func $f (param i32))"


class TestWidthRule:
    def test_exactly_80_stays_single_line(self):
        node = Node("h", [Atom("a" * 76)])
        out = render(node)
        assert len(out) == 80
        assert "\n" not in out

    def test_81_breaks(self):
        node = Node("h", [Atom("a" * 77)])
        assert render(node) == "(h\n  {}\n)".format("a" * 77)

    def test_indent_prefix_counts_toward_width(self):
        node = Node("h", [Atom("a" * 74)])
        assert "\n" not in render(node, 1)
        assert "\n" in render(node, 2)

    def test_children_decide_independently(self):
        wide = Node("call", [Atom("$f")] + [Atom("x" * 30) for _ in range(3)])
        outer = Node("block", [Node("nop"), wide])
        expected = "\n".join([
            "(block",
            "  (nop)",
            "  (call",
            "    $f",
            "    " + "x" * 30,
            "    " + "x" * 30,
            "    " + "x" * 30,
            "  )",
            ")",
        ])
        assert render(outer) == expected

    def test_custom_indent_size(self):
        node = Node("h", [Atom("a" * 77)])
        assert render(node, 0, 4) == "(h\n    {}\n)".format("a" * 77)

    def test_default_indent_ignores_environment(self, monkeypatch):
        monkeypatch.setenv("WAT_INDENT_SIZE", "4")
        node = Node("h", [Atom("a" * 77)])
        assert render(node) == "(h\n  {}\n)".format("a" * 77)


class TestStreaming:
    def test_write_to_sink(self):
        buf = io.StringIO()
        write_sexpr(Node("module"), buf)
        assert buf.getvalue() == "(module)"

    def test_sink_failure_propagates(self):
        class BrokenSink:
            def write(self, text):
                raise OSError("disk full")

        with pytest.raises(OSError, match="disk full"):
            write_sexpr(Node("module"), BrokenSink())


class TestSExprCapability:
    def test_to_node(self):
        class Pair(SExpr):
            def head(self):
                return "pair"

            def children(self):
                return [Atom("1"), Atom("2")]

        assert Pair().to_node() == Node("pair", (Atom("1"), Atom("2")))
        assert render(Pair().to_node()) == "(pair 1 2)"
