"""Module-level grammar on top of the folding engine.

WHY: Instruction sequences never appear on their own in a source file;
they live inside function bodies, global initializers, and data offsets
of a ``(module ...)`` form. This package parses that outer structure and
hands the instruction parts to the engine.

HOW: types.py holds shared pieces (signatures, limits, global types),
sections.py one dataclass and parser per module field, and module.py
the Module, Document, and parse_document() entry point.

RULES:
- Every grammar entity renders through the shared SExpr capability
- Semantic validation (types, index resolution) is out of scope
"""

from wat_formatter.grammar.module import Document, Module, format_source, parse_document

__all__ = ["Document", "Module", "format_source", "parse_document"]
