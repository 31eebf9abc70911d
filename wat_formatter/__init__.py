"""WAT Formatter: parse and canonically format WebAssembly text modules.

WHY: Hand-written and tool-generated ``.wat`` files mix folded
``(i32.add (local.get 0) (i32.const 1))`` and flat stack-machine
notation, with whatever line breaks the author chose. This package parses
either notation into one tree, preserving exactly what was written, and
prints it back with deterministic 80-column line breaking.

HOW: Three-stage pipeline: read (tokenizer + cursor), parse (folding
engine + module grammar), render (width-aware printer + pluggable output
formatters). Each stage is independently testable.

RULES:
- Parsing never reorders or normalizes instructions
- Rendering is deterministic and idempotent
- The IR is the stable contract between parsing and rendering
"""

from wat_formatter.core.folding import parse_expressions
from wat_formatter.core.sexpr import render
from wat_formatter.grammar.module import Document, format_source, parse_document

__version__ = "0.1.0"

__all__ = [
    "Document",
    "format_source",
    "parse_document",
    "parse_expressions",
    "render",
]
