"""Core folding engine, instruction table, data model, and printer.

WHY: The core package is the stable heart of the formatter: the data
model every layer shares, the engine that turns folded and unfolded
instruction notation into one tree, and the printer that turns any tree
back into canonical text. Everything else (tokenizer, module grammar,
output formats, CLI) is built on top of it.

HOW: literals.py validates numeric and index literals, ir.py defines the
frozen values, instructions.py holds the keyword table and the generic
instruction parser, folding.py runs the stack machine, sexpr.py renders
trees, and build.py offers constructors for building trees in code.

RULES:
- IR dataclasses are the contract between parsing and rendering
- Nothing here knows about module sections or output file formats
- Keyword tables are built once at import time and never mutated
"""
