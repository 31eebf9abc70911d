"""S-expression tree JSON formatter.

WHY: Editors, linters, and diff tools want the module's structure, not
its text. Exporting the exact tree the printer sees (heads, children,
atoms) gives them that without a second parser, and validating against
a published schema keeps the format stable for consumers.

HOW: The module node is converted recursively: a Node becomes
``{"head": ..., "children": [...]}`` and an Atom becomes
``{"atom": ...}``. The result is wrapped with the format version and the
source name, validated with jsonschema against tree_schema.json, and
serialized with two-space indentation.

RULES:
- Children keep their stored order
- Unfolded instructions appear as single atoms, exactly as printed
- Schema version is TREE_FORMAT_VERSION
- Output suffix: "-tree.json"
- Validate output against the schema before returning; raise on failure
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import jsonschema

from wat_formatter.core.sexpr import Atom, Expr
from wat_formatter.formatters.base import BaseFormatter, FormatterOutput
from wat_formatter.grammar.module import Document

TREE_FORMAT_VERSION = "1.0.0"

_SCHEMA_PATH = Path(__file__).resolve().parent / "tree_schema.json"


def _load_schema() -> Dict[str, Any]:
    """Load the tree JSON schema shipped next to this module."""
    with open(_SCHEMA_PATH, encoding="utf-8") as f:
        return json.load(f)


_CACHED_SCHEMA: Optional[Dict[str, Any]] = None


def _get_schema() -> Dict[str, Any]:
    global _CACHED_SCHEMA
    if _CACHED_SCHEMA is None:
        _CACHED_SCHEMA = _load_schema()
    return _CACHED_SCHEMA


def expr_to_dict(expr: Expr) -> Dict[str, Any]:
    """Convert an Atom or Node into its JSON-ready dict."""
    if isinstance(expr, Atom):
        return {"atom": expr.text}
    return {
        "head": expr.head,
        "children": [expr_to_dict(child) for child in expr.children],
    }


class JsonTreeFormatter(BaseFormatter):
    @property
    def name(self) -> str:
        return "S-expression tree JSON"

    def format(self, document: Document) -> List[FormatterOutput]:
        """Export the module tree as JSON.

        Raises:
            jsonschema.ValidationError: If the generated JSON does not
                conform to tree_schema.json.
        """
        output: Dict[str, Any] = {
            "version": TREE_FORMAT_VERSION,
            "source": document.source_name,
            "tree": expr_to_dict(document.module.to_node()),
        }

        jsonschema.validate(instance=output, schema=_get_schema())

        return [
            FormatterOutput(
                suffix="-tree.json",
                content=json.dumps(output, indent=2, ensure_ascii=False),
                media_type="application/json",
            )
        ]
