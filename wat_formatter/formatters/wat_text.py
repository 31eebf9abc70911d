"""Canonical WAT text formatter.

WHY: The primary output of the tool: the same module, with every node
either on one line (when it fits in 80 columns) or broken one child per
indented line.

HOW: Delegates to Document.to_text(), which runs the canonical printer
over the module node, and appends a final newline.

RULES:
- Output ends with exactly one newline
- Output suffix: "-formatted.wat"
- Media type: "text/plain"
"""

from __future__ import annotations

import logging
from typing import List

from wat_formatter.formatters.base import BaseFormatter, FormatterOutput
from wat_formatter.grammar.module import Document

logger = logging.getLogger(__name__)


class WatTextFormatter(BaseFormatter):
    @property
    def name(self) -> str:
        return "Canonical WAT"

    def format(self, document: Document) -> List[FormatterOutput]:
        text = document.to_text(self.indent_size)
        logger.debug("Rendered %s: %d line(s)", document.source_name, text.count("\n") + 1)
        return [
            FormatterOutput(
                suffix="-formatted.wat",
                content=text + "\n",
                media_type="text/plain",
            )
        ]
