"""Output formatter registry: pluggable format hub.

WHY: The CLI needs a single lookup to find the right formatter by name.
A central dict makes it trivial to add new formats: create the formatter
class, import it here, add one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["wat"](indent_size=4)``.

RULES:
- Keys are short lowercase identifiers (used in --formats and
  WAT_DEFAULT_FORMATS)
- Values are BaseFormatter subclasses (not instances)
- Every formatter listed here must be importable without side effects
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Type

from wat_formatter.formatters.json_tree import JsonTreeFormatter
from wat_formatter.formatters.wat_text import WatTextFormatter

if TYPE_CHECKING:
    from wat_formatter.formatters.base import BaseFormatter

FORMATTERS: Dict[str, Type[BaseFormatter]] = {
    "wat": WatTextFormatter,
    "json": JsonTreeFormatter,
}
