"""Abstract base formatter and output container.

WHY: Every output format consumes the same parsed Document but produces
different file content. This base class enforces a consistent interface
so the CLI (and anything embedding the package) can work with any
formatter generically.

HOW: BaseFormatter is an ABC with two requirements: a ``name`` property
and a ``format()`` method. Rendering options shared by every format
(the indent size) are passed to the constructor; an omitted indent
size is read from the environment at construction time. FormatterOutput
is a plain dataclass that bundles a file suffix with its content and
MIME type.

RULES:
- Subclasses MUST implement ``name`` (human-readable) and ``format()``
- ``format()`` returns a list; every current formatter returns one item
- ``suffix`` starts with a hyphen, e.g. ``"-formatted.wat"``
- The caller is responsible for prepending the source filename stem
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from wat_formatter.config import load_indent_size
from wat_formatter.grammar.module import Document


@dataclass
class FormatterOutput:
    """One output file produced by a formatter.

    Attributes:
        suffix: File suffix appended to the source stem,
                e.g. ``"-formatted.wat"`` → ``"add-formatted.wat"``.
        content: The file content.
        media_type: MIME type for the content, e.g. ``"application/json"``.
    """

    suffix: str
    content: str
    media_type: str


class BaseFormatter(ABC):
    """Abstract base for all output formatters.

    To add a new output format:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter
    3. Implement format() and name
    4. Register in FORMATTERS dict in formatters/__init__.py
    """

    def __init__(self, indent_size: Optional[int] = None) -> None:
        """Set the shared rendering options.

        Args:
            indent_size: Spaces per nesting level. None reads
                WAT_INDENT_SIZE (default 2).

        Raises:
            ValueError: indent_size (or WAT_INDENT_SIZE) is not a
                positive integer.
        """
        if indent_size is None:
            indent_size = load_indent_size()
        if indent_size < 1:
            raise ValueError("indent_size must be >= 1, got {}".format(indent_size))
        self.indent_size = indent_size

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'Canonical WAT'."""

    @abstractmethod
    def format(self, document: Document) -> List[FormatterOutput]:
        """Convert a parsed Document into one or more output files.

        Args:
            document: The parsed module and the name of its source.

        Returns:
            List of FormatterOutput objects, each containing a file suffix,
            content string, and MIME type.
        """
