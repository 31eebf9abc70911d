"""Configuration constants, supported file types, and .env loading.

WHY: Centralizes the values a user might want to tune (indent size,
default output formats) next to the ones they must not (the canonical
width), so both are easy to find and neither is buried in printer logic.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level values and never depend on the environment.
load_indent_size() and load_default_formats() read the environment when
called (by the CLI and the formatters) and give a clear error for bad
values.

RULES:
- CANONICAL_WIDTH is fixed at 80; it defines canonical output and is
  not overridable from the environment
- DEFAULT_INDENT_SIZE (2) is the printer's fixed default
- WAT_INDENT_SIZE overrides it for the CLI and formatters (must be >= 1)
- WAT_DEFAULT_FORMATS is a comma-separated list of formatter keys
- SUPPORTED_EXTENSIONS lists accepted source file extensions
"""

from __future__ import annotations

import os
from typing import List

from dotenv import load_dotenv

# Load .env from the working directory (where the CLI is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

CANONICAL_WIDTH = 80
"""A node renders on one line iff its single-line form is at most this long."""

DEFAULT_INDENT_SIZE = 2
"""Spaces per nesting level when no indent size is given."""


def load_indent_size() -> int:
    """Read the indent size from the environment.

    WHY: Projects differ on two- vs four-space indentation; the printer
    should follow the project without a code change.

    HOW: Reads WAT_INDENT_SIZE (populated by python-dotenv) and parses it
    as a base-10 integer.

    RULES:
    - Missing or empty → DEFAULT_INDENT_SIZE
    - Raises ValueError if the value is not a positive integer
    """
    raw = os.getenv("WAT_INDENT_SIZE", "").strip()
    if not raw:
        return DEFAULT_INDENT_SIZE
    try:
        size = int(raw)
    except ValueError:
        size = 0
    if size < 1:
        raise ValueError(
            "WAT_INDENT_SIZE must be a positive integer, got {!r}. "
            "Fix the value in the .env file or the environment.".format(raw)
        )
    return size


# ---------------------------------------------------------------------------
# Input files
# ---------------------------------------------------------------------------

SUPPORTED_EXTENSIONS: set[str] = {".wat", ".wast"}
"""Source file extensions accepted by the CLI (lowercase, with dot)."""

# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


def load_default_formats() -> List[str]:
    """Formatter keys used when the CLI gets no --formats flag."""
    raw = os.getenv("WAT_DEFAULT_FORMATS", "wat")
    return [key.strip() for key in raw.split(",") if key.strip()]
