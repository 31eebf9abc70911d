"""Command-line interface for the WAT formatter.

WHY: Users need a simple way to format ``.wat`` files from the terminal,
from editors, and in CI. The CLI wires together the full pipeline
(input validation, parsing, pluggable formatter output, and file saving)
behind a single command.

HOW: Uses argparse to accept an input file (or ``-`` for stdin), output
format selection, an output directory, the indent size, and a --check
mode. Parses the source into a Document, runs the selected formatters,
and either prints their content to stdout or saves it next to the
source stem in --output-dir. Status messages go to stderr.

RULES:
- Positional argument: input .wat/.wast path, or ``-`` for stdin
- Validates file extension against SUPPORTED_EXTENSIONS (stdin exempt)
- --formats: comma-separated formatter keys (default: WAT_DEFAULT_FORMATS)
- Without --output-dir, formatter content goes to stdout
- Output naming: {stem}{suffix}, numeric suffix for conflicts (-formatted-2.wat)
- --check: exit 1 when the input is not already canonical; writes nothing
- Status output goes to stderr (not stdout)
- Exit codes: 0 = success, 1 = error or check failure
"""

from __future__ import annotations

import argparse
import itertools
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from wat_formatter.config import (
    SUPPORTED_EXTENSIONS,
    load_default_formats,
    load_indent_size,
)
from wat_formatter.errors import WatError
from wat_formatter.formatters import FORMATTERS
from wat_formatter.formatters.base import FormatterOutput
from wat_formatter.grammar.module import parse_document

logger = logging.getLogger(__name__)

STDIN_NAME = "-"


def _status(msg: str) -> None:
    """Print a status message to stderr.

    WHY: Status output must not pollute stdout so the CLI can be piped.
    """
    print(msg, file=sys.stderr, flush=True)


def _fail(msg: str) -> None:
    print("Error: {}".format(msg), file=sys.stderr)
    sys.exit(1)


def _resolve_output_path(stem: str, suffix: str, output_dir: Path) -> Path:
    """Pick a file name in output_dir that no earlier run has written.

    The plain ``{stem}{suffix}`` name is used when free. Otherwise a
    counter from 2 upward goes in front of the suffix's extension, so a
    second run of ``add.wat`` saves ``add-formatted-2.wat``. A suffix
    without an extension gets the counter appended.
    """
    first = output_dir / (stem + suffix)
    if not first.exists():
        return first
    name, dot, ext = suffix.rpartition(".")
    if not name:
        name, dot, ext = suffix, "", ""
    for n in itertools.count(2):
        candidate = output_dir / "{}{}-{}{}{}".format(stem, name, n, dot, ext)
        if not candidate.exists():
            return candidate


def _save_output(
    output: FormatterOutput,
    stem: str,
    output_dir: Path,
) -> Path:
    """Save a single formatter output to disk as UTF-8 and return its path."""
    path = _resolve_output_path(stem, output.suffix, output_dir)
    path.write_text(output.content, encoding="utf-8")
    return path


def _read_source(input_file: str) -> Tuple[str, str, str]:
    """Read the input and return (source_text, source_name, stem).

    RULES:
    - ``-`` reads stdin; its stem is "stdin"
    - Files must exist and carry a supported extension
    """
    if input_file == STDIN_NAME:
        return sys.stdin.read(), "<stdin>", "stdin"

    input_path = Path(input_file).resolve()
    if not input_path.is_file():
        _fail("File not found: {}".format(input_path))

    ext = input_path.suffix.lower()
    if ext not in SUPPORTED_EXTENSIONS:
        _fail(
            "Unsupported file type '{}'. Supported extensions: {}".format(
                ext, ", ".join(sorted(SUPPORTED_EXTENSIONS))
            )
        )

    return input_path.read_text(encoding="utf-8"), str(input_path), input_path.stem


def _select_formats(formats: Optional[str]) -> List[str]:
    if formats:
        format_keys = [f.strip() for f in formats.split(",") if f.strip()]
    else:
        format_keys = load_default_formats()
    for key in format_keys:
        if key not in FORMATTERS:
            _fail(
                "Unknown format '{}'. Available formats: {}".format(
                    key, ", ".join(sorted(FORMATTERS.keys()))
                )
            )
    return format_keys


def _run(args: argparse.Namespace) -> None:
    """Execute the parse → format → save pipeline for one input."""
    if args.indent_size is not None:
        indent_size = args.indent_size
        if indent_size < 1:
            _fail("--indent-size must be a positive integer, got {}".format(indent_size))
    else:
        try:
            indent_size = load_indent_size()
        except ValueError as e:
            _fail(str(e))

    output_dir: Optional[Path] = None
    if args.output_dir:
        output_dir = Path(args.output_dir).resolve()
        if not output_dir.is_dir():
            _fail("Output directory does not exist: {}".format(output_dir))

    format_keys = _select_formats(args.formats)
    source, source_name, stem = _read_source(args.input_file)

    try:
        document = parse_document(source, source_name)
    except WatError as e:
        _fail("{}: {}".format(source_name, e))

    if args.check:
        canonical = document.to_text(indent_size) + "\n"
        if source != canonical:
            _status("Would reformat: {}".format(source_name))
            sys.exit(1)
        _status("Already formatted: {}".format(source_name))
        return

    saved_files: List[Path] = []
    for key in format_keys:
        formatter = FORMATTERS[key](indent_size=indent_size)
        logger.debug("Running %s formatter", formatter.name)
        for output in formatter.format(document):
            if output_dir is None:
                sys.stdout.write(output.content)
                if not output.content.endswith("\n"):
                    sys.stdout.write("\n")
            else:
                saved_path = _save_output(output, stem, output_dir)
                saved_files.append(saved_path)
                _status("  Saved: {}".format(saved_path.name))

    if output_dir is not None:
        _status("Done! Saved {} file(s) to {}".format(len(saved_files), output_dir))


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable; tests can inspect the parser without running the pipeline.

    RULES:
    - Positional: input_file (required; ``-`` for stdin)
    - Optional: --formats (comma-separated), --output-dir, --indent-size
    - Flags: --check, --verbose
    """
    parser = argparse.ArgumentParser(
        prog="wat_formatter",
        description="Parse a WebAssembly text module and print it in canonical "
                    "form (80-column, width-aware line breaking).",
    )

    parser.add_argument(
        "input_file",
        help="Path to a .wat/.wast file, or '-' to read from stdin.",
    )

    parser.add_argument(
        "--formats",
        default=None,
        help="Comma-separated list of output formats. "
             "Available: {}. Default: from WAT_DEFAULT_FORMATS, else 'wat'.".format(
                 ", ".join(sorted(FORMATTERS.keys()))
             ),
    )

    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: print to stdout).",
    )

    parser.add_argument(
        "--indent-size",
        type=int,
        default=None,
        help="Spaces per nesting level (default: WAT_INDENT_SIZE, else 2).",
    )

    parser.add_argument(
        "--check",
        action="store_true",
        help="Exit with status 1 if the input is not already canonically formatted.",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug output to stderr.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    WHY: This is the function that __main__.py calls and that users
    invoke via ``python -m wat_formatter`` or the ``wat-format`` script.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )
    _run(args)


if __name__ == "__main__":
    main()
