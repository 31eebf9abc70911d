"""Package entry point for ``python -m wat_formatter``.

WHY: Users run the formatter as ``python -m wat_formatter add.wat``.
Python's ``-m`` flag looks for ``__main__.py`` inside the package and
executes it.

HOW: Delegates to the CLI's main() function.
"""

from wat_formatter.cli import main

if __name__ == "__main__":
    main()
