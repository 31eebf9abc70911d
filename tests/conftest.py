"""Shared test fixtures for the wat_formatter test suite.

WHY: Several test modules need the same sample module, both in messy
hand-written form and in its canonical rendering. Centralizing them here
avoids duplication and keeps every test using the same verified text.

HOW: Module-level constants hold the source texts; fixtures hand out
copies, a Cursor factory, and sample files written to tmp_path. An
autouse fixture clears the WAT_* variables so every test starts from
the built-in defaults.

RULES:
- CANONICAL_MODULE is exactly what the printer produces for MESSY_MODULE
  at indent size 2 (the default), with no trailing newline
- MESSY_MODULE mixes folded and unfolded notation, comments, and
  irregular whitespace on purpose
"""

from pathlib import Path
from typing import Callable

import pytest

from wat_formatter.reader.cursor import Cursor


# ---------------------------------------------------------------------------
# Sample module, hand-written and canonical
# ---------------------------------------------------------------------------

MESSY_MODULE = """\
;; sample module
(module (import "env" "log" (func $log (param i32)))
  (memory $mem (export "memory") 1) (global $counter (mut i32) (i32.const 0))
  (func $add (export "add") (param $a i32) (param $b i32) (result i32)
    (i32.add
       (local.get $a)   (; first (; nested ;) operand ;)
       (local.get $b)))
  (func $bump
    global.get $counter
    i32.const 1
    i32.add
    global.set $counter)
  (data (i32.const 8) "hi") (export "bump" (func $bump)))
"""

CANONICAL_MODULE = """\
(module
  (import "env" "log" (func $log (param i32)))
  (memory $mem (export "memory") 1)
  (global $counter (mut i32) (i32.const 0))
  (func
    $add
    (export "add")
    (param $a i32)
    (param $b i32)
    (result i32)
    (i32.add (local.get $a) (local.get $b))
  )
  (func $bump global.get $counter i32.const 1 i32.add global.set $counter)
  (data (i32.const 8) "hi")
  (export "bump" (func $bump))
)"""


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's .env or shell settings out of every test."""
    monkeypatch.delenv("WAT_INDENT_SIZE", raising=False)
    monkeypatch.delenv("WAT_DEFAULT_FORMATS", raising=False)


@pytest.fixture
def messy_module() -> str:
    return MESSY_MODULE


@pytest.fixture
def canonical_module() -> str:
    return CANONICAL_MODULE


@pytest.fixture
def cursor_for() -> Callable[[str], Cursor]:
    """Factory: ``cursor_for("i32.const 1")`` returns a fresh Cursor."""
    return Cursor.from_source


@pytest.fixture
def messy_file(tmp_path: Path) -> Path:
    path = tmp_path / "sample.wat"
    path.write_text(MESSY_MODULE, encoding="utf-8")
    return path


@pytest.fixture
def canonical_file(tmp_path: Path) -> Path:
    path = tmp_path / "canonical.wat"
    path.write_text(CANONICAL_MODULE + "\n", encoding="utf-8")
    return path
