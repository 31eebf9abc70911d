"""Unit tests for environment-driven configuration.

WHY: A typo in .env (``WAT_INDENT_SIZE=two``) must fail loudly at start-up
rather than silently print with the wrong indentation.

HOW: Set variables with monkeypatch and call the loaders directly.
"""

import pytest

from wat_formatter.config import (
    CANONICAL_WIDTH,
    SUPPORTED_EXTENSIONS,
    load_default_formats,
    load_indent_size,
)


class TestIndentSize:
    def test_default(self, monkeypatch):
        monkeypatch.delenv("WAT_INDENT_SIZE", raising=False)
        assert load_indent_size() == 2

    def test_blank_means_default(self, monkeypatch):
        monkeypatch.setenv("WAT_INDENT_SIZE", "  ")
        assert load_indent_size() == 2

    def test_override(self, monkeypatch):
        monkeypatch.setenv("WAT_INDENT_SIZE", "4")
        assert load_indent_size() == 4

    @pytest.mark.parametrize("raw", ["two", "0", "-3"])
    def test_invalid(self, monkeypatch, raw):
        monkeypatch.setenv("WAT_INDENT_SIZE", raw)
        with pytest.raises(ValueError, match="WAT_INDENT_SIZE"):
            load_indent_size()


class TestDefaultFormats:
    def test_default(self, monkeypatch):
        monkeypatch.delenv("WAT_DEFAULT_FORMATS", raising=False)
        assert load_default_formats() == ["wat"]

    def test_list(self, monkeypatch):
        monkeypatch.setenv("WAT_DEFAULT_FORMATS", "wat, json,")
        assert load_default_formats() == ["wat", "json"]


class TestConstants:
    def test_width_is_fixed(self):
        assert CANONICAL_WIDTH == 80

    def test_extensions(self):
        assert SUPPORTED_EXTENSIONS == {".wat", ".wast"}
