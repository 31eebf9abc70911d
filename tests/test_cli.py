"""End-to-end tests for the command-line interface.

WHY: The CLI is what editors and CI call. Its contract is small but
strict: formatted text on stdout, status on stderr, exit status 1 for
any error or for ``--check`` on a file that would change, and saved
files that never overwrite earlier output.

HOW: Call main() with an explicit argv, capture stdout/stderr with
capsys, and use tmp_path files from conftest.py. SystemExit is asserted
for every failure path.

RULES:
- Nothing is written to stdout when --output-dir is given
- Every failure exits with status 1 and an "Error:" line on stderr,
  except --check, which reports "Would reformat"
"""

import io
import json

import pytest

from wat_formatter.cli import _resolve_output_path, build_parser, main


def _exit_code(argv):
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code


class TestStdout:
    def test_formats_file_to_stdout(self, messy_file, canonical_module, capsys):
        main([str(messy_file)])
        out = capsys.readouterr().out
        assert out == canonical_module + "\n"

    def test_reads_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("(module   )"))
        main(["-"])
        assert capsys.readouterr().out == "(module)\n"

    def test_indent_size_flag(self, messy_file, capsys):
        main([str(messy_file), "--indent-size", "4"])
        assert capsys.readouterr().out.startswith("(module\n    (import")

    def test_indent_size_from_environment(self, messy_file, monkeypatch, capsys):
        monkeypatch.setenv("WAT_INDENT_SIZE", "4")
        main([str(messy_file)])
        assert capsys.readouterr().out.startswith("(module\n    (import")

    def test_flag_overrides_environment(self, messy_file, canonical_module, monkeypatch, capsys):
        monkeypatch.setenv("WAT_INDENT_SIZE", "4")
        main([str(messy_file), "--indent-size", "2"])
        assert capsys.readouterr().out == canonical_module + "\n"

    def test_json_format(self, messy_file, capsys):
        main([str(messy_file), "--formats", "json"])
        data = json.loads(capsys.readouterr().out)
        assert data["source"] == str(messy_file.resolve())

    def test_default_formats_from_environment(self, messy_file, monkeypatch, capsys):
        monkeypatch.setenv("WAT_DEFAULT_FORMATS", "json")
        main([str(messy_file)])
        assert json.loads(capsys.readouterr().out)["tree"]["head"] == "module"


class TestCheck:
    def test_canonical_file_passes(self, canonical_file, capsys):
        main([str(canonical_file), "--check"])
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Already formatted" in captured.err

    def test_messy_file_fails(self, messy_file, capsys):
        assert _exit_code([str(messy_file), "--check"]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Would reformat" in captured.err


class TestOutputDir:
    def test_saves_each_format(self, messy_file, tmp_path, canonical_module, capsys):
        out_dir = tmp_path / "out"
        out_dir.mkdir()
        main([str(messy_file), "--formats", "wat,json", "--output-dir", str(out_dir)])

        assert (out_dir / "sample-formatted.wat").read_text() == canonical_module + "\n"
        assert json.loads((out_dir / "sample-tree.json").read_text())["version"] == "1.0.0"
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Saved 2 file(s)" in captured.err

    def test_never_overwrites(self, messy_file, tmp_path):
        out_dir = tmp_path / "out"
        out_dir.mkdir()
        argv = [str(messy_file), "--output-dir", str(out_dir)]
        main(argv)
        main(argv)
        assert sorted(p.name for p in out_dir.iterdir()) == [
            "sample-formatted-2.wat",
            "sample-formatted.wat",
        ]

    def test_resolve_output_path_counter(self, tmp_path):
        (tmp_path / "a-tree.json").write_text("{}")
        (tmp_path / "a-tree-2.json").write_text("{}")
        assert _resolve_output_path("a", "-tree.json", tmp_path).name == "a-tree-3.json"

    def test_resolve_output_path_without_extension(self, tmp_path):
        (tmp_path / "a-dump").write_text("")
        assert _resolve_output_path("a", "-dump", tmp_path).name == "a-dump-2"
        assert _resolve_output_path("b", "-dump", tmp_path).name == "b-dump"

    def test_missing_output_dir(self, messy_file, tmp_path, capsys):
        assert _exit_code([str(messy_file), "--output-dir", str(tmp_path / "nope")]) == 1
        assert "Output directory does not exist" in capsys.readouterr().err


class TestErrors:
    def test_missing_file(self, tmp_path, capsys):
        assert _exit_code([str(tmp_path / "absent.wat")]) == 1
        assert "File not found" in capsys.readouterr().err

    def test_unsupported_extension(self, tmp_path, capsys):
        path = tmp_path / "module.txt"
        path.write_text("(module)")
        assert _exit_code([str(path)]) == 1
        assert "Unsupported file type '.txt'" in capsys.readouterr().err

    def test_unknown_format(self, messy_file, capsys):
        assert _exit_code([str(messy_file), "--formats", "wat,xml"]) == 1
        assert "Unknown format 'xml'" in capsys.readouterr().err

    def test_bad_indent_size(self, messy_file, capsys):
        assert _exit_code([str(messy_file), "--indent-size", "0"]) == 1
        assert "--indent-size" in capsys.readouterr().err

    def test_bad_environment_indent_size(self, messy_file, monkeypatch, capsys):
        monkeypatch.setenv("WAT_INDENT_SIZE", "abc")
        assert _exit_code([str(messy_file)]) == 1
        err = capsys.readouterr().err
        assert err.startswith("Error: WAT_INDENT_SIZE must be a positive integer")
        assert "Traceback" not in err

    def test_parse_error_reports_position(self, tmp_path, capsys):
        path = tmp_path / "broken.wat"
        path.write_text("(module\n  (func i32.const 1 f32.add))")
        assert _exit_code([str(path)]) == 1
        err = capsys.readouterr().err
        assert err.startswith("Error: ")
        assert "2:21:" in err

    def test_stray_close_paren(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("(module))"))
        assert _exit_code(["-"]) == 1
        assert "<stdin>" in capsys.readouterr().err


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args(["x.wat"])
        assert args.formats is None
        assert args.output_dir is None
        assert args.indent_size is None
        assert not args.check
        assert not args.verbose
