import io
import json

import pyperclip
import pytest

from culator import CLI


class NoStdin:
    def __iter__(self):
        raise AssertionError("stdin must not be read")


def run_main(argv, capsys):
    status = CLI.main(argv)
    captured = capsys.readouterr()
    return status, captured.out, captured.err


def test_evaluates_arguments_in_order(capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", NoStdin())
    status, out, err = run_main(["1+2", "2^3^2", "max(1+1, sqrt(9))"], capsys)

    assert status == CLI.EXIT_SUCCESS
    assert out == "3\n512\n3\n"
    assert err == ""


def test_precision_option(capsys):
    assert run_main(["-p", "5", "pi"], capsys)[1] == "3.1416\n"
    assert run_main(["--precision=3", "1/3"], capsys)[1] == "0.333\n"
    assert run_main(["--precision", "2", "--", "-pi"], capsys)[1] == "-3.1\n"


@pytest.mark.parametrize("text, expected", [
    ("abc", 0), ("7x", 7), (" -2", -2), ("", 0),
    ("100000000000", CLI.INT_MAX), ("-100000000000", CLI.INT_MIN),
])
def test_lenient_int(text, expected):
    assert CLI.lenient_int(text) == expected


def test_non_numeric_precision_prints_one_digit(capsys):
    assert run_main(["-p", "abc", "pi"], capsys) == (CLI.EXIT_SUCCESS, "3\n", "")


@pytest.mark.parametrize("flag", ["-h", "--help", "-?"])
def test_help_exits_successfully(flag, capsys):
    with pytest.raises(SystemExit) as info:
        CLI.main([flag, "1+1"])
    out = capsys.readouterr().out
    assert info.value.code == 0
    assert out.startswith("usage: culator [OPTIONS] [EXPRESSION ...]")
    assert "--precision" in out


@pytest.mark.parametrize("argv", [["--bogus", "1+1"], ["-p"]])
def test_invalid_option(argv, capsys):
    with pytest.raises(SystemExit) as info:
        CLI.main(argv)
    captured = capsys.readouterr()
    assert info.value.code == CLI.EXIT_FAILURE
    assert captured.out == ""
    assert "Try 'culator --help' for more information." in captured.err


def test_fatal_error_stops_the_run(capsys):
    status, out, err = run_main(["1", "(1+2", "5"], capsys)

    assert status == CLI.EXIT_FAILURE
    assert out == "1\n"
    assert "ERROR: Expected token ')', got 'EOF'" in err


def test_keep_going(capsys):
    status, out, err = run_main(["-k", "(1+2", "5"], capsys)

    assert status == CLI.EXIT_FAILURE
    assert out == "5\n"
    assert err.count("ERROR:") == 1


def test_unknown_name_warns_and_continues(capsys):
    status, out, err = run_main(["foo+1"], capsys)

    assert status == CLI.EXIT_SUCCESS
    assert out == "1\n"
    assert err == "WARNING: Unknown name 'foo', skipping\n"


def test_blank_expressions_are_silent(capsys):
    assert run_main(["", "   "], capsys) == (CLI.EXIT_SUCCESS, "", "")


def test_same_expression_twice(capsys):
    out = run_main(["sin(1)/3", "sin(1)/3"], capsys)[1]
    first, second = out.splitlines()
    assert first == second


def test_reads_stdin_lines(capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("1+1\n\n  \n2*3\n4"))
    status, out, err = run_main([], capsys)

    # the unterminated "4" is dropped
    assert status == CLI.EXIT_SUCCESS
    assert out == "2\n6\n"
    assert err == ""


def test_stdin_stops_at_fatal_error(capsys, monkeypatch):
    stdin = io.StringIO("1\n2+\n3\n")
    monkeypatch.setattr("sys.stdin", stdin)
    status, out, err = run_main([], capsys)

    assert status == CLI.EXIT_FAILURE
    assert out == "1\n"
    assert "ERROR: Unexpected token 'EOF'" in err
    assert stdin.readline() == "3\n"


def test_read_lines_drops_partial_line():
    assert list(CLI.read_lines(io.StringIO("a\nb"))) == ["a"]
    assert list(CLI.read_lines(io.StringIO(""))) == []


def test_settings_file(tmp_path, monkeypatch, capsys):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"precision": 4, "keep_going": True}), encoding="utf-8")
    monkeypatch.setenv("CULATOR_CONFIG", str(path))

    status, out, _ = run_main(["(", "pi"], capsys)
    assert status == CLI.EXIT_FAILURE
    assert out == "3.142\n"
    assert run_main(["-p", "2", "pi"], capsys)[1] == "3.1\n"


def test_debug_setting_traces_ignored_input(tmp_path, monkeypatch, capsys):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"debug": True}), encoding="utf-8")
    monkeypatch.setenv("CULATOR_CONFIG", str(path))

    status, out, err = run_main(["1 2"], capsys)
    assert out == "1\n"
    assert "DEBUG: Ignoring input after position 2" in err


def test_copy_last_result(capsys, monkeypatch):
    copied = []
    monkeypatch.setattr(CLI.pyperclip, "copy", copied.append)

    status, out, _ = run_main(["-c", "1+1", "2+2", ""], capsys)
    assert status == CLI.EXIT_SUCCESS
    assert out == "2\n4\n"
    assert copied == ["4"]


def test_copy_failure_is_a_warning(capsys, monkeypatch):
    def broken_copy(text):
        raise pyperclip.PyperclipException("no clipboard")

    monkeypatch.setattr(CLI.pyperclip, "copy", broken_copy)

    status, out, err = run_main(["--copy", "1+1"], capsys)
    assert status == CLI.EXIT_SUCCESS
    assert out == "2\n"
    assert "WARNING: Could not copy result to clipboard: no clipboard" in err


def test_double_dash_ends_options(capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", NoStdin())
    status, out, err = run_main(["--", "-+-5", "-pi"], capsys)

    assert status == CLI.EXIT_SUCCESS
    assert out == "5\n-3.14159265358979\n"
    assert err == ""


def test_leading_minus_needs_double_dash(capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", NoStdin())
    # a bare negative number is taken as an expression
    assert run_main(["-2"], capsys) == (CLI.EXIT_SUCCESS, "-2\n", "")

    with pytest.raises(SystemExit) as info:
        CLI.main(["-2+3"])
    assert info.value.code == CLI.EXIT_FAILURE
    assert "Try 'culator --help'" in capsys.readouterr().err

    assert run_main(["--", "-2+3"], capsys)[1] == "1\n"


def test_huge_precision_is_clamped(capsys):
    assert run_main(["-p", "100000000000", "1/4"], capsys) == (CLI.EXIT_SUCCESS, "0.25\n", "")
    assert run_main(["-p", "-100000000000", "pi"], capsys)[1] == "3.14159\n"


def test_deep_nesting_with_large_configured_depth(tmp_path, monkeypatch, capsys):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"max_depth": 5000}), encoding="utf-8")
    monkeypatch.setenv("CULATOR_CONFIG", str(path))

    status, out, err = run_main(["(" * 1500 + "1" + ")" * 1500, "2"], capsys)
    assert status == CLI.EXIT_FAILURE
    assert out == ""
    assert "ERROR: Expression too deeply nested." in err
    assert "Traceback" not in err
