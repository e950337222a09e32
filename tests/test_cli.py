# =============================================================================
# test_cli.py - kparse Command-Line Tests
# =============================================================================
# Tests for the kparse command: reading standard input and files, token and
# tree dumps, configuration from flags and the environment, and exit codes.
# =============================================================================

import pytest
from click.testing import CliRunner

from kaleido import __version__
from kaleido.cli.errors import ExitCode, handle_cli_exception
from kaleido.cli.kparse import main

CLEAN_ENV = {
    "KALEIDO_PROMPT": None,
    "KALEIDO_SHOW_PROMPT": None,
    "KALEIDO_STRICT_NUMBERS": None,
}


@pytest.fixture
def runner():
    return CliRunner()


def invoke(runner, args, input=None, **env):
    """Invoke kparse with a clean KALEIDO_* environment plus overrides."""
    return runner.invoke(main, args, input=input, env={**CLEAN_ENV, **env})


# =============================================================================
# Parsing Standard Input
# =============================================================================

class TestStandardInput:
    """Without a file argument, kparse reads standard input."""

    def test_reports_each_form(self, runner):
        result = invoke(runner, ["--no-prompt"], "def f(x) x*2; extern g(a)\nf(1)\n")
        assert result.exit_code == ExitCode.SUCCESS
        assert result.output.splitlines() == [
            "parsed definition",
            "parsed extern",
            "parsed top level expression",
        ]

    def test_prompt_shown_by_default(self, runner):
        result = invoke(runner, [], "1\n")
        assert result.exit_code == 0
        assert result.output.startswith("ready> ")
        assert "parsed top level expression" in result.output

    def test_prompt_from_environment(self, runner):
        result = invoke(runner, [], "1\n", KALEIDO_PROMPT="kal> ")
        assert result.output.startswith("kal> ")

    def test_prompt_disabled_from_environment(self, runner):
        result = invoke(runner, [], "1\n", KALEIDO_SHOW_PROMPT="0")
        assert "ready>" not in result.output

    def test_failed_forms_do_not_change_exit_code(self, runner):
        result = invoke(runner, ["--no-prompt"], ") 2")
        assert result.exit_code == ExitCode.SUCCESS
        assert "Error: unknown token when expecting an expression" in result.output
        assert "unknown token type: )" in result.output
        assert "parsed top level expression" in result.output

    def test_empty_input(self, runner):
        result = invoke(runner, ["--no-prompt"], "")
        assert result.exit_code == 0
        assert result.output == ""


# =============================================================================
# Parsing Files
# =============================================================================

class TestFileInput:
    """A file argument is parsed without a prompt."""

    def test_parse_file(self, runner, tmp_path):
        source = tmp_path / "prog.kal"
        source.write_text("extern sin(x)\nsin(1)\n")
        result = invoke(runner, [str(source)])
        assert result.exit_code == 0
        assert "ready>" not in result.output
        assert result.output.splitlines() == ["parsed extern", "parsed top level expression"]

    def test_prompt_flag_with_file(self, runner, tmp_path):
        source = tmp_path / "prog.kal"
        source.write_text("1")
        result = invoke(runner, ["--prompt", str(source)])
        assert "ready> " in result.output

    def test_missing_file(self, runner, tmp_path):
        result = invoke(runner, [str(tmp_path / "missing.kal")])
        assert result.exit_code == 2

    def test_undecodable_bytes(self, runner, tmp_path):
        """Invalid UTF-8 becomes character tokens; the rest still parses."""
        source = tmp_path / "bytes.kal"
        source.write_bytes(b"1\n\xff\xfe 2\n")
        result = invoke(runner, [str(source)])
        assert result.exit_code == ExitCode.SUCCESS
        assert result.output.count("parsed top level expression") == 2
        assert "Error: unknown token when expecting an expression" in result.output

    def test_verbose_error_summary(self, runner, tmp_path):
        source = tmp_path / "bad.kal"
        source.write_text("foo(1\n")
        result = invoke(runner, ["-v", str(source)])
        assert result.exit_code == 0
        assert "bad.kal:2:1: error: expected ',' or ')' in argument list" in result.output
        assert "1 error" in result.output


# =============================================================================
# Dump Modes
# =============================================================================

class TestDumps:
    """--tokens and --ast print intermediate results."""

    def test_tokens(self, runner):
        result = invoke(runner, ["--tokens"], "def f(x) 1.5")
        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "token type: def",
            "token type: ident. f",
            "unknown token type: (",
            "token type: ident. x",
            "unknown token type: )",
            "token type: number. 1.5",
            "token type: eof",
        ]

    def test_tokens_verbose_locations(self, runner):
        result = invoke(runner, ["--tokens", "-v"], "x")
        assert "<stdin>:1:1: token type: ident. x" in result.output

    def test_tokens_strict_number_error(self, runner):
        result = invoke(runner, ["--tokens", "--strict-numbers"], "1.2.3 x")
        assert result.exit_code == 0
        assert "Error: malformed number literal '1.2.3'" in result.output
        assert "token type: ident. x" in result.output

    def test_ast(self, runner):
        result = invoke(runner, ["--no-prompt", "--ast"], "def add(x y) x+y")
        assert result.exit_code == 0
        assert "Function add(x, y)\n  BinaryOp '+'\n    Variable x\n    Variable y" in result.output


# =============================================================================
# Configuration and Errors
# =============================================================================

class TestConfiguration:
    """Flags override environment settings; bad settings are rejected."""

    def test_strict_numbers_flag(self, runner):
        result = invoke(runner, ["--no-prompt", "--strict-numbers"], "1.2.3; 4")
        assert result.exit_code == 0
        assert "Error: malformed number literal '1.2.3'" in result.output
        assert "parsed top level expression" in result.output

    def test_strict_numbers_from_environment(self, runner):
        result = invoke(runner, ["--no-prompt"], "1..2", KALEIDO_STRICT_NUMBERS="yes")
        assert "malformed number literal" in result.output

    def test_lenient_flag_overrides_environment(self, runner):
        result = invoke(
            runner, ["--no-prompt", "--lenient-numbers"], "1..2",
            KALEIDO_STRICT_NUMBERS="yes",
        )
        assert "malformed" not in result.output
        assert "parsed top level expression" in result.output

    def test_invalid_environment_value(self, runner):
        result = invoke(runner, [], "1", KALEIDO_SHOW_PROMPT="maybe")
        assert result.exit_code == ExitCode.INVALID_ARGS
        assert "KALEIDO_SHOW_PROMPT must be a boolean" in result.output

    def test_version(self, runner):
        result = invoke(runner, ["--version"])
        assert result.exit_code == 0
        assert f"kparse, version {__version__}" in result.output


class TestExitCodes:
    """handle_cli_exception maps exceptions to exit codes."""

    def test_undecodable_input_is_invalid(self, capsys):
        error = UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")
        with pytest.raises(SystemExit) as exc_info:
            handle_cli_exception(error)
        assert exc_info.value.code == ExitCode.INVALID_ARGS
        assert capsys.readouterr().err.startswith("Error: 'utf-8' codec")

    def test_unexpected_error_is_internal(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            handle_cli_exception(RuntimeError("boom"))
        assert exc_info.value.code == ExitCode.INTERNAL_ERROR
        assert "Internal error: boom" in capsys.readouterr().err
