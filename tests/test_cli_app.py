import importlib
import io
from pathlib import Path

import pytest
from rich.console import Console
from typer.testing import CliRunner

from opdispatch.config.settings import load_settings
from opdispatch.eval.repl import REPL

cli_app_module = importlib.import_module("opdispatch.cli.app")


@pytest.fixture(autouse=True)
def _no_logging_setup(monkeypatch) -> None:
    monkeypatch.setattr(cli_app_module, "configure_logging", lambda **_kwargs: None)


def test_eval_prints_last_value() -> None:
    result = CliRunner().invoke(cli_app_module.app, ["eval", "x = Number(5); x += 1; x < 10"])
    assert result.exit_code == 0
    assert result.output.strip() == "true"


def test_eval_native_arithmetic() -> None:
    result = CliRunner().invoke(cli_app_module.app, ["eval", "1 + 2 * 3"])
    assert result.exit_code == 0
    assert result.output.strip() == "7"


def test_eval_reads_file(tmp_path: Path) -> None:
    program = tmp_path / "prog.op"
    program.write_text("v = Vector(1, 2)\nv * 2\n", encoding="utf-8")
    result = CliRunner().invoke(cli_app_module.app, ["eval", "--file", str(program)])
    assert result.exit_code == 0
    assert result.output.strip() == "Vector(2, 4)"


def test_eval_dispatch_failure_exits_nonzero() -> None:
    result = CliRunner().invoke(cli_app_module.app, ["eval", "Number(5) - 1"])
    assert result.exit_code == 1
    assert "InvalidOperator" in result.output


def test_eval_without_prelude() -> None:
    result = CliRunner().invoke(cli_app_module.app, ["eval", "--no-prelude", "Number(1)"])
    assert result.exit_code == 1
    assert "Undefined name: Number" in result.output


def test_eval_requires_input() -> None:
    result = CliRunner().invoke(cli_app_module.app, ["eval"])
    assert result.exit_code == 2


def test_operators_lists_registry() -> None:
    result = CliRunner().invoke(cli_app_module.app, ["operators"])
    assert result.exit_code == 0
    assert "__compareTo" in result.output
    assert "__bitwiseNot" in result.output


def test_default_command_runs_repl(monkeypatch) -> None:
    called = {"run": False}

    class _FakeREPL:
        def __init__(self, settings) -> None:
            assert settings.repl.load_prelude is True

        def run(self) -> None:
            called["run"] = True

    monkeypatch.setattr(cli_app_module, "REPL", _FakeREPL)
    result = CliRunner().invoke(cli_app_module.app, [])
    assert result.exit_code == 0
    assert called["run"] is True


def test_repl_flags_reach_settings(monkeypatch) -> None:
    seen = {}

    class _FakeREPL:
        def __init__(self, settings) -> None:
            seen["trace"] = settings.engine.trace
            seen["prelude"] = settings.repl.load_prelude

        def run(self) -> None:
            return None

    monkeypatch.setattr(cli_app_module, "REPL", _FakeREPL)
    result = CliRunner().invoke(cli_app_module.app, ["repl", "--trace", "--no-prelude"])
    assert result.exit_code == 0
    assert seen == {"trace": True, "prelude": False}


class TestReplHandle:
    @pytest.fixture
    def shell(self, monkeypatch, tmp_path: Path) -> REPL:
        monkeypatch.setenv("OPDISPATCH_REPL_HOME", str(tmp_path))
        return REPL(load_settings(), console=Console(file=io.StringIO(), width=120))

    @staticmethod
    def output(shell: REPL) -> str:
        return shell.console.file.getvalue()

    def test_state_persists_between_lines(self, shell) -> None:
        assert shell.handle("x = Number(5)") is True
        assert shell.handle("x += 1; x") is True
        assert self.output(shell).splitlines()[-1] == "Number(6)"

    def test_dispatch_error_is_reported(self, shell) -> None:
        shell.handle("Number(5) - 1")
        assert "InvalidOperator: Unsupported operand types for -: 'Number' and 'int'" in self.output(shell)

    def test_syntax_error_shows_pointer(self, shell) -> None:
        shell.handle("1 + )")
        out = self.output(shell)
        assert "Syntax error" in out
        assert out.rstrip().endswith("^")

    def test_override_error_is_reported(self, shell) -> None:
        shell.handle("Vector(1, 2) * Vector(1, 2)")
        assert "TypeError" in self.output(shell)

    def test_commands(self, shell) -> None:
        assert shell.handle(":env") is True
        assert "Number : class [__add, __compareTo]" in self.output(shell)
        shell.handle(":ops")
        assert "__shiftRight" in self.output(shell)
        shell.handle(":nope")
        assert "Unknown command: :nope" in self.output(shell)
        assert shell.handle(":quit") is False
