"""Interactive shell for the expression language."""

from __future__ import annotations

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.history import FileHistory
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from opdispatch.config.settings import Settings
from opdispatch.core.errors import DispatchError
from opdispatch.core.operators import REGISTRY
from opdispatch.eval.machine import EvalError, Evaluator
from opdispatch.eval.value import ClassDef, show
from opdispatch.surface.lexer import LexerError
from opdispatch.surface.parser import ParseError

COMMANDS = [":quit", ":q", ":help", ":h", ":env", ":ops"]

HELP_TEXT = """\
Enter expressions or assignments, separated by ';'.
  x = Number(5); x += 1; x < 10
Commands:
  :env   show bindings
  :ops   show overridable operators
  :help  show this message
  :quit  exit"""


def operator_table() -> Table:
    """Registry contents as a rich table."""
    table = Table(title="Overridable operators")
    table.add_column("symbol")
    table.add_column("method")
    table.add_column("arity")
    table.add_column("result")
    for spec in REGISTRY.values():
        table.add_row(spec.symbol, spec.method_name, spec.arity.name.lower(), spec.policy.value)
    return table


class REPL:
    """Read-eval-print loop over one persistent ``Evaluator``."""

    def __init__(self, settings: Settings, console: Console | None = None) -> None:
        self.settings = settings
        self.console = console or Console()
        self.evaluator = Evaluator(
            load_prelude=settings.repl.load_prelude,
            trace=settings.engine.trace,
        )

    def run(self) -> None:
        session = self._build_session()
        self.console.print("[bold]opdispatch[/bold] - type :help for commands")
        while True:
            try:
                line = session.prompt(self.settings.repl.prompt).strip()
            except KeyboardInterrupt:
                continue
            except EOFError:
                break
            if not line:
                continue
            if not self.handle(line):
                break

    def handle(self, line: str) -> bool:
        """Process one input line. Returns False when the shell should exit."""
        if line.startswith(":"):
            return self._command(line)

        try:
            result = self.evaluator.run(line)
        except (LexerError, ParseError) as e:
            self.console.print(f"[red]Syntax error:[/red] {escape(str(e))}", highlight=False)
            pointer = e.location.pointer(line)
            if pointer:
                self.console.print(pointer, markup=False, highlight=False)
        except DispatchError as e:
            self.console.print(f"[red]{type(e).__name__}:[/red] {escape(str(e))}", highlight=False)
        except EvalError as e:
            self.console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False)
        except (TypeError, ValueError, ArithmeticError) as e:
            # Raised by an override or a host primitive
            self.console.print(f"[red]{type(e).__name__}:[/red] {escape(str(e))}", highlight=False)
        else:
            self.console.print(show(result), markup=False, highlight=False)
        return True

    def _command(self, line: str) -> bool:
        match line.split()[0]:
            case ":quit" | ":q":
                return False
            case ":help" | ":h":
                self.console.print(HELP_TEXT, markup=False)
            case ":env":
                for name, value in sorted(self.evaluator.global_env.items()):
                    if isinstance(value, ClassDef):
                        overrides = ", ".join(k.spec.method_name for k in value.table) or "-"
                        self.console.print(f"{name} : class [{overrides}]", markup=False)
                    else:
                        self.console.print(f"{name} = {show(value)}", markup=False)
            case ":ops":
                self.console.print(operator_table())
            case other:
                self.console.print(f"Unknown command: {other}", markup=False)
        return True

    def _build_session(self) -> PromptSession[str]:
        history_file = self.settings.repl.history_file
        history_file.parent.mkdir(parents=True, exist_ok=True)
        completer = WordCompleter(
            lambda: COMMANDS + sorted(self.evaluator.global_env),
            ignore_case=False,
            WORD=True,
        )
        return PromptSession(history=FileHistory(str(history_file)), completer=completer)
