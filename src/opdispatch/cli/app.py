"""Typer CLI entrypoints."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import rich
import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape

from opdispatch.config.settings import load_settings
from opdispatch.core.errors import DispatchError
from opdispatch.eval.machine import EvalError, Evaluator
from opdispatch.eval.repl import REPL, operator_table
from opdispatch.eval.value import show
from opdispatch.logging_utils import configure_logging
from opdispatch.surface.lexer import LexerError
from opdispatch.surface.parser import ParseError

app = typer.Typer(name="opdispatch", help="Operator overload dispatch playground", add_completion=False)


@app.callback(invoke_without_command=True)
def _default(ctx: typer.Context) -> None:
    if ctx.invoked_subcommand is None:
        repl()


@app.command("eval")
def eval_command(
    source: Annotated[str | None, typer.Argument(help="Expressions separated by ';' or newlines")] = None,
    file: Annotated[Path | None, typer.Option("--file", "-f", help="Read the program from a file")] = None,
    trace: Annotated[bool, typer.Option("--trace", help="Log dispatch decisions")] = False,
    no_prelude: Annotated[bool, typer.Option("--no-prelude", help="Start without demo types")] = False,
) -> None:
    """Evaluate a program and print the value of its last statement."""
    settings = load_settings(trace=trace or None, load_prelude=False if no_prelude else None)
    configure_logging(trace=settings.engine.trace)

    if file is not None:
        text, filename = file.read_text(encoding="utf-8"), str(file)
    elif source is not None:
        text, filename = source, "<argv>"
    else:
        raise typer.BadParameter("pass an expression or --file")

    logger.info("eval.start file={} trace={}", filename, settings.engine.trace)
    evaluator = Evaluator(load_prelude=settings.repl.load_prelude, trace=settings.engine.trace)
    try:
        result = evaluator.run(text, filename)
    except (LexerError, ParseError, EvalError, DispatchError, TypeError, ValueError, ArithmeticError) as e:
        # Overrides and host primitives raise plain Python errors
        rich.print(f"[red]{type(e).__name__}:[/red] {escape(str(e))}", file=sys.stderr)
        raise typer.Exit(code=1) from None
    typer.echo(show(result))


@app.command()
def repl(
    trace: Annotated[bool, typer.Option("--trace", help="Log dispatch decisions")] = False,
    no_prelude: Annotated[bool, typer.Option("--no-prelude", help="Start without demo types")] = False,
) -> None:
    """Run the interactive shell."""
    settings = load_settings(trace=trace or None, load_prelude=False if no_prelude else None)
    configure_logging(profile="repl", trace=settings.engine.trace)
    logger.info("repl.start home={}", str(settings.repl.resolve_home()))
    REPL(settings).run()
    logger.info("repl.stop")


@app.command()
def operators() -> None:
    """List overridable operators and their method names."""
    Console().print(operator_table())
