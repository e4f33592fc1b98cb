"""Evaluator for the expression language.

Surface forms are expanded to canonical form first; every operator in
canonical form is handed to the dispatch engine.
"""

from __future__ import annotations

from typing import Any

from loguru import logger

from opdispatch.core.resolver import Resolver
from opdispatch.eval.prelude import prelude_globals, using_resolver
from opdispatch.eval.value import Builtin, ClassDef, ValueHost, show
from opdispatch.surface.ast import (
    Apply,
    Assign,
    BinaryOp,
    Call,
    CompareTest,
    CompoundAssign,
    IncDec,
    Literal,
    Name,
    Not,
    Term,
    UnaryOp,
)
from opdispatch.surface.expand import Expander
from opdispatch.surface.parser import parse_program
from opdispatch.utils.location import Location


class EvalError(Exception):
    """Error raised by the evaluator itself, not by dispatch or user code."""

    def __init__(self, message: str, location: Location | None = None):
        super().__init__(f"{location}: {message}" if location else message)
        self.location = location


class Evaluator:
    """Strict left-to-right evaluator over a flat global environment."""

    def __init__(
        self,
        global_env: dict[str, Any] | None = None,
        *,
        resolver: Resolver | None = None,
        load_prelude: bool = True,
        trace: bool = False,
    ) -> None:
        self.global_env: dict[str, Any] = prelude_globals() if load_prelude else {}
        if global_env is not None:
            self.global_env.update(global_env)
        self.resolver = resolver if resolver is not None else Resolver(ValueHost(), trace=trace)
        self.expander = Expander()

    def run(self, source: str, filename: str = "<stdin>") -> Any:
        """Parse and evaluate every statement; return the last value."""
        result: Any = None
        statements = parse_program(source, filename)
        with using_resolver(self.resolver):
            for statement in statements:
                result = self._evaluate(statement)
        return result

    def evaluate(self, term: Term) -> Any:
        with using_resolver(self.resolver):
            return self._evaluate(term)

    def _evaluate(self, term: Term) -> Any:
        match term:
            case Literal(value):
                return value

            case Name(name, loc):
                if name not in self.global_env:
                    raise EvalError(f"Undefined name: {name}", loc)
                return self.global_env[name]

            case Call(func, args, loc):
                callee = self._evaluate(func)
                arg_values = tuple(self._evaluate(arg) for arg in args)
                return self._call(callee, arg_values, loc)

            case Assign(target, value, yield_previous, loc):
                previous = self._evaluate(Name(target, loc)) if yield_previous else None
                new_value = self._evaluate(value)
                self.global_env[target] = new_value
                return previous if yield_previous else new_value

            case Apply(kind, (operand,)):
                return self.resolver.resolve_unary(kind, self._evaluate(operand))

            case Apply(kind, (left, right)):
                left_value = self._evaluate(left)
                right_value = self._evaluate(right)
                return self.resolver.resolve_binary(kind, left_value, right_value)

            case Not(operand):
                return not self._evaluate(operand)

            case CompareTest(Apply(_, (left, right)), expected, negate, equality_shaped):
                left_value = self._evaluate(left)
                right_value = self._evaluate(right)
                if equality_shaped:
                    result = self.resolver.compare_for_equality(left_value, right_value)
                else:
                    result = self.resolver.compare(left_value, right_value)
                return (result != expected) if negate else (result == expected)

            case BinaryOp() | UnaryOp() | CompoundAssign() | IncDec():
                return self._evaluate(self.expander.expand(term))

            case _:
                raise EvalError(f"Cannot evaluate {term!r}", getattr(term, "location", None))

    def _call(self, callee: Any, args: tuple[Any, ...], loc: Location | None) -> Any:
        match callee:
            case ClassDef():
                if len(args) != len(callee.fields):
                    raise EvalError(
                        f"{callee.name} expects {len(callee.fields)} arguments, got {len(args)}", loc
                    )
                instance = callee.instantiate(args)
                logger.debug("eval.new class={} value={}", callee.name, instance)
                return instance
            case Builtin(_, impl):
                return impl(*args)
            case _:
                raise EvalError(f"{show(callee)} is not callable", loc)
